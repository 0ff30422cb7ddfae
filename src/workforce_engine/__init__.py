"""Workforce time & leave engine.

Feature packages (shifts, attendance, leave, payroll) each follow the same
layout: a dataclass model, a repository Protocol, a MySQL repository, a service
and a thin Flask controller.
"""
