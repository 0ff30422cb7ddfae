"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_GRACE_MINUTES = 15
DEFAULT_UPCOMING_DAYS = 7
DEFAULT_LIST_LIMIT = 200
TENANT_HEADER = "X-Tenant-Id"
ROLE_HEADER = "X-Role"
