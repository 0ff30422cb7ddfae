from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables

from .common.http import register_error_handlers
from .attendance.controller import register as register_attendance
from .leave.controller import register as register_leave
from .payroll.controller import register as register_payroll
from .shifts.controller import register as register_shifts

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the JSON API.

    ``container`` lets callers (tests, scripts) supply pre-built services;
    otherwise one is built against the configured MySQL database.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        container = build_container(
            db_config=db_config,
            grace_minutes=int(getattr(settings, "GRACE_MINUTES", 15)),
        )

    register_error_handlers(app)
    register_shifts(app, container)
    register_attendance(app, container)
    register_leave(app, container)
    register_payroll(app, container)

    return app
