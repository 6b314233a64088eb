from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema
from .leaves.controller import register as register_leaves
from .payroll.controller import register as register_payroll
from .tasks.controller import register as register_tasks
from .wallet.controller import register as register_wallet

log = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app; a prebuilt container skips database wiring."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log.info(
        "settings=%s db=%s@%s:%s/%s tz=%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        getattr(settings, "BUSINESS_TIMEZONE", "-"),
    )

    if container is None:
        container = build_container(db_config=db_config, settings=settings)
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn, str(db_config.get("database")))

    register_error_handlers(app)
    register_attendance(app, container)
    register_leaves(app, container)
    register_payroll(app, container)
    register_tasks(app, container)
    register_wallet(app, container)

    return app
