from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from .common.http import register_error_handlers
from .config import get_settings_module
from .container import build_container
from .database.bootstrap import apply_schema, ensure_admin_user, list_tables
from .database.connection import DBConfig
from .invoices.controller import register as register_invoices
from .leaves.controller import register as register_leaves
from .notifications.controller import register as register_notifications
from .payroll.controller import register as register_payroll
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "database" / "schema.sql"


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        target = DBConfig.from_dict(db_config, default_database="hr_portal")
        apply_schema(target, schema_path=SCHEMA_PATH)
        admin_email = getattr(settings, "ADMIN_EMAIL", None)
        admin_password = getattr(settings, "ADMIN_PASSWORD", None)
        if admin_email and admin_password:
            ensure_admin_user(target, email=admin_email, password=admin_password)
        elif admin_email:
            logger.warning("ADMIN_EMAIL is set without ADMIN_PASSWORD; admin user not seeded")
        logger.info("schema ready (tables=%d)", len(list_tables(target)))

    container = build_container(
        db_config=db_config,
        time_tracking_db_config=getattr(settings, "TIME_TRACKING_DB_CONFIG"),
        local_timezone=getattr(settings, "LOCAL_TIMEZONE"),
        working_hours_per_day=float(getattr(settings, "DEFAULT_WORKING_HOURS")),
        notification_workers=int(getattr(settings, "NOTIFICATION_WORKERS")),
    )

    register_error_handlers(app)
    register_users(app, container)
    register_leaves(app, container)
    register_payroll(app, container)
    register_invoices(app, container)
    register_notifications(app, container)

    return app
