from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from hr_portal.config import get_settings_module
from hr_portal.database.bootstrap import apply_schema, ensure_admin_user, list_tables
from hr_portal.database.connection import DBConfig
from hr_portal.main import SCHEMA_PATH

logger = logging.getLogger("init_db")


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    settings = importlib.import_module(get_settings_module())
    target = DBConfig.from_dict(dict(settings.DB_CONFIG), default_database="hr_portal")

    apply_schema(target, schema_path=SCHEMA_PATH)
    admin_email = getattr(settings, "ADMIN_EMAIL", None)
    admin_password = getattr(settings, "ADMIN_PASSWORD", None)
    if admin_email and admin_password:
        ensure_admin_user(target, email=admin_email, password=admin_password)
    elif admin_email:
        logger.warning("ADMIN_EMAIL is set without ADMIN_PASSWORD; admin user not seeded")

    logger.info(
        "schema applied to %s@%s:%s/%s (tables=%d)",
        target.user,
        target.host,
        target.port,
        target.database,
        len(list_tables(target)),
    )


if __name__ == "__main__":
    main()
