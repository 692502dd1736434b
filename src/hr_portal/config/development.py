import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_portal"),
}

# Read-only source of time entries, owned by the time-tracking system.
TIME_TRACKING_DB_CONFIG = {
    "host": os.getenv("TT_DB_HOST", os.getenv("DB_HOST", "localhost")),
    "port": int(os.getenv("TT_DB_PORT", os.getenv("DB_PORT", "3306"))),
    "user": os.getenv("TT_DB_USER", os.getenv("DB_USER", "root")),
    "password": os.getenv("TT_DB_PASSWORD", os.getenv("DB_PASSWORD", "")),
    "database": os.getenv("TT_DB_NAME", "time_tracking"),
}

LOCAL_TIMEZONE = os.getenv("LOCAL_TIMEZONE", "Asia/Kolkata")
DEFAULT_WORKING_HOURS = float(os.getenv("DEFAULT_WORKING_HOURS", "8"))
NOTIFICATION_WORKERS = int(os.getenv("NOTIFICATION_WORKERS", "4"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
# Seeding needs both; there is no default password.
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
