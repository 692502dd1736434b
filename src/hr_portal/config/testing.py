import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_portal_test"),
}

TIME_TRACKING_DB_CONFIG = dict(DB_CONFIG, database=os.getenv("TT_DB_NAME", "time_tracking_test"))

LOCAL_TIMEZONE = "Asia/Kolkata"
DEFAULT_WORKING_HOURS = 8.0
NOTIFICATION_WORKERS = 2

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
