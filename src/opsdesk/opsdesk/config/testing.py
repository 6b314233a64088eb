import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "opsdesk_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

BUSINESS_TIMEZONE = "Asia/Kolkata"
HALF_DAY_THRESHOLD_HOURS = 4
CHECKIN_START_HOUR = 10
CHECKIN_END_HOUR = 18

AUTO_INIT_DB = False
