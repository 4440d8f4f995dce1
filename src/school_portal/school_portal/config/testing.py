import os

SECRET_KEY = "test-secret"
DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

STORE_BACKEND = "memory"
STORE_PATH = ""
STORE_KEY = "sms_store_test"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_portal_test"),
}

AUTO_INIT_DB = False

FEE_REMAINDER_PLACEMENT = "last"
