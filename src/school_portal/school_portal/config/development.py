import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# json | mysql | memory
STORE_BACKEND = os.getenv("STORE_BACKEND", "json")
STORE_PATH = os.getenv("STORE_PATH", "instance/school_store.json")
STORE_KEY = os.getenv("STORE_KEY", "sms_store_v2_fresh")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_portal"),
}

# If enabled with the mysql backend, app applies schema.sql on startup (CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# last | first: which unpaid installment absorbs split rounding
FEE_REMAINDER_PLACEMENT = os.getenv("FEE_REMAINDER_PLACEMENT", "last")
