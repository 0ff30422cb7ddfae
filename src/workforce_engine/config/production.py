import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "workforce"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workforce_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

GRACE_MINUTES = int(os.getenv("GRACE_MINUTES", "15"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
