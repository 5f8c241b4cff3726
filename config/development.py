import os

from .config import Config, db_config

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config()

STORE_BACKEND = Config.STORE_BACKEND
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()
SESSION_MINUTES = Config.SESSION_MINUTES

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
