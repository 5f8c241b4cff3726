import os

from .config import Config, db_config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config()

STORE_BACKEND = Config.STORE_BACKEND
LOG_LEVEL = Config.LOG_LEVEL
SESSION_MINUTES = Config.SESSION_MINUTES

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
