from .config import db_config

SECRET_KEY = "test-secret"

DB_CONFIG = db_config()

STORE_BACKEND = "memory"
LOG_LEVEL = "WARNING"
SESSION_MINUTES = 60

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
