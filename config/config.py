import os


class Config:
    """Shared defaults read from the environment (.env is loaded by create_app)."""

    SECRET_KEY = os.environ.get("SECRET_KEY") or "change-me"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "attendance_ledger")

    # mysql | memory
    STORE_BACKEND = os.environ.get("STORE_BACKEND", "mysql").lower()
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    SESSION_MINUTES = int(os.environ.get("SESSION_MINUTES", "480"))

    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))


def db_config() -> dict:
    return {
        "host": Config.DB_HOST,
        "port": Config.DB_PORT,
        "user": Config.DB_USER,
        "password": Config.DB_PASSWORD,
        "database": Config.DB_NAME,
    }
