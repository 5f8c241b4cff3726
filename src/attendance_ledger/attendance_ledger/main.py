from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    StoreUnavailableError,
    ValidationError,
)
from .database.bootstrap import apply_schema, list_tables
from .container import build_container
from .storage.backend import KeyValueBackend
from .attendance.controller import register as register_attendance
from .payroll.controller import register as register_payroll
from .settings.controller import register as register_settings
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

_ERROR_STATUS = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (ConflictError, 409),
    (StoreUnavailableError, 503),
    (ValidationError, 400),
)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = next((code for cls, code in _ERROR_STATUS if isinstance(e, cls)), 400)
        if status >= 500:
            logger.error("Request failed: %s", e)
        return jsonify({"success": False, "message": str(e)}), status


def create_app(*, settings_module: Optional[str] = None, backend: Optional[KeyValueBackend] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    db_config = getattr(settings, "DB_CONFIG")
    store_backend = getattr(settings, "STORE_BACKEND", "mysql")
    logger.info("settings=%s store=%s", settings_module, store_backend)

    if backend is None and store_backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        store_backend=store_backend,
        session_minutes=int(getattr(settings, "SESSION_MINUTES", 480)),
        backend=backend,
    )
    app.extensions["attendance_ledger"] = container

    _register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_payroll(app, container)
    register_settings(app, container)

    return app
