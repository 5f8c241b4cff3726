from __future__ import annotations

from datetime import datetime

import pytest

from src.attendance_ledger.attendance_ledger.container import build_container
from src.attendance_ledger.attendance_ledger.core.constants import DEFAULT_ADMIN_PASSWORD
from src.attendance_ledger.attendance_ledger.main import create_app
from src.attendance_ledger.attendance_ledger.storage.memory_backend import InMemoryBackend
from src.attendance_ledger.attendance_ledger.storage.record_store import RecordStore


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2025, 1, 6, 8, 0, 0)


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def store(backend) -> RecordStore:
    return RecordStore(backend)


@pytest.fixture
def container(backend):
    return build_container(backend=backend)


@pytest.fixture
def admin_ctx(container):
    return container.auth_service.login_admin(DEFAULT_ADMIN_PASSWORD)


@pytest.fixture
def kiosk_ctx(container):
    return container.auth_service.open_kiosk_session()


@pytest.fixture
def app(backend):
    app = create_app(settings_module="config.testing", backend=backend)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
