from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.attendance_ledger.attendance_ledger.core.enums import Role
from src.attendance_ledger.attendance_ledger.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ValidationError,
)
from src.attendance_ledger.attendance_ledger.users.service import AuthService


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock(fixed_now):
    return Clock(fixed_now)


@pytest.fixture
def auth(store, clock):
    return AuthService(store, session_minutes=30, clock=clock)


def test_default_password_opens_admin_session(auth, fixed_now):
    ctx = auth.login_admin("1616")

    assert ctx.role == Role.ADMIN
    assert ctx.is_admin
    assert ctx.expires_at == fixed_now + timedelta(minutes=30)
    assert auth.require_admin(ctx) == ctx


def test_wrong_password_is_rejected(auth):
    with pytest.raises(AuthenticationError):
        auth.login_admin("0000")


def test_kiosk_session_is_not_admin(auth):
    ctx = auth.open_kiosk_session()

    assert auth.require_session(ctx) == ctx
    with pytest.raises(AuthorizationError):
        auth.require_admin(ctx)


def test_session_expires(auth, clock):
    ctx = auth.login_admin("1616")
    clock.now += timedelta(minutes=31)

    assert auth.resolve(ctx.token) is None
    with pytest.raises(AuthenticationError):
        auth.require_session(ctx)


def test_missing_or_unknown_token(auth):
    assert auth.resolve(None) is None
    assert auth.resolve("forged") is None
    with pytest.raises(AuthenticationError):
        auth.require_session(None)


def test_logout_revokes_token(auth):
    ctx = auth.login_admin("1616")

    assert auth.logout(ctx.token) is True
    assert auth.logout(ctx.token) is False
    assert auth.resolve(ctx.token) is None


def test_change_password(auth, store):
    ctx = auth.login_admin("1616")
    auth.change_password(ctx, new_password="secret", confirm_password="secret")

    assert store.get_admin_settings().password_hash != "secret"
    assert auth.verify_password("secret")
    assert not auth.verify_password("1616")


@pytest.mark.parametrize("new, confirm", [("abc", "abc"), ("secret", "secreT"), ("", "")])
def test_change_password_validation(auth, new, confirm):
    ctx = auth.login_admin("1616")
    with pytest.raises(ValidationError):
        auth.change_password(ctx, new_password=new, confirm_password=confirm)


def test_change_password_needs_admin(auth):
    with pytest.raises(AuthorizationError):
        auth.change_password(auth.open_kiosk_session(), new_password="secret", confirm_password="secret")


def test_expired_sessions_are_dropped_when_new_ones_open(auth, clock):
    for _ in range(50):
        auth.open_kiosk_session()
    assert auth.active_session_count() == 50

    clock.now += timedelta(minutes=31)
    fresh = auth.open_kiosk_session()

    assert auth.active_session_count() == 1
    assert auth.resolve(fresh.token) == fresh
