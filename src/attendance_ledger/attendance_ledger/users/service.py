from __future__ import annotations

import logging
import secrets
import threading
import uuid
from datetime import datetime, timedelta
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import DEFAULT_ADMIN_PASSWORD, DEFAULT_SESSION_MINUTES
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..storage.record_store import RecordStore
from .model import AdminSettings, AuthContext, Person

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: admin login and session tokens.

    Tokens live in process memory. Kiosk sessions may record attendance
    taps; admin sessions may also edit history, people and settings.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        session_minutes: int = DEFAULT_SESSION_MINUTES,
        clock: Callable[[], datetime] = now_local,
    ):
        self._store = store
        self._session_minutes = int(session_minutes)
        self._clock = clock
        self._sessions: dict[str, AuthContext] = {}
        self._lock = threading.Lock()

    def _issue(self, role: Role) -> AuthContext:
        ctx = AuthContext(
            token=secrets.token_urlsafe(24),
            role=role,
            expires_at=self._clock() + timedelta(minutes=self._session_minutes),
        )
        with self._lock:
            self._prune_expired()
            self._sessions[ctx.token] = ctx
        return ctx

    def active_session_count(self) -> int:
        with self._lock:
            self._prune_expired()
            return len(self._sessions)

    def _prune_expired(self) -> None:
        # Caller holds the lock.
        now = self._clock()
        for token in [t for t, c in self._sessions.items() if c.expires_at <= now]:
            del self._sessions[token]

    def verify_password(self, password: str) -> bool:
        settings = self._store.get_admin_settings()
        if settings is None:
            return secrets.compare_digest(password or "", DEFAULT_ADMIN_PASSWORD)
        return check_password_hash(settings.password_hash, password or "")

    def login_admin(self, password: str) -> AuthContext:
        if not self.verify_password(password):
            logger.warning("Rejected admin login attempt")
            raise AuthenticationError("Invalid admin password")
        logger.info("Admin session opened")
        return self._issue(Role.ADMIN)

    def open_kiosk_session(self) -> AuthContext:
        return self._issue(Role.KIOSK)

    def resolve(self, token: Optional[str]) -> Optional[AuthContext]:
        if not token:
            return None
        with self._lock:
            ctx = self._sessions.get(token)
            if ctx and ctx.expires_at <= self._clock():
                del self._sessions[token]
                ctx = None
        return ctx

    def logout(self, token: Optional[str]) -> bool:
        with self._lock:
            return self._sessions.pop(token or "", None) is not None

    def require_session(self, ctx: Optional[AuthContext]) -> AuthContext:
        if ctx is None or self.resolve(ctx.token) != ctx:
            raise AuthenticationError("Session expired, please sign in again")
        return ctx

    def require_admin(self, ctx: Optional[AuthContext]) -> AuthContext:
        ctx = self.require_session(ctx)
        if ctx.role != Role.ADMIN:
            raise AuthorizationError("Administrator access required")
        return ctx

    def change_password(self, ctx: AuthContext, *, new_password: str, confirm_password: str) -> None:
        self.require_admin(ctx)
        require_min_length(require_non_empty(new_password, "Password"), "Password", 4)
        if new_password != confirm_password:
            raise ValidationError("Passwords do not match")
        self._store.put_admin_settings(AdminSettings(password_hash=generate_password_hash(new_password)))
        logger.info("Admin password changed")


class PersonService:
    """Use case: manage the people shown on the overview (admin)."""

    def __init__(self, store: RecordStore, auth: AuthService):
        self._store = store
        self._auth = auth

    def list_people(self) -> list[Person]:
        return self._store.get_people()

    def get_person(self, person_id: str) -> Optional[Person]:
        return next((p for p in self._store.get_people() if p.person_id == person_id), None)

    def add_person(self, ctx: AuthContext, *, name: str) -> Person:
        self._auth.require_admin(ctx)
        person = Person(person_id=uuid.uuid4().hex, name=require_non_empty(name, "Name"))

        current = self._store.load_people()
        self._store.put_people([*current.people, person], expected_version=current.version)
        logger.info("Added person %s", person.person_id)
        return person

    def rename_person(self, ctx: AuthContext, *, person_id: str, name: str) -> bool:
        self._auth.require_admin(ctx)
        name = require_non_empty(name, "Name")

        current = self._store.load_people()
        if not any(p.person_id == person_id for p in current.people):
            return False
        people = [Person(person_id=p.person_id, name=name) if p.person_id == person_id else p for p in current.people]
        self._store.put_people(people, expected_version=current.version)
        return True

    def delete_person(self, ctx: AuthContext, *, person_id: str, drop_events: bool = False) -> bool:
        """Remove a person from the directory.

        Their events stay in the store unless ``drop_events`` is set.
        """

        self._auth.require_admin(ctx)
        current = self._store.load_people()
        people = [p for p in current.people if p.person_id != person_id]
        if len(people) == len(current.people):
            return False

        self._store.put_people(people, expected_version=current.version)
        if drop_events:
            self._store.drop_events(person_id)
        logger.info("Deleted person %s", person_id)
        return True
