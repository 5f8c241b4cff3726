from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from ..core.enums import Role


@dataclass(frozen=True)
class Person:
    """Domain entity: a tracked person (one tile on the overview)."""

    person_id: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.person_id, "name": self.name}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Person":
        return cls(person_id=str(data["id"]), name=str(data.get("name", "")))


@dataclass(frozen=True)
class AdminSettings:
    password_hash: str

    def to_dict(self) -> dict[str, str]:
        return {"password_hash": self.password_hash}


@dataclass(frozen=True)
class AuthContext:
    """Session token passed explicitly into every mutating service call."""

    token: str
    role: Role
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
