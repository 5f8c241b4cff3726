from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol


@dataclass(frozen=True)
class VersionedValue:
    value: Any
    version: int


class KeyValueBackend(Protocol):
    """Versioned JSON key-value storage.

    ``version`` 0 means "key absent". ``write`` with an ``expected_version``
    is a compare-and-swap: it raises ConflictError when the stored version
    differs. ``expected_version=None`` overwrites unconditionally.
    """

    def read(self, key: str) -> Optional[VersionedValue]:
        raise NotImplementedError

    def write(self, key: str, value: Any, *, expected_version: Optional[int] = None) -> int:
        """Store value and return the new version."""

        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def ping(self) -> bool:
        raise NotImplementedError

    def dump(self) -> dict[str, VersionedValue]:
        raise NotImplementedError
