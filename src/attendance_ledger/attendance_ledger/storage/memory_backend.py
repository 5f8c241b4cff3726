from __future__ import annotations

import copy
import json
import threading
from typing import Any, Optional

from ..core.exceptions import ConflictError
from .backend import KeyValueBackend, VersionedValue


class InMemoryBackend(KeyValueBackend):
    """Process-local backend for development and tests.

    Values are kept as JSON text so callers never share mutable state with
    the store, mirroring what a real backend returns.
    """

    def __init__(self):
        self._data: dict[str, tuple[str, int]] = {}
        self._lock = threading.Lock()

    def read(self, key: str) -> Optional[VersionedValue]:
        with self._lock:
            entry = self._data.get(key)
        if entry is None:
            return None
        payload, version = entry
        return VersionedValue(value=json.loads(payload), version=version)

    def write(self, key: str, value: Any, *, expected_version: Optional[int] = None) -> int:
        payload = json.dumps(copy.deepcopy(value), ensure_ascii=False)
        with self._lock:
            current = self._data.get(key, (None, 0))[1]
            if expected_version is not None and expected_version != current:
                raise ConflictError(f"{key} changed (expected v{expected_version}, found v{current})")
            self._data[key] = (payload, current + 1)
            return current + 1

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def ping(self) -> bool:
        return True

    def dump(self) -> dict[str, VersionedValue]:
        with self._lock:
            items = list(self._data.items())
        return {key: VersionedValue(value=json.loads(payload), version=version) for key, (payload, version) in items}

    def raw(self, key: str) -> Optional[str]:
        """Stored JSON text for a key (used to compare stored bytes)."""
        entry = self._data.get(key)
        return entry[0] if entry else None
