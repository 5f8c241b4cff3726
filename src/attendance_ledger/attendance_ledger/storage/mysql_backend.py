from __future__ import annotations

import json
import logging
from typing import Any, Optional

import mysql.connector

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .backend import KeyValueBackend, VersionedValue

logger = logging.getLogger(__name__)


class MySQLBackend(KeyValueBackend):
    """kv_store table backend; CAS is a conditional UPDATE on ``version``."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def read(self, key: str) -> Optional[VersionedValue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT payload, version FROM kv_store WHERE store_key=%s", (key,))
            r = fetchone(cur)
            if not r:
                return None
            return VersionedValue(value=json.loads(r["payload"]), version=int(r["version"]))

    def write(self, key: str, value: Any, *, expected_version: Optional[int] = None) -> int:
        payload = json.dumps(value, ensure_ascii=False)

        if expected_version is None:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO kv_store(store_key, payload, version)
                    VALUES(%s,%s,1)
                    ON DUPLICATE KEY UPDATE payload=VALUES(payload), version=version+1
                    """,
                    (key, payload),
                )
                cur.execute("SELECT version FROM kv_store WHERE store_key=%s", (key,))
                return int(fetchone(cur)["version"])

        if expected_version == 0:
            try:
                with db_cursor(self._conn_factory) as (_, cur):
                    cur.execute(
                        "INSERT INTO kv_store(store_key, payload, version) VALUES(%s,%s,1)",
                        (key, payload),
                    )
                    return 1
            except mysql.connector.IntegrityError as e:
                logger.warning("Concurrent create of %s rejected", key)
                raise ConflictError(f"{key} was created by another writer") from e

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE kv_store
                SET payload=%s, version=version+1
                WHERE store_key=%s AND version=%s
                """,
                (payload, key, int(expected_version)),
            )
            if cur.rowcount == 0:
                logger.warning("Stale write to %s rejected (expected v%s)", key, expected_version)
                raise ConflictError(f"{key} changed since it was read")
            return int(expected_version) + 1

    def delete(self, key: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM kv_store WHERE store_key=%s", (key,))
            return cur.rowcount > 0

    def ping(self) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS ok")
            return bool(fetchone(cur))

    def dump(self) -> dict[str, VersionedValue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT store_key, payload, version FROM kv_store ORDER BY store_key")
            return {
                r["store_key"]: VersionedValue(value=json.loads(r["payload"]), version=int(r["version"]))
                for r in fetchall(cur)
            }
