"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

Key-value substrate backends.

Both backends offer atomic per-key ``get``/``put`` and prefix enumeration.
Neither offers multi-key transactions.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

import oracledb

from .config import close_pool
from .schema import KV_TABLE
from .sql import execute_sql

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal async key-value interface used by the prompt store."""

    backend: str

    async def get(self, key: str) -> Optional[str]:
        """Return the value stored under ``key`` or None."""

    async def put(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    async def list_keys(self, prefix: str) -> list[str]:
        """Return every key starting with ``prefix``."""

    async def close(self) -> None:
        """Release any held resources."""


class MemoryKeyValueStore:
    """Process-local substrate backed by a dict; enumeration follows insertion order."""

    backend = "memory"

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def put(self, key: str, value: str) -> None:
        self._data[key] = value

    async def list_keys(self, prefix: str) -> list[str]:
        return [key for key in self._data if key.startswith(prefix)]

    async def close(self) -> None:
        return None

    def snapshot(self) -> dict[str, str]:
        """Return a copy of the stored data."""
        return dict(self._data)


class OracleKeyValueStore:
    """Substrate stored in a single Oracle table reached through an async pool."""

    backend = "oracle"

    def __init__(self, pool: oracledb.AsyncConnectionPool) -> None:
        self.pool = pool

    async def get(self, key: str) -> Optional[str]:
        async with self.pool.acquire() as conn:
            rows = await execute_sql(
                conn,
                f"SELECT kv_value FROM {KV_TABLE} WHERE kv_key = :kv_key",
                {"kv_key": key},
            )
        if not rows:
            return None
        return rows[0][0]

    async def put(self, key: str, value: str) -> None:
        async with self.pool.acquire() as conn:
            conn.autocommit = True
            await execute_sql(
                conn,
                f"""
                MERGE INTO {KV_TABLE} dst
                USING (SELECT :kv_key AS kv_key FROM DUAL) src
                ON (dst.kv_key = src.kv_key)
                WHEN MATCHED THEN
                    UPDATE SET kv_value = :kv_value, updated = SYSTIMESTAMP
                WHEN NOT MATCHED THEN
                    INSERT (kv_key, kv_value, updated)
                    VALUES (:kv_key, :kv_value, SYSTIMESTAMP)
                """,
                {"kv_key": key, "kv_value": value},
            )

    async def list_keys(self, prefix: str) -> list[str]:
        # SUBSTR keeps '%' and '_' in keys from acting as LIKE wildcards
        async with self.pool.acquire() as conn:
            rows = await execute_sql(
                conn,
                f"SELECT kv_key FROM {KV_TABLE} WHERE SUBSTR(kv_key, 1, :prefix_len) = :prefix ORDER BY kv_key",
                {"prefix_len": len(prefix), "prefix": prefix},
            )
        return [row[0] for row in rows or []]

    async def close(self) -> None:
        await close_pool(self.pool)
