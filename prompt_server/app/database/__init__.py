"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

Key-value substrate initialization for the FastAPI server.
"""

import logging
from typing import Dict, Optional

import oracledb

from .config import DatabaseSettings, close_pool, create_pool, get_database_settings
from .kv import KeyValueStore, MemoryKeyValueStore, OracleKeyValueStore
from .schema import SCHEMA_DDL
from .sql import execute_sql

LOGGER = logging.getLogger(__name__)

_SUBSTRATE: Dict[str, KeyValueStore] = {}


def get_substrate() -> KeyValueStore:
    """Return the active substrate, falling back to an in-memory store."""

    substrate = _SUBSTRATE.get("active")
    if substrate is None:
        substrate = set_substrate(MemoryKeyValueStore())
    return substrate


def set_substrate(substrate: KeyValueStore) -> KeyValueStore:
    """Install ``substrate`` as the active backend."""

    _SUBSTRATE["active"] = substrate
    return substrate


def clear_substrate() -> None:
    """Forget the active backend without closing it."""

    _SUBSTRATE.clear()


async def initialize_substrate(db_settings: DatabaseSettings | None = None) -> KeyValueStore:
    """Select and prepare the substrate.

    When database credentials are configured the Oracle table is created (if
    needed) and the pooled backend becomes active. Missing credentials or a
    failed connection leave the in-memory backend active; the failure is
    logged without interrupting startup.
    """
    if db_settings is None:
        db_settings = get_database_settings()
    if not db_settings.has_credentials():
        LOGGER.info("No substrate database credentials; using in-memory key-value store.")
        return set_substrate(MemoryKeyValueStore())

    pool = None
    try:
        pool = await create_pool(db_settings)
        async with pool.acquire() as conn:
            await execute_sql(conn, "SELECT 1 FROM DUAL")
            conn.autocommit = True
            for ddl in SCHEMA_DDL:
                await execute_sql(conn, ddl)
        LOGGER.info("Oracle key-value substrate initialized")
        return set_substrate(OracleKeyValueStore(pool))
    except oracledb.Error as exc:
        LOGGER.warning("Oracle substrate initialization failed; using in-memory key-value store")
        LOGGER.warning("Database error: %s", exc)
        await close_pool(pool)
        return set_substrate(MemoryKeyValueStore())


async def close_substrate() -> None:
    """Close and forget the active backend."""

    substrate: Optional[KeyValueStore] = _SUBSTRATE.pop("active", None)
    if substrate is not None:
        await substrate.close()


__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "OracleKeyValueStore",
    "clear_substrate",
    "close_substrate",
    "get_substrate",
    "initialize_substrate",
    "set_substrate",
]
