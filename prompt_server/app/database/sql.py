"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

Async SQL execution helper for the Oracle substrate.
"""

import logging
from typing import Any, Optional

import oracledb

LOGGER = logging.getLogger(__name__)

# ORA codes that schema setup may hit on a database already provisioned
TOLERATED_ERRORS = {
    955: "name is already used by an existing object",
    942: "table or view does not exist",
}


async def _materialize(value: Any) -> Any:
    if isinstance(value, oracledb.AsyncLOB):
        return await value.read()
    return value


async def _fetch_rows(cursor: oracledb.AsyncCursor) -> list[tuple]:
    rows = []
    for row in await cursor.fetchall():
        rows.append(tuple([await _materialize(value) for value in row]))
    return rows


async def execute_sql(
    conn: oracledb.AsyncConnection,
    sql: str,
    binds: Optional[dict] = None,
) -> Optional[list]:
    """Run one statement on ``conn``.

    Queries return their rows as tuples with CLOB values (stored prompt JSON)
    read into ``str``. Other statements return None, as do statements failing
    with one of the ``TOLERATED_ERRORS``.
    """
    LOGGER.debug("execute_sql: %s | binds=%s", sql.strip()[:120], binds)

    async with conn.cursor() as cursor:
        try:
            await cursor.execute(sql, binds or {})
        except oracledb.DatabaseError as exc:
            code = getattr(exc.args[0], "code", None) if exc.args else None
            if code not in TOLERATED_ERRORS:
                raise
            LOGGER.info("Ignoring ORA-%05d (%s)", code, TOLERATED_ERRORS[code])
            return None

        if not cursor.description:
            return None
        return await _fetch_rows(cursor)
