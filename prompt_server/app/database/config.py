"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

Connection configuration for the Oracle key-value substrate.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import oracledb

from prompt_server.app.core.config import PROJECT_ROOT, settings

LOGGER = logging.getLogger(__name__)

POOL_SIZE = {"min": 1, "max": 4, "increment": 1}


@dataclass(frozen=True)
class DatabaseSettings:
    """Credentials for the schema holding the prompt_kv table.

    A wallet password without a wallet location means the wallet files sit in
    the TNS admin directory.
    """

    username: Optional[str] = None
    password: Optional[str] = None
    dsn: Optional[str] = None
    wallet_password: Optional[str] = None
    wallet_location: Optional[str] = None
    tcp_connect_timeout: int = 10

    def has_credentials(self) -> bool:
        """True when username, password and dsn are all set."""
        return bool(self.username and self.password and self.dsn)

    def connect_args(self) -> dict[str, Any]:
        """Keyword arguments for ``oracledb.create_pool_async``."""
        tns_admin = os.environ.get("TNS_ADMIN") or str(PROJECT_ROOT / "tns_admin")
        args: dict[str, Any] = {
            "user": self.username,
            "password": self.password,
            "dsn": self.dsn,
            "config_dir": tns_admin,
            "tcp_connect_timeout": self.tcp_connect_timeout,
        }
        if self.wallet_password:
            args["wallet_password"] = self.wallet_password
            args["wallet_location"] = self.wallet_location or tns_admin
        return args


def get_database_settings() -> DatabaseSettings:
    """Read PROMPTS_DB_* values from the application settings."""
    return DatabaseSettings(
        username=settings.db_username,
        password=settings.db_password,
        dsn=settings.db_dsn,
        wallet_password=settings.db_wallet_password,
        wallet_location=settings.db_wallet_location,
    )


async def create_pool(db_settings: DatabaseSettings) -> oracledb.AsyncConnectionPool:
    if not db_settings.has_credentials():
        raise ValueError("Database settings missing credentials")
    LOGGER.info("Connecting to substrate database dsn=%s", db_settings.dsn)
    return oracledb.create_pool_async(**db_settings.connect_args(), **POOL_SIZE)


async def close_pool(pool: Optional[oracledb.AsyncConnectionPool]) -> None:
    """Close ``pool``; failures are logged, not raised."""
    if pool is None:
        return
    try:
        await pool.close()
    except oracledb.Error as ex:
        LOGGER.warning("Closing substrate pool failed: %s", ex)
