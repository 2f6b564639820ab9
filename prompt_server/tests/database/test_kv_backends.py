"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

Tests for the key-value substrate backends and their selection.
"""
# spell-checker: disable
# pylint: disable=redefined-outer-name

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

import oracledb
import pytest

from prompt_server.app import database
from prompt_server.app.database import kv as kv_module
from prompt_server.app.database.config import DatabaseSettings
from prompt_server.app.database.kv import KeyValueStore, MemoryKeyValueStore, OracleKeyValueStore

CREDENTIALS = DatabaseSettings(username="PROMPTS", password="secret", dsn="//localhost:1521/FREEPDB1")


class _FakeConnection:
    def __init__(self):
        self.autocommit = False


class _FakePool:
    """Stand-in for oracledb.AsyncConnectionPool."""

    def __init__(self):
        self.conn = _FakeConnection()
        self.close = AsyncMock()

    @asynccontextmanager
    async def acquire(self):
        yield self.conn


@pytest.fixture(autouse=True)
def _reset_substrate():
    database.clear_substrate()
    yield
    database.clear_substrate()


class TestMemoryKeyValueStore:
    """MemoryKeyValueStore"""

    @pytest.mark.unit
    @pytest.mark.anyio
    async def test_get_put_and_prefix_listing(self):
        """Values round-trip and listing filters by prefix in insertion order."""
        kv = MemoryKeyValueStore()
        await kv.put("prompt:2", "b")
        await kv.put("name:x", "2")
        await kv.put("prompt:1", "a")

        assert await kv.get("prompt:2") == "b"
        assert await kv.get("missing") is None
        assert await kv.list_keys("prompt:") == ["prompt:2", "prompt:1"]
        assert await kv.list_keys("nothing:") == []

    @pytest.mark.unit
    @pytest.mark.anyio
    async def test_put_overwrites(self):
        """A second put replaces the value."""
        kv = MemoryKeyValueStore({"k": "old"})
        await kv.put("k", "new")
        assert kv.snapshot() == {"k": "new"}

    @pytest.mark.unit
    def test_satisfies_protocol(self):
        """Both backends implement the substrate interface."""
        assert isinstance(MemoryKeyValueStore(), KeyValueStore)
        assert isinstance(OracleKeyValueStore(_FakePool()), KeyValueStore)


class TestOracleKeyValueStore:
    """OracleKeyValueStore against a mocked pool"""

    @pytest.mark.unit
    @pytest.mark.anyio
    async def test_get_reads_first_column(self):
        """get returns the stored value or None."""
        kv = OracleKeyValueStore(_FakePool())
        with patch.object(kv_module, "execute_sql", AsyncMock(return_value=[('{"id": "1"}',)])) as mock_sql:
            assert await kv.get("prompt:1") == '{"id": "1"}'
        assert mock_sql.await_args.args[2] == {"kv_key": "prompt:1"}

        with patch.object(kv_module, "execute_sql", AsyncMock(return_value=[])):
            assert await kv.get("prompt:missing") is None

    @pytest.mark.unit
    @pytest.mark.anyio
    async def test_put_merges_with_autocommit(self):
        """put issues a single MERGE with autocommit on."""
        pool = _FakePool()
        kv = OracleKeyValueStore(pool)
        with patch.object(kv_module, "execute_sql", AsyncMock(return_value=None)) as mock_sql:
            await kv.put("name:greeting", "abc")

        sql, binds = mock_sql.await_args.args[1], mock_sql.await_args.args[2]
        assert "MERGE INTO prompt_kv" in sql
        assert binds == {"kv_key": "name:greeting", "kv_value": "abc"}
        assert pool.conn.autocommit is True

    @pytest.mark.unit
    @pytest.mark.anyio
    async def test_list_keys_uses_literal_prefix(self):
        """Prefix filtering compares a substring rather than using LIKE."""
        kv = OracleKeyValueStore(_FakePool())
        rows = [("prompt:a",), ("prompt:b",)]
        with patch.object(kv_module, "execute_sql", AsyncMock(return_value=rows)) as mock_sql:
            assert await kv.list_keys("prompt:") == ["prompt:a", "prompt:b"]

        sql, binds = mock_sql.await_args.args[1], mock_sql.await_args.args[2]
        assert "LIKE" not in sql
        assert binds == {"prefix_len": 7, "prefix": "prompt:"}

    @pytest.mark.unit
    @pytest.mark.anyio
    async def test_list_keys_none_result(self):
        """A None result from the helper is an empty listing."""
        kv = OracleKeyValueStore(_FakePool())
        with patch.object(kv_module, "execute_sql", AsyncMock(return_value=None)):
            assert await kv.list_keys("prompt:") == []

    @pytest.mark.unit
    @pytest.mark.anyio
    async def test_close_closes_pool(self):
        """Closing the backend closes its pool."""
        pool = _FakePool()
        await OracleKeyValueStore(pool).close()
        pool.close.assert_awaited_once()


class TestInitializeSubstrate:
    """initialize_substrate() / get_substrate() / close_substrate()"""

    @pytest.mark.unit
    def test_get_substrate_defaults_to_memory(self):
        """With nothing initialized an in-memory backend is created once."""
        first = database.get_substrate()
        assert first.backend == "memory"
        assert database.get_substrate() is first

    @pytest.mark.unit
    @pytest.mark.anyio
    async def test_without_credentials_uses_memory(self):
        """Missing credentials never attempt a connection."""
        with patch.object(database, "create_pool", AsyncMock()) as mock_pool:
            substrate = await database.initialize_substrate(DatabaseSettings())
        mock_pool.assert_not_awaited()
        assert substrate.backend == "memory"
        assert database.get_substrate() is substrate

    @pytest.mark.unit
    @pytest.mark.anyio
    async def test_with_credentials_creates_table(self):
        """A reachable database becomes the active backend after the DDL runs."""
        pool = _FakePool()
        with (
            patch.object(database, "create_pool", AsyncMock(return_value=pool)),
            patch.object(database, "execute_sql", AsyncMock(return_value=None)) as mock_sql,
        ):
            substrate = await database.initialize_substrate(CREDENTIALS)

        assert substrate.backend == "oracle"
        statements = [call.args[1] for call in mock_sql.await_args_list]
        assert statements[0] == "SELECT 1 FROM DUAL"
        assert any("CREATE TABLE IF NOT EXISTS prompt_kv" in sql for sql in statements)

        await database.close_substrate()
        pool.close.assert_awaited_once()

    @pytest.mark.unit
    @pytest.mark.anyio
    async def test_connection_failure_falls_back_to_memory(self, caplog):
        """A failing connection is logged and the memory backend is used."""
        with patch.object(database, "create_pool", AsyncMock(side_effect=oracledb.DatabaseError("ORA-12541"))):
            substrate = await database.initialize_substrate(CREDENTIALS)

        assert substrate.backend == "memory"
        assert "initialization failed" in caplog.text

    @pytest.mark.unit
    @pytest.mark.anyio
    async def test_close_without_substrate_is_noop(self):
        """Closing twice is harmless."""
        await database.close_substrate()
        await database.close_substrate()

    @pytest.mark.unit
    def test_settings_credentials(self):
        """has_credentials needs user, password and dsn."""
        assert CREDENTIALS.has_credentials()
        assert not DatabaseSettings(username="u", password="p").has_credentials()

    @pytest.mark.unit
    def test_wallet_defaults_to_tns_admin(self, monkeypatch):
        """A wallet password alone points the wallet at the TNS admin directory."""
        monkeypatch.setenv("TNS_ADMIN", "/opt/tns")
        assert "wallet_location" not in CREDENTIALS.connect_args()

        with_wallet = DatabaseSettings(username="u", password="p", dsn="adb_high", wallet_password="w")
        args = with_wallet.connect_args()
        assert args["config_dir"] == "/opt/tns"
        assert args["wallet_location"] == "/opt/tns"
        assert args["wallet_password"] == "w"
