# Tests del adaptador PostgreSQL con pool mockeado
# Ejecutar con: pytest tests/test_database.py -v

import time
from types import SimpleNamespace

import psycopg2
import psycopg2.errors
from psycopg2.extras import NumericRange
import pytest
from unittest.mock import MagicMock, patch

from adapters.outbound.database.postgresql import PostgreSQLAdapter
from config.settings import DatabaseSettings
from core.domain.errors import ConnectionError, ExecutionError, QueryTimeoutError


def _make_conn(rows=None, description=None, execute_error=None):
    cursor = MagicMock()
    cursor.description = description
    cursor.fetchall.return_value = rows or []
    cursor.rowcount = len(rows or [])
    if execute_error is not None:
        # El primer execute es el SET statement_timeout
        cursor.execute.side_effect = [None, execute_error]

    conn = MagicMock()
    conn.closed = 0
    conn.autocommit = False
    conn.cursor.return_value.__enter__.return_value = cursor
    return conn, cursor


@pytest.fixture
def db_settings():
    return DatabaseSettings(
        host="db.local", port=5432, name="shop", user="reader", password="x", pool_max=2
    )


@pytest.fixture
def pool_patch():
    with patch("adapters.outbound.database.postgresql.ThreadedConnectionPool") as MockPool:
        yield MockPool


@pytest.mark.unit
class TestPostgreSQLAdapter:
    """Pool, sesión de solo lectura y mapeo de errores"""

    async def test_fetch_rows_and_fields(self, db_settings, pool_patch):
        conn, cursor = _make_conn(
            rows=[{"total": 3}],
            description=[SimpleNamespace(name="total", type_code=20)],
        )
        pool_patch.return_value.getconn.return_value = conn
        adapter = PostgreSQLAdapter(db_settings)

        result = await adapter.fetch("SELECT COUNT(*) AS total FROM users", timeout_ms=5000)

        assert result.rows == [{"total": 3}]
        assert result.row_count == 1
        assert result.fields[0].name == "total"
        assert result.fields[0].data_type_id == 20
        cursor.execute.assert_any_call("SET statement_timeout = %s", (5000,))
        # Sin params se pasa None para que '%' no se interprete
        cursor.execute.assert_any_call("SELECT COUNT(*) AS total FROM users", None)
        conn.set_session.assert_called_once_with(readonly=True, autocommit=True)
        pool_patch.return_value.putconn.assert_called_once_with(conn, close=False)

    async def test_binary_and_range_values_are_json_safe(self, db_settings, pool_patch):
        conn, _ = _make_conn(
            rows=[{
                "data": memoryview(b"\x00\x01"),
                "hashes": [b"\xab", None],
                "span": NumericRange(1, 5),
                "name": "ana",
            }],
            description=[
                SimpleNamespace(name="data", type_code=17),
                SimpleNamespace(name="hashes", type_code=1001),
                SimpleNamespace(name="span", type_code=3904),
                SimpleNamespace(name="name", type_code=25),
            ],
        )
        pool_patch.return_value.getconn.return_value = conn
        adapter = PostgreSQLAdapter(db_settings)

        result = await adapter.fetch("SELECT * FROM avatars")

        assert result.rows == [{
            "data": "\\x0001",
            "hashes": ["\\xab", None],
            "span": {
                "lower": 1, "upper": 5, "lowerInc": True, "upperInc": False, "empty": False,
            },
            "name": "ana",
        }]

    async def test_pool_created_lazily(self, db_settings, pool_patch):
        adapter = PostgreSQLAdapter(db_settings)
        pool_patch.assert_not_called()

        conn, _ = _make_conn(description=[SimpleNamespace(name="x", type_code=23)])
        pool_patch.return_value.getconn.return_value = conn
        await adapter.fetch("SELECT 1 AS x")

        args, kwargs = pool_patch.call_args
        assert args == (0, 2)
        assert kwargs["host"] == "db.local"
        assert kwargs["dbname"] == "shop"
        assert "sslmode" not in kwargs

    async def test_params_forwarded(self, db_settings, pool_patch):
        conn, cursor = _make_conn(description=[SimpleNamespace(name="x", type_code=23)])
        pool_patch.return_value.getconn.return_value = conn

        await PostgreSQLAdapter(db_settings).fetch("SELECT %s AS x", ("public",))

        cursor.execute.assert_any_call("SELECT %s AS x", ("public",))

    async def test_query_canceled_maps_to_timeout(self, db_settings, pool_patch):
        conn, _ = _make_conn(
            execute_error=psycopg2.errors.QueryCanceled("canceling statement due to statement timeout")
        )
        pool_patch.return_value.getconn.return_value = conn

        with pytest.raises(QueryTimeoutError) as exc_info:
            await PostgreSQLAdapter(db_settings).fetch("SELECT pg_sleep(5)", timeout_ms=100)

        assert exc_info.value.timeout_ms == 100
        assert "100ms" in exc_info.value.message
        pool_patch.return_value.putconn.assert_called_once_with(conn, close=False)

    async def test_driver_error_maps_to_execution_error(self, db_settings, pool_patch):
        conn, _ = _make_conn(execute_error=psycopg2.ProgrammingError("syntax error at or near"))
        pool_patch.return_value.getconn.return_value = conn

        with pytest.raises(ExecutionError) as exc_info:
            await PostgreSQLAdapter(db_settings).fetch("SELEC 1")

        assert exc_info.value.message == "Query execution error: syntax error at or near"

    async def test_broken_connection_discarded(self, db_settings, pool_patch):
        conn, _ = _make_conn(execute_error=psycopg2.OperationalError("server closed the connection"))
        pool_patch.return_value.getconn.return_value = conn

        with pytest.raises(ExecutionError):
            await PostgreSQLAdapter(db_settings).fetch("SELECT 1")

        pool_patch.return_value.putconn.assert_called_once_with(conn, close=True)

    async def test_connect_failure_maps_to_connection_error(self, db_settings, pool_patch):
        pool_patch.side_effect = psycopg2.OperationalError("could not connect to server")

        with pytest.raises(ConnectionError) as exc_info:
            await PostgreSQLAdapter(db_settings).fetch("SELECT 1")

        assert exc_info.value.code == "CONNECTION_ERROR"
        assert "could not connect" in exc_info.value.message

    async def test_idle_connection_replaced(self, db_settings, pool_patch):
        stale, _ = _make_conn()
        fresh, cursor = _make_conn(description=[SimpleNamespace(name="x", type_code=23)])
        pool = pool_patch.return_value
        pool.getconn.side_effect = [stale, fresh]
        adapter = PostgreSQLAdapter(db_settings)
        adapter._last_used[id(stale)] = time.monotonic() - 60

        await adapter.fetch("SELECT 1 AS x")

        pool.putconn.assert_any_call(stale, close=True)
        cursor.execute.assert_any_call("SELECT 1 AS x", None)

    async def test_test_connection_ok(self, db_settings, pool_patch):
        conn, _ = _make_conn(
            rows=[{"db": "shop", "server": "10.0.0.5"}],
            description=[
                SimpleNamespace(name="db", type_code=19),
                SimpleNamespace(name="server", type_code=869),
            ],
        )
        pool_patch.return_value.getconn.return_value = conn

        status = await PostgreSQLAdapter(db_settings).test_connection()

        assert status.connected is True
        assert status.database == "shop"
        assert status.server == "10.0.0.5"
        assert status.error is None

    async def test_test_connection_never_raises(self, db_settings, pool_patch):
        pool_patch.side_effect = psycopg2.OperationalError("connection refused")

        status = await PostgreSQLAdapter(db_settings).test_connection()

        assert status.connected is False
        assert "connection refused" in status.error
        assert status.to_dict()["connected"] is False

    async def test_close_releases_pool(self, db_settings, pool_patch):
        conn, _ = _make_conn(description=[SimpleNamespace(name="x", type_code=23)])
        pool_patch.return_value.getconn.return_value = conn
        adapter = PostgreSQLAdapter(db_settings)
        await adapter.fetch("SELECT 1 AS x")

        await adapter.close()
        await adapter.close()

        pool_patch.return_value.closeall.assert_called_once()

    def test_ssl_enabled(self):
        kwargs = DatabaseSettings(ssl=True).connect_kwargs()
        assert kwargs["sslmode"] == "require"
