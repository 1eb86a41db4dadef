# Adaptador PostgreSQL - pool psycopg2 expuesto como API asíncrona

import asyncio
import time
import logging
from typing import Any, Dict, Optional, Sequence

import psycopg2
import psycopg2.errors
from psycopg2.extras import Range, RealDictCursor
from psycopg2.pool import ThreadedConnectionPool

from config.settings import DatabaseSettings
from core.domain.errors import ConnectionError, ExecutionError, QueryTimeoutError
from core.domain.query import ConnectionStatus, FetchResult, FieldInfo, json_safe
from core.ports.database_port import DatabasePort

logger = logging.getLogger(__name__)


def _to_json_value(value: Any) -> Any:
    # Rangos y bytea de psycopg2 no son serializables a JSON
    if isinstance(value, Range):
        return {
            "lower": json_safe(value.lower),
            "upper": json_safe(value.upper),
            "lowerInc": value.lower_inc,
            "upperInc": value.upper_inc,
            "empty": value.isempty,
        }
    return json_safe(value)


def _to_row(record) -> Dict[str, Any]:
    return {key: _to_json_value(value) for key, value in record.items()}


class PostgreSQLAdapter(DatabasePort):
    """
    Acceso a PostgreSQL sobre un ThreadedConnectionPool.

    El pool se crea en el primer uso. Las llamadas bloqueantes corren en
    asyncio.to_thread; el semáforo limita las conexiones concurrentes a
    pool_max y hace esperar a las solicitudes que exceden ese número.
    Las sesiones son autocommit y read-only.
    """

    def __init__(self, db_settings: DatabaseSettings):
        self.settings = db_settings
        self._pool: Optional[ThreadedConnectionPool] = None
        self._slots = asyncio.Semaphore(db_settings.pool_max)
        self._last_used: Dict[int, float] = {}

    # Pool

    def _get_pool(self) -> ThreadedConnectionPool:
        if self._pool is None:
            self._pool = ThreadedConnectionPool(
                0, self.settings.pool_max, **self.settings.connect_kwargs()
            )
            logger.info(
                f"Pool PostgreSQL: {self.settings.host}:{self.settings.port}/"
                f"{self.settings.name} (max {self.settings.pool_max})"
            )
        return self._pool

    def _acquire(self):
        try:
            pool = self._get_pool()
            conn = pool.getconn()
            last_used = self._last_used.pop(id(conn), None)
            idle_limit = self.settings.idle_timeout_ms / 1000
            if conn.closed or (
                last_used is not None and time.monotonic() - last_used > idle_limit
            ):
                pool.putconn(conn, close=True)
                conn = pool.getconn()
            if conn.autocommit is False:
                conn.set_session(readonly=True, autocommit=True)
            return conn
        except psycopg2.Error as e:
            logger.error(f"PostgreSQL no disponible: {e}")
            raise ConnectionError(str(e).strip()) from e

    def _release(self, conn, discard: bool = False) -> None:
        discard = discard or bool(conn.closed)
        if not discard:
            self._last_used[id(conn)] = time.monotonic()
        self._pool.putconn(conn, close=discard)

    # Ejecución

    def _run(
        self, query: str, params: Optional[Sequence[Any]], timeout_ms: Optional[int]
    ) -> FetchResult:
        conn = self._acquire()
        discard = False
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                cursor.execute("SET statement_timeout = %s", (int(timeout_ms or 0),))
                # Sin params no hay interpolación: '%' en el SQL generado es literal
                cursor.execute(query, params or None)
                if not cursor.description:
                    return FetchResult(row_count=max(cursor.rowcount, 0))
                fields = [FieldInfo(d.name, d.type_code) for d in cursor.description]
                rows = [_to_row(r) for r in cursor.fetchall()]
                return FetchResult(
                    rows=rows,
                    fields=fields,
                    row_count=cursor.rowcount if cursor.rowcount >= 0 else len(rows),
                )
        except psycopg2.errors.QueryCanceled as e:
            raise QueryTimeoutError(timeout_ms, query=query) from e
        except (psycopg2.InterfaceError, psycopg2.OperationalError) as e:
            discard = True
            raise ExecutionError(str(e).strip(), query=query) from e
        except psycopg2.Error as e:
            raise ExecutionError((e.pgerror or str(e)).strip(), query=query) from e
        finally:
            self._release(conn, discard)

    async def fetch(
        self,
        query: str,
        params: Optional[Sequence[Any]] = None,
        timeout_ms: Optional[int] = None,
    ) -> FetchResult:
        async with self._slots:
            return await asyncio.to_thread(self._run, query, params, timeout_ms)

    async def test_connection(self) -> ConnectionStatus:
        try:
            result = await self.fetch(
                "SELECT current_database() AS db, inet_server_addr() AS server"
            )
            row = result.rows[0] if result.rows else {}
            return ConnectionStatus(
                connected=True,
                database=row.get("db"),
                server=str(row["server"]) if row.get("server") else None,
            )
        except (ConnectionError, ExecutionError, QueryTimeoutError) as e:
            return ConnectionStatus(connected=False, error=e.message)

    async def close(self) -> None:
        if self._pool is not None:
            pool, self._pool = self._pool, None
            self._last_used.clear()
            await asyncio.to_thread(pool.closeall)
            logger.info("Pool PostgreSQL cerrado")
