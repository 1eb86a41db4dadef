# Ejecutor de queries SQL validadas, con LIMIT y statement_timeout

import re
import time
import logging
from typing import Any, List, Optional, Sequence

from core.domain.errors import ValidationError
from core.domain.query import QueryResult
from core.execution.validator import validate_query
from core.ports.database_port import DatabasePort
from utils.metrics import get_metrics

logger = logging.getLogger(__name__)

_HAS_LIMIT = re.compile(r"\bLIMIT\s+\d+", re.IGNORECASE)
_TRAILING_SEMICOLON = re.compile(r";\s*$")


def apply_row_limit(sql: str, max_rows: int) -> str:
    """Agrega LIMIT si el SQL no tiene uno explícito"""
    safe_sql = sql.strip()
    if not _HAS_LIMIT.search(safe_sql):
        safe_sql = _TRAILING_SEMICOLON.sub("", safe_sql)
        # En su propia línea: un comentario final "-- ..." no lo anula
        safe_sql = f"{safe_sql}\nLIMIT {max_rows}"
    return safe_sql


class QueryExecutor:
    def __init__(self, db: DatabasePort, timeout_ms: int = 30000, max_rows: int = 1000):
        self.db = db
        self.timeout_ms = timeout_ms
        self.max_rows = max_rows

    def _validate(self, sql: str) -> None:
        validation = validate_query(sql)
        if not validation.valid:
            get_metrics().record_validation_block()
            raise ValidationError(validation.error, sql=sql)

    async def execute(
        self, sql: str, params: Optional[Sequence[Any]] = None
    ) -> QueryResult:
        """
        Valida y ejecuta el SQL.

        Raises:
            ValidationError: el SQL no es de solo lectura (no se ejecuta)
            QueryTimeoutError: superó timeout_ms
            ExecutionError: cualquier otro error de la DB
        """
        self._validate(sql)
        safe_sql = apply_row_limit(sql, self.max_rows)

        start = time.perf_counter()
        try:
            fetched = await self.db.fetch(safe_sql, params, timeout_ms=self.timeout_ms)
        except Exception as e:
            logger.error(f"Error SQL: {e}")
            raise
        execution_time = int(round((time.perf_counter() - start) * 1000))
        get_metrics().record_db_query(execution_time)

        logger.info(f"Query ejecutada: {fetched.row_count} filas en {execution_time}ms")
        return QueryResult(
            rows=fetched.rows,
            row_count=fetched.row_count,
            fields=fetched.fields,
            execution_time=execution_time,
        )

    async def explain(self, sql: str) -> List[str]:
        """Plan de ejecución (solo diagnóstico)"""
        self._validate(sql)
        fetched = await self.db.fetch(f"EXPLAIN {sql}", timeout_ms=self.timeout_ms)
        return [row["QUERY PLAN"] for row in fetched.rows]
