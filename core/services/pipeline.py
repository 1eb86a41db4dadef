# Pipeline - Orquestador principal del flujo NL2SQL

import time
import logging
from typing import Optional, Sequence

from core.discovery.schema_formatter import format_schema_for_llm
from core.discovery.schema_scanner import SchemaIntrospector
from core.domain.errors import (
    EmptySchemaError,
    GeneratedSQLRejectedError,
    NoProviderConfiguredError,
)
from core.domain.query import HistoryEntry, QueryOutcome, SQLGenerationRequest
from core.domain.schema import DatabaseSchema
from core.execution.query_executor import QueryExecutor
from core.execution.validator import validate_query
from core.generation.sql_generator import SQLGenerator
from core.ports.database_port import DatabasePort
from utils.metrics import get_metrics

logger = logging.getLogger(__name__)


class QueryPipeline:
    """
    Orquestador principal del flujo NL2SQL.
    Recibe todas las dependencias por constructor (Dependency Injection).

    Flujo:
    1. SchemaIntrospector - Schema del catálogo (cacheado)
    2. format_schema_for_llm - Contexto textual para el prompt
    3. SQLGenerator - Genera SQL (primario -> respaldo)
    4. validate_query - Valida que sea solo lectura
    5. QueryExecutor - Ejecuta con LIMIT y timeout
    """

    def __init__(
        self,
        introspector: SchemaIntrospector,
        sql_generator: SQLGenerator,
        executor: QueryExecutor,
        db: DatabasePort,
    ):
        self.introspector = introspector
        self.sql_generator = sql_generator
        self.executor = executor
        self.db = db

    async def run(
        self,
        question: str,
        provider: Optional[str] = None,
        history: Optional[Sequence[HistoryEntry]] = None,
        explain: bool = False,
    ) -> QueryOutcome:
        """
        Ejecuta el flujo completo para una pregunta.

        Args:
            question: Pregunta en lenguaje natural
            provider: Proveedor preferido (opcional)
            history: Consultas anteriores; solo se usan las 3 últimas
            explain: Incluir el plan de ejecución

        Raises:
            NoProviderConfiguredError, EmptySchemaError,
            GeneratedSQLRejectedError, más los errores de generación y ejecución
        """
        start = time.perf_counter()

        if not self.sql_generator.configured_providers():
            raise NoProviderConfiguredError()

        schema = await self.introspector.introspect()
        if not schema.tables:
            raise EmptySchemaError()
        get_metrics().set_tables_introspected(len(schema.tables))

        request = SQLGenerationRequest(
            natural_language_query=question,
            schema_context=format_schema_for_llm(schema),
            previous_queries=tuple(history or ()),
        )
        generation = await self.sql_generator.generate_sql(request, provider)
        logger.info(f"SQL ({generation.provider}/{generation.model}): {generation.sql}")

        validation = validate_query(generation.sql)
        if not validation.valid:
            get_metrics().record_validation_block()
            raise GeneratedSQLRejectedError(
                validation.error, generation.sql, generation.explanation
            )

        result = await self.executor.execute(generation.sql)
        plan = await self.executor.explain(generation.sql) if explain else None

        get_metrics().record_query()
        logger.info(f"Total: {(time.perf_counter() - start):.1f}s")
        return QueryOutcome(
            question=question, generation=generation, result=result, plan=plan
        )

    async def get_schema(self, refresh: bool = False) -> DatabaseSchema:
        if refresh:
            self.introspector.clear_cache()
        schema = await self.introspector.introspect(force_refresh=refresh)
        get_metrics().set_tables_introspected(len(schema.tables))
        return schema

    async def connection_status(self) -> dict:
        status = await self.db.test_connection()
        providers = self.sql_generator.configured_providers()
        return {
            "database": status.to_dict(),
            "llm": {
                "configuredProviders": providers,
                "hasProvider": len(providers) > 0,
            },
        }

    async def close(self) -> None:
        await self.db.close()
