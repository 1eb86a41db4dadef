# Fábrica - Crea el Pipeline con todas las dependencias inyectadas

from typing import Dict, Optional

from config.settings import Settings, settings as default_settings
from adapters.outbound.database.postgresql import PostgreSQLAdapter
from adapters.outbound.llm.llm_factory import create_providers

from core.discovery.schema_scanner import SchemaIntrospector
from core.execution.query_executor import QueryExecutor
from core.generation.sql_generator import SQLGenerator
from core.ports.database_port import DatabasePort
from core.ports.llm_port import SQLProvider
from core.services.pipeline import QueryPipeline


class DependencyContainer:
    """Contenedor de dependencias. Crea e inyecta todas las dependencias concretas."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self._db: Optional[DatabasePort] = None
        self._providers: Optional[Dict[str, SQLProvider]] = None
        self._introspector: Optional[SchemaIntrospector] = None
        self._sql_generator: Optional[SQLGenerator] = None
        self._executor: Optional[QueryExecutor] = None
        self._pipeline: Optional[QueryPipeline] = None

    @property
    def db(self) -> DatabasePort:
        if self._db is None:
            self._db = PostgreSQLAdapter(self.settings.db)
        return self._db

    @property
    def providers(self) -> Dict[str, SQLProvider]:
        if self._providers is None:
            self._providers = create_providers(self.settings.ai)
        return self._providers

    @property
    def introspector(self) -> SchemaIntrospector:
        if self._introspector is None:
            self._introspector = SchemaIntrospector(
                self.db, schema_name=self.settings.db.schema_name
            )
        return self._introspector

    @property
    def sql_generator(self) -> SQLGenerator:
        if self._sql_generator is None:
            self._sql_generator = SQLGenerator(
                self.providers, default_provider=self.settings.ai.llm_provider
            )
        return self._sql_generator

    @property
    def executor(self) -> QueryExecutor:
        if self._executor is None:
            self._executor = QueryExecutor(
                self.db,
                timeout_ms=self.settings.query.query_timeout_ms,
                max_rows=self.settings.query.max_result_rows,
            )
        return self._executor

    @property
    def pipeline(self) -> QueryPipeline:
        if self._pipeline is None:
            self._pipeline = QueryPipeline(
                introspector=self.introspector,
                sql_generator=self.sql_generator,
                executor=self.executor,
                db=self.db,
            )
        return self._pipeline


def create_pipeline(settings: Optional[Settings] = None) -> QueryPipeline:
    """Factory function que crea el Pipeline con todas las dependencias."""
    return DependencyContainer(settings).pipeline
