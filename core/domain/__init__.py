# Core Domain - Entidades de negocio

from core.domain.query import (
    CONFIDENCE_LEVELS,
    HistoryEntry,
    SQLGenerationRequest,
    SQLGenerationResponse,
    FieldInfo,
    FetchResult,
    QueryResult,
    ConnectionStatus,
    QueryOutcome,
)
from core.domain.schema import TableColumn, ForeignKey, TableSchema, DatabaseSchema
from core.domain.errors import (
    NL2SQLError,
    ConfigurationError,
    NoProviderConfiguredError,
    ValidationError,
    GeneratedSQLRejectedError,
    DatabaseError,
    ConnectionError,
    QueryError,
    ExecutionError,
    QueryTimeoutError,
    LLMError,
    ProviderError,
    AllProvidersFailedError,
    SchemaError,
    EmptySchemaError,
)
from core.domain.responses import (
    APIResponse,
    ErrorDetail,
    QueryData,
    SchemaData,
    ConnectionData,
)

__all__ = [
    # Entidades
    "CONFIDENCE_LEVELS",
    "HistoryEntry",
    "SQLGenerationRequest",
    "SQLGenerationResponse",
    "FieldInfo",
    "FetchResult",
    "QueryResult",
    "ConnectionStatus",
    "QueryOutcome",
    "TableColumn",
    "ForeignKey",
    "TableSchema",
    "DatabaseSchema",
    # Errores
    "NL2SQLError",
    "ConfigurationError",
    "NoProviderConfiguredError",
    "ValidationError",
    "GeneratedSQLRejectedError",
    "DatabaseError",
    "ConnectionError",
    "QueryError",
    "ExecutionError",
    "QueryTimeoutError",
    "LLMError",
    "ProviderError",
    "AllProvidersFailedError",
    "SchemaError",
    "EmptySchemaError",
    # Respuestas
    "APIResponse",
    "ErrorDetail",
    "QueryData",
    "SchemaData",
    "ConnectionData",
]
