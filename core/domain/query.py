# Entidades de Query

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

CONFIDENCE_LEVELS = ("high", "medium", "low")


def json_safe(value: Any) -> Any:
    """Convierte bytes (bytea) al texto hex de PostgreSQL: \\x0001"""
    if isinstance(value, memoryview):
        value = value.tobytes()
    if isinstance(value, (bytes, bytearray)):
        return "\\x" + bytes(value).hex()
    if isinstance(value, list):
        return [json_safe(v) for v in value]
    return value


@dataclass(frozen=True)
class HistoryEntry:
    """Par (pregunta, SQL) de una consulta anterior"""

    question: str
    sql: str


@dataclass(frozen=True)
class SQLGenerationRequest:
    """Entrada para los proveedores LLM"""

    natural_language_query: str
    schema_context: str
    previous_queries: Tuple[HistoryEntry, ...] = ()


@dataclass(frozen=True)
class SQLGenerationResponse:
    """Respuesta normalizada de cualquier proveedor"""

    sql: str
    explanation: str
    confidence: str
    provider: str
    model: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sql": self.sql,
            "explanation": self.explanation,
            "confidence": self.confidence,
            "provider": self.provider,
            "model": self.model,
        }


@dataclass(frozen=True)
class FieldInfo:
    """Metadata de una columna del resultado"""

    name: str
    data_type_id: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "dataTypeID": self.data_type_id}


@dataclass
class FetchResult:
    """Resultado crudo del adaptador de DB"""

    rows: List[Dict[str, Any]] = field(default_factory=list)
    fields: List[FieldInfo] = field(default_factory=list)
    row_count: int = 0


@dataclass
class QueryResult:
    """Resultado de una consulta ejecutada"""

    rows: List[Dict[str, Any]] = field(default_factory=list)
    row_count: int = 0
    fields: List[FieldInfo] = field(default_factory=list)
    execution_time: int = 0  # ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": self.rows,
            "rowCount": self.row_count,
            "fields": [f.to_dict() for f in self.fields],
            "executionTime": self.execution_time,
        }


@dataclass
class ConnectionStatus:
    """Estado de la conexión a la DB"""

    connected: bool
    database: Optional[str] = None
    server: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "connected": self.connected,
            "database": self.database,
            "server": self.server,
            "error": self.error,
        }


@dataclass
class QueryOutcome:
    """Resultado completo del pipeline para una pregunta"""

    question: str
    generation: SQLGenerationResponse
    result: QueryResult
    plan: Optional[List[str]] = None
