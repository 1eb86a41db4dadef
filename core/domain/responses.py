# Modelos de respuesta estandarizados para la API

from typing import TYPE_CHECKING, Any, Dict, Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from core.domain.query import json_safe

if TYPE_CHECKING:
    from core.domain.errors import NL2SQLError

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base con alias camelCase para el JSON"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorDetail(BaseModel):
    """Detalle de error para respuestas"""

    code: str
    message: str
    details: Optional[dict] = None


class APIResponse(BaseModel, Generic[T]):
    """Respuesta estándar de la API"""

    success: bool
    data: Optional[T] = None
    error: Optional[ErrorDetail] = None

    @classmethod
    def ok(cls, data: T = None) -> "APIResponse[T]":
        """Crea respuesta exitosa"""
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls, code: str, message: str, details: dict = None
    ) -> "APIResponse[None]":
        """Crea respuesta de error"""
        return cls(
            success=False,
            error=ErrorDetail(code=code, message=message, details=details),
        )

    @classmethod
    def from_exception(cls, exc: "NL2SQLError") -> "APIResponse[None]":
        """Crea respuesta desde excepción NL2SQLError"""
        return cls(
            success=False,
            error=ErrorDetail(
                code=exc.code, message=exc.message, details=exc.details
            ),
        )


# DTOs específicos para cada endpoint


class FieldData(CamelModel):
    name: str
    data_type_id: int = Field(alias="dataTypeID")


class QueryData(CamelModel):
    """Datos de respuesta de /query"""

    query: str
    sql: str
    explanation: str
    confidence: str
    provider: str
    model: str
    results: List[Dict[str, Any]]
    row_count: int
    fields: List[FieldData]
    execution_time: int
    plan: Optional[List[str]] = None

    @field_serializer("results")
    def serialize_results(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [{key: json_safe(value) for key, value in row.items()} for row in rows]


class SchemaData(CamelModel):
    """Datos de respuesta de /schema"""

    tables: List[Dict[str, Any]]
    table_count: int
    timestamp: str


class DatabaseStatusData(CamelModel):
    connected: bool
    database: Optional[str] = None
    server: Optional[str] = None
    error: Optional[str] = None


class LLMStatusData(CamelModel):
    configured_providers: List[str]
    has_provider: bool


class ConnectionData(CamelModel):
    """Datos de respuesta de /connection"""

    database: DatabaseStatusData
    llm: LLMStatusData
