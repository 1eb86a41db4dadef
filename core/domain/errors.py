# Excepciones personalizadas para NL2SQL

from typing import Dict, Optional


class NL2SQLError(Exception):
    """Excepción base para NL2SQL"""

    def __init__(self, message: str, code: str, details: dict = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


class ConfigurationError(NL2SQLError):
    """Falta una credencial o parámetro de configuración"""

    def __init__(self, message: str, setting: str = None):
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details={"setting": setting} if setting else {},
        )


class NoProviderConfiguredError(ConfigurationError):
    """Ningún proveedor LLM tiene credencial"""

    def __init__(
        self,
        message: str = "No LLM providers configured. Please set GEMINI_API_KEY or CLAUDE_API_KEY.",
    ):
        super().__init__(message=message)


class ValidationError(NL2SQLError):
    """SQL rechazado por la lista de permitidos"""

    def __init__(self, message: str, sql: str = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"sql": sql} if sql else {},
        )


class GeneratedSQLRejectedError(ValidationError):
    """El SQL generado por el LLM no pasó la validación"""

    def __init__(self, message: str, generated_sql: str, explanation: str = None):
        super().__init__(message=message)
        self.generated_sql = generated_sql
        self.explanation = explanation
        self.details = {"generatedSQL": generated_sql, "explanation": explanation}


class DatabaseError(NL2SQLError):
    """Errores de base de datos"""

    def __init__(self, message: str, query: str = None, code: str = "DATABASE_ERROR"):
        super().__init__(
            message=message,
            code=code,
            details={"query": query[:100] if query else None},
        )


class ConnectionError(DatabaseError):
    """Error de conexión a la base de datos"""

    def __init__(self, message: str = "Could not connect to the database."):
        super().__init__(message=message, query=None, code="CONNECTION_ERROR")


class QueryError(DatabaseError):
    """Falla en las consultas de catálogo"""

    def __init__(self, message: str, query: str = None):
        super().__init__(message=message, query=query)


class ExecutionError(DatabaseError):
    """Error al ejecutar SQL ya validado"""

    def __init__(self, message: str, query: str = None):
        super().__init__(message=f"Query execution error: {message}", query=query)


class QueryTimeoutError(DatabaseError):
    """La sentencia superó el statement_timeout"""

    def __init__(self, timeout_ms: int, query: str = None):
        super().__init__(
            message=(
                f"Query timed out after {timeout_ms}ms. "
                "Consider adding filters or LIMIT clause."
            ),
            query=query,
            code="TIMEOUT_ERROR",
        )
        self.timeout_ms = timeout_ms
        self.details["timeout_ms"] = timeout_ms


class LLMError(NL2SQLError):
    """Errores del LLM"""

    def __init__(self, message: str, provider: str = None):
        super().__init__(
            message=message, code="LLM_ERROR", details={"provider": provider}
        )


class ProviderError(LLMError):
    """Falló una llamada a un proveedor"""

    def __init__(self, provider: str, message: str):
        super().__init__(message=message, provider=provider)
        self.provider = provider


class AllProvidersFailedError(LLMError):
    """Fallaron el proveedor primario y el de respaldo"""

    def __init__(self, message: str, errors: Dict[str, str]):
        super().__init__(message=message)
        self.errors = errors
        self.details = {"errors": dict(errors)}


class SchemaError(NL2SQLError):
    """Errores de schema/tablas"""

    def __init__(self, message: str, schema: Optional[str] = None):
        super().__init__(
            message=message, code="SCHEMA_ERROR", details={"schema": schema}
        )


class EmptySchemaError(SchemaError):
    """La base de datos no tiene tablas"""

    def __init__(
        self,
        message: str = "No tables found in database. Please check your connection.",
    ):
        super().__init__(message=message, schema=None)
