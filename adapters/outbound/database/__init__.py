# Adaptadores de base de datos

from adapters.outbound.database.postgresql import PostgreSQLAdapter

__all__ = ["PostgreSQLAdapter"]
