# Entidades de Schema
# Reflejo de solo lectura del catálogo en el momento de la introspección

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class TableColumn:
    """Columna de una tabla"""

    name: str
    type: str
    is_nullable: bool = True
    is_primary: bool = False
    default_value: Optional[str] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "isNullable": self.is_nullable,
            "isPrimary": self.is_primary,
            "defaultValue": self.default_value,
            "comment": self.comment,
        }


@dataclass(frozen=True)
class ForeignKey:
    """Relación columna -> tabla.columna"""

    column_name: str
    referenced_table: str
    referenced_column: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "columnName": self.column_name,
            "referencedTable": self.referenced_table,
            "referencedColumn": self.referenced_column,
        }


@dataclass(frozen=True)
class TableSchema:
    """Tabla de base de datos"""

    name: str
    schema: str = "public"
    columns: Tuple[TableColumn, ...] = ()
    primary_keys: Tuple[str, ...] = ()
    foreign_keys: Tuple[ForeignKey, ...] = ()
    comment: Optional[str] = None

    def get_column(self, name: str) -> Optional[TableColumn]:
        return next((c for c in self.columns if c.name == name), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "schema": self.schema,
            "columns": [c.to_dict() for c in self.columns],
            "primaryKeys": list(self.primary_keys),
            "foreignKeys": [fk.to_dict() for fk in self.foreign_keys],
            "comment": self.comment,
        }


@dataclass(frozen=True)
class DatabaseSchema:
    """Schema completo de la DB"""

    tables: Tuple[TableSchema, ...] = ()
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def get_table(self, name: str) -> Optional[TableSchema]:
        return next((t for t in self.tables if t.name == name), None)

    def get_table_names(self) -> list:
        return [t.name for t in self.tables]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tables": [t.to_dict() for t in self.tables],
            "tableCount": len(self.tables),
            "timestamp": self.timestamp.isoformat(),
        }
