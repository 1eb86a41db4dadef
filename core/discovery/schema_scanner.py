"""Introspección del catálogo de PostgreSQL."""

import logging
from datetime import datetime, timezone
from typing import Optional

from core.domain.errors import ExecutionError, QueryError, QueryTimeoutError
from core.domain.schema import DatabaseSchema, ForeignKey, TableColumn, TableSchema
from core.ports.database_port import DatabasePort

logger = logging.getLogger(__name__)

TABLES_QUERY = """
    SELECT
        t.table_name,
        t.table_schema,
        obj_description(
            (quote_ident(t.table_schema) || '.' || quote_ident(t.table_name))::regclass,
            'pg_class'
        ) AS table_comment
    FROM information_schema.tables t
    WHERE t.table_schema = %s
      AND t.table_type = 'BASE TABLE'
    ORDER BY t.table_name
"""

COLUMNS_QUERY = """
    SELECT
        c.column_name,
        c.data_type,
        c.udt_name,
        c.is_nullable,
        c.column_default,
        col_description(
            (quote_ident(c.table_schema) || '.' || quote_ident(c.table_name))::regclass,
            c.ordinal_position
        ) AS column_comment
    FROM information_schema.columns c
    WHERE c.table_schema = %s AND c.table_name = %s
    ORDER BY c.ordinal_position
"""

PRIMARY_KEYS_QUERY = """
    SELECT kcu.column_name
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
        ON tc.constraint_name = kcu.constraint_name
        AND tc.table_schema = kcu.table_schema
    WHERE tc.constraint_type = 'PRIMARY KEY'
      AND tc.table_schema = %s
      AND tc.table_name = %s
    ORDER BY kcu.ordinal_position
"""

FOREIGN_KEYS_QUERY = """
    SELECT
        kcu.column_name,
        ccu.table_name AS referenced_table,
        ccu.column_name AS referenced_column
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
        ON tc.constraint_name = kcu.constraint_name
        AND tc.table_schema = kcu.table_schema
    JOIN information_schema.constraint_column_usage ccu
        ON ccu.constraint_name = tc.constraint_name
        AND ccu.table_schema = tc.table_schema
    WHERE tc.constraint_type = 'FOREIGN KEY'
      AND tc.table_schema = %s
      AND tc.table_name = %s
"""


class SchemaIntrospector:
    """
    Lee el catálogo y construye un DatabaseSchema.

    El resultado queda en un cache de un solo slot, sin TTL. Solo se invalida
    con force_refresh o clear_cache().
    """

    def __init__(self, db: DatabasePort, schema_name: str = "public"):
        self.db = db
        self.schema_name = schema_name
        self._cache: Optional[DatabaseSchema] = None

    async def introspect(self, force_refresh: bool = False) -> DatabaseSchema:
        if self._cache is not None and not force_refresh:
            return self._cache

        try:
            tables_result = await self.db.fetch(TABLES_QUERY, (self.schema_name,))
            tables = []
            # Secuencial y en orden alfabético para prompts estables
            for row in tables_result.rows:
                tables.append(
                    await self._scan_table(
                        row["table_schema"], row["table_name"], row.get("table_comment")
                    )
                )
        except (ExecutionError, QueryTimeoutError) as e:
            raise QueryError(f"Schema introspection failed: {e.message}") from e

        schema = DatabaseSchema(
            tables=tuple(tables), timestamp=datetime.now(timezone.utc)
        )
        self._cache = schema
        logger.info(f"Schema '{self.schema_name}': {len(tables)} tablas")
        return schema

    async def _scan_table(
        self, table_schema: str, table_name: str, comment: Optional[str]
    ) -> TableSchema:
        params = (table_schema, table_name)
        columns_result = await self.db.fetch(COLUMNS_QUERY, params)
        pk_result = await self.db.fetch(PRIMARY_KEYS_QUERY, params)
        fk_result = await self.db.fetch(FOREIGN_KEYS_QUERY, params)

        primary_keys = tuple(r["column_name"] for r in pk_result.rows)
        foreign_keys = tuple(
            ForeignKey(
                column_name=r["column_name"],
                referenced_table=r["referenced_table"],
                referenced_column=r["referenced_column"],
            )
            for r in fk_result.rows
        )
        columns = tuple(
            TableColumn(
                name=c["column_name"],
                type=c.get("udt_name") or c["data_type"],
                is_nullable=c["is_nullable"] == "YES",
                is_primary=c["column_name"] in primary_keys,
                default_value=c.get("column_default"),
                comment=c.get("column_comment"),
            )
            for c in columns_result.rows
        )

        return TableSchema(
            name=table_name,
            schema=table_schema,
            columns=columns,
            primary_keys=primary_keys,
            foreign_keys=foreign_keys,
            comment=comment,
        )

    def get_cached(self) -> Optional[DatabaseSchema]:
        """Schema en cache sin hacer I/O"""
        return self._cache

    def clear_cache(self) -> None:
        self._cache = None
