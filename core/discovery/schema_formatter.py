# Formatea el schema como contexto para el LLM
# Es la única información del schema que ve el modelo

from core.domain.schema import DatabaseSchema, TableColumn


def _format_column(col: TableColumn) -> str:
    flags = []
    if col.is_primary:
        flags.append("PRIMARY KEY")
    if not col.is_nullable:
        flags.append("NOT NULL")

    flag_str = f" [{', '.join(flags)}]" if flags else ""
    comment_str = f" -- {col.comment}" if col.comment else ""
    return f"    - {col.name}: {col.type}{flag_str}{comment_str}"


def format_schema_for_llm(schema: DatabaseSchema) -> str:
    lines = ["DATABASE SCHEMA:", ""]

    for table in schema.tables:
        lines.append(f"TABLE: {table.name}")
        if table.comment:
            lines.append(f"  Description: {table.comment}")
        lines.append("  Columns:")
        lines.extend(_format_column(col) for col in table.columns)

        if table.foreign_keys:
            lines.append("  Foreign Keys:")
            for fk in table.foreign_keys:
                lines.append(
                    f"    - {fk.column_name} -> {fk.referenced_table}.{fk.referenced_column}"
                )

        lines.append("")

    return "\n".join(lines)
