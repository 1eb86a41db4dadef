# CLI Adapter - Entry point por línea de comandos

import json
import asyncio
import logging
import argparse

from adapters.factory import create_pipeline
from core.discovery.schema_formatter import format_schema_for_llm
from core.domain.errors import NL2SQLError
from core.services.pipeline import QueryPipeline
from utils.logging import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="NL2SQL - Natural Language to SQL")
    parser.add_argument("--query", "-q", help="Consulta en lenguaje natural")
    parser.add_argument(
        "--provider", "-p", choices=["gemini", "claude"], help="Proveedor LLM preferido"
    )
    parser.add_argument("--explain", action="store_true", help="Incluye el plan de ejecución")
    parser.add_argument("--schema", action="store_true", help="Muestra el schema formateado")
    parser.add_argument("--refresh", action="store_true", help="Fuerza re-introspección")
    parser.add_argument("--info", action="store_true", help="Estado de conexión y proveedores")
    return parser


async def _show_info(pipeline: QueryPipeline) -> None:
    status = await pipeline.connection_status()
    db, llm = status["database"], status["llm"]
    print("\nBase de Datos:")
    print(f"   Conectada: {'Sí' if db['connected'] else 'No'}")
    if db["connected"]:
        print(f"   Nombre: {db['database']}")
        print(f"   Servidor: {db['server']}")
    else:
        print(f"   Error: {db['error']}")
    providers = ", ".join(llm["configuredProviders"]) or "ninguno"
    print(f"   Proveedores LLM: {providers}")


async def _show_schema(pipeline: QueryPipeline, refresh: bool) -> None:
    schema = await pipeline.get_schema(refresh=refresh)
    print(format_schema_for_llm(schema))
    print(f"Tablas: {len(schema.tables)}")


async def _run_query(pipeline: QueryPipeline, query: str, args) -> None:
    if args.refresh:
        await pipeline.get_schema(refresh=True)
    outcome = await pipeline.run(query, provider=args.provider, explain=args.explain)
    generation, result = outcome.generation, outcome.result

    print(f"\n{'=' * 50}")
    print(f"Query: {query}")
    print(f"{'=' * 50}")
    print(f"SQL ({generation.provider}/{generation.model}, {generation.confidence}):")
    print(generation.sql)
    print(f"\n{generation.explanation}\n")
    for row in result.rows:
        print(json.dumps(row, default=str, ensure_ascii=False))
    print(f"\n{result.row_count} filas en {result.execution_time}ms")
    if outcome.plan:
        print("\nPlan:")
        print("\n".join(outcome.plan))


async def run(args) -> int:
    pipeline = create_pipeline()
    try:
        if args.info:
            await _show_info(pipeline)
            return 0

        if args.schema:
            await _show_schema(pipeline, args.refresh)
            return 0

        query = args.query or input("Consulta: ").strip()
        if not query:
            print("Error: Query requerida")
            return 1

        await _run_query(pipeline, query, args)
        return 0
    except NL2SQLError as e:
        logger.error(f"{e.code}: {e.message}")
        return 1
    finally:
        await pipeline.close()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    return asyncio.run(run(args))


if __name__ == "__main__":
    raise SystemExit(main())
