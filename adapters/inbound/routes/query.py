# Rutas de consulta - /query

import time
import logging
from typing import List, Literal, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from adapters.inbound.dependencies import AppDependencies, get_deps
from core.domain.query import HistoryEntry
from core.domain.responses import APIResponse, CamelModel, FieldData, QueryData
from utils.metrics import get_metrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/query", tags=["Query"])


# Modelos de transferencia de datos
class HistoryItem(BaseModel):
    question: str
    sql: str


class QueryRequest(CamelModel):
    natural_language_query: str = Field(
        ..., min_length=1, max_length=1000, description="Consulta en lenguaje natural"
    )
    provider: Optional[Literal["gemini", "claude"]] = Field(
        None, description="Proveedor preferido; el otro se usa como respaldo"
    )
    previous_queries: List[HistoryItem] = Field(
        default_factory=list,
        description="Consultas anteriores; solo se usan las 3 últimas",
    )
    explain: bool = Field(False, description="Incluir el plan de ejecución")


@router.post("", response_model=APIResponse[QueryData])
async def query(
    request: QueryRequest,
    deps: AppDependencies = Depends(get_deps),
):
    """Traduce la pregunta a SQL, lo valida y lo ejecuta"""
    start_time = time.time()
    metrics = get_metrics()
    success = False
    try:
        outcome = await deps.pipeline.run(
            request.natural_language_query,
            provider=request.provider,
            history=[HistoryEntry(h.question, h.sql) for h in request.previous_queries],
            explain=request.explain,
        )
        success = True
    finally:
        duration_ms = (time.time() - start_time) * 1000
        metrics.record_request("/query", duration_ms, success=success)

    generation, result = outcome.generation, outcome.result
    return APIResponse[QueryData].ok(
        QueryData(
            query=outcome.question,
            sql=generation.sql,
            explanation=generation.explanation,
            confidence=generation.confidence,
            provider=generation.provider,
            model=generation.model,
            results=result.rows,
            row_count=result.row_count,
            fields=[FieldData(name=f.name, data_type_id=f.data_type_id) for f in result.fields],
            execution_time=result.execution_time,
            plan=outcome.plan,
        )
    )
