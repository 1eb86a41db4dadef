# Rutas de schema - /schema

import time
import logging
from fastapi import APIRouter, Depends, Query

from adapters.inbound.dependencies import AppDependencies, get_deps
from core.domain.responses import APIResponse, SchemaData
from utils.metrics import get_metrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schema", tags=["Schema"])


@router.get("", response_model=APIResponse[SchemaData])
async def get_schema(
    refresh: bool = Query(False, description="Fuerza una nueva introspección"),
    deps: AppDependencies = Depends(get_deps),
):
    """Schema de la base de datos (cacheado salvo refresh=true)"""
    start_time = time.time()
    success = False
    try:
        schema = await deps.pipeline.get_schema(refresh=refresh)
        success = True
    finally:
        get_metrics().record_request(
            "/schema", (time.time() - start_time) * 1000, success=success
        )

    data = schema.to_dict()
    return APIResponse[SchemaData].ok(
        SchemaData(
            tables=data["tables"],
            table_count=data["tableCount"],
            timestamp=data["timestamp"],
        )
    )
