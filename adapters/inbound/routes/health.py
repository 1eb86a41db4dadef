# Rutas de salud - /, /connection, /metrics

import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from adapters.inbound.dependencies import AppDependencies, get_deps
from core.domain.responses import APIResponse, ConnectionData
from utils.metrics import get_metrics

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

RUNTIME_CONFIG_ERROR = (
    "Runtime connection configuration is not supported. "
    "Please use environment variables."
)


@router.get("/")
async def root():
    """Root endpoint - status básico"""
    return {"status": "ok", "version": "1.0.0"}


@router.get("/connection", response_model=APIResponse[ConnectionData])
async def connection(deps: AppDependencies = Depends(get_deps)):
    """Estado de la DB y proveedores LLM configurados"""
    status = await deps.pipeline.connection_status()
    return APIResponse[ConnectionData].ok(ConnectionData.model_validate(status))


@router.post("/connection")
async def test_connection(
    body: Optional[Dict[str, Any]] = Body(None),
    deps: AppDependencies = Depends(get_deps),
):
    """Prueba la conexión configurada por entorno"""
    if body:
        return JSONResponse(
            status_code=400,
            content=APIResponse.fail("CONFIGURATION_ERROR", RUNTIME_CONFIG_ERROR).model_dump(),
        )

    status = await deps.pipeline.db.test_connection()
    return {"success": status.connected, "data": status.to_dict()}


@router.get("/metrics")
async def metrics_json():
    """Métricas en formato JSON"""
    return get_metrics().get_metrics()


@router.get("/metrics/prometheus", response_class=PlainTextResponse)
async def metrics_prometheus():
    """Métricas en formato Prometheus"""
    return get_metrics().get_prometheus_format()
