# API Adapter - FastAPI entry point

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adapters.inbound.dependencies import get_deps
from adapters.inbound.routes import health_router, query_router, schema_router
from config.settings import settings
from core.domain.errors import NL2SQLError
from core.domain.responses import APIResponse
from utils.logging import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

# Código de error -> status HTTP
STATUS_BY_CODE = {
    "VALIDATION_ERROR": 400,
    "SCHEMA_ERROR": 400,
    "CONFIGURATION_ERROR": 500,
    "DATABASE_ERROR": 500,
    "LLM_ERROR": 502,
    "CONNECTION_ERROR": 503,
    "TIMEOUT_ERROR": 504,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Inicializa dependencias al startup y cierra el pool al apagar"""
    logger.info(f"Iniciando {settings.app_name} API...")
    deps = get_deps()
    deps.initialize_all()
    yield
    logger.info("Cerrando API...")
    await deps.shutdown()


app = FastAPI(
    title=f"{settings.app_name} API",
    description="Natural Language to SQL over PostgreSQL",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NL2SQLError)
async def nl2sql_error_handler(request: Request, exc: NL2SQLError):
    status_code = STATUS_BY_CODE.get(exc.code, 500)
    logger.error(f"{request.url.path} -> {status_code} {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=APIResponse.from_exception(exc).model_dump(),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Error inesperado en {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content=APIResponse.fail("INTERNAL_ERROR", "Internal server error").model_dump(),
    )


app.include_router(health_router)
app.include_router(query_router)
app.include_router(schema_router)
