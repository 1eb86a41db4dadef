# Paquete de rutas - Módulos APIRouter

from adapters.inbound.routes.query import router as query_router
from adapters.inbound.routes.schema import router as schema_router
from adapters.inbound.routes.health import router as health_router

__all__ = ["query_router", "schema_router", "health_router"]
