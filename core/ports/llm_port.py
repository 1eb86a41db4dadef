# Puerto de LLM

from typing import Optional, Protocol, runtime_checkable

from core.domain.query import SQLGenerationRequest, SQLGenerationResponse


@runtime_checkable
class SQLProvider(Protocol):
    """Capacidad común de los proveedores NL -> SQL"""

    name: str

    @property
    def is_configured(self) -> bool:
        """True si hay credencial para el proveedor"""
        ...

    async def generate(
        self, request: SQLGenerationRequest, model_name: Optional[str] = None
    ) -> SQLGenerationResponse:
        """
        Genera SQL para la request.

        Args:
            request: pregunta, contexto de schema e historial
            model_name: override del modelo por defecto

        Raises:
            ProviderError: credencial faltante, fallo de transporte o respuesta vacía
        """
        ...
