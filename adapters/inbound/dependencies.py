# Inyección de dependencias para FastAPI

import logging
from typing import Optional

from adapters.factory import create_pipeline
from config.settings import Settings
from core.services.pipeline import QueryPipeline

logger = logging.getLogger(__name__)


class AppDependencies:
    """
    Contenedor de dependencias de la aplicación.
    Singleton que se inicializa una vez y provee dependencias a los endpoints.
    """

    _instance: Optional["AppDependencies"] = None

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings
        self._pipeline: Optional[QueryPipeline] = None

    @classmethod
    def get_instance(cls) -> "AppDependencies":
        """Obtiene la instancia singleton"""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset para testing"""
        cls._instance = None

    @property
    def pipeline(self) -> QueryPipeline:
        if self._pipeline is None:
            self._pipeline = create_pipeline(self.settings)
        return self._pipeline

    def initialize_all(self) -> None:
        """Pre-carga las dependencias (para startup)"""
        _ = self.pipeline
        logger.info("Dependencias inicializadas")

    async def shutdown(self) -> None:
        """Cierra el pool de conexiones"""
        if self._pipeline is not None:
            await self._pipeline.close()
            self._pipeline = None


# Funciones para FastAPI Depends()

def get_deps() -> AppDependencies:
    """Obtiene el contenedor de dependencias"""
    return AppDependencies.get_instance()
