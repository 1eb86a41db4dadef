# Puerto de Base de Datos

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from core.domain.query import ConnectionStatus, FetchResult


class DatabasePort(ABC):
    """Puerto para acceso asíncrono a base de datos"""

    @abstractmethod
    async def fetch(
        self,
        query: str,
        params: Optional[Sequence[Any]] = None,
        timeout_ms: Optional[int] = None,
    ) -> FetchResult:
        """
        Ejecuta una query y retorna filas y metadata de columnas.

        Raises:
            ConnectionError: si no se puede obtener conexión
            QueryTimeoutError: si se supera timeout_ms
            ExecutionError: cualquier otro error del driver
        """
        pass

    @abstractmethod
    async def test_connection(self) -> ConnectionStatus:
        """Verifica la conexión (nunca lanza)"""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Libera el pool de conexiones"""
        pass
