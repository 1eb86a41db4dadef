# Puertos del núcleo - Interfaces para dependencias externas

from core.ports.database_port import DatabasePort
from core.ports.llm_port import SQLProvider

__all__ = ["DatabasePort", "SQLProvider"]
