"""Generador de SQL: proveedor primario con un único respaldo."""

import time
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from core.domain.errors import AllProvidersFailedError, ConfigurationError
from core.domain.query import SQLGenerationRequest, SQLGenerationResponse
from core.ports.llm_port import SQLProvider
from utils.metrics import get_metrics

logger = logging.getLogger(__name__)

KNOWN_PROVIDERS = ("gemini", "claude")
FALLBACK_DEFAULT = "gemini"


@dataclass
class GenerationAttempt:
    """Resultado de intentar un proveedor: respuesta o error"""

    provider: str
    response: Optional[SQLGenerationResponse] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.response is not None


class SQLGenerator:
    """
    Orquesta los dos proveedores.

    Primario = preferencia explícita, si no LLM_PROVIDER, si no gemini.
    El respaldo es siempre el otro proveedor y se intenta una sola vez.
    """

    def __init__(
        self, providers: Dict[str, SQLProvider], default_provider: Optional[str] = None
    ):
        self.providers = providers
        default = (default_provider or FALLBACK_DEFAULT).strip().lower()
        if default not in KNOWN_PROVIDERS:
            logger.warning(
                f"LLM_PROVIDER '{default}' desconocido, usando {FALLBACK_DEFAULT}"
            )
            default = FALLBACK_DEFAULT
        self.default_provider = default

    def resolve_order(self, preferred: Optional[str] = None) -> Tuple[str, str]:
        primary = (preferred or self.default_provider).strip().lower()
        if primary not in KNOWN_PROVIDERS:
            raise ConfigurationError(
                f"Unknown LLM provider '{primary}'. Use: {', '.join(KNOWN_PROVIDERS)}",
                setting="LLM_PROVIDER",
            )
        fallback = "claude" if primary == "gemini" else "gemini"
        return primary, fallback

    def is_provider_configured(self, name: str) -> bool:
        provider = self.providers.get(name)
        return bool(provider and provider.is_configured)

    def configured_providers(self) -> List[str]:
        return [name for name in KNOWN_PROVIDERS if self.is_provider_configured(name)]

    async def _attempt(
        self, name: str, request: SQLGenerationRequest
    ) -> GenerationAttempt:
        provider = self.providers.get(name)
        if provider is None:
            return GenerationAttempt(name, error=f"Provider '{name}' is not available")

        start = time.perf_counter()
        try:
            response = await provider.generate(request)
            attempt = GenerationAttempt(name, response=response)
        except Exception as e:
            attempt = GenerationAttempt(name, error=getattr(e, "message", None) or str(e))

        duration_ms = (time.perf_counter() - start) * 1000
        get_metrics().record_llm_call(name, duration_ms, success=attempt.ok)
        return attempt

    async def generate_sql(
        self, request: SQLGenerationRequest, preferred_provider: Optional[str] = None
    ) -> SQLGenerationResponse:
        """
        Genera SQL con el primario y, si falla, con el respaldo.

        Raises:
            ConfigurationError: proveedor desconocido
            AllProvidersFailedError: fallaron ambos proveedores
        """
        primary, fallback = self.resolve_order(preferred_provider)

        first = await self._attempt(primary, request)
        if first.ok:
            return first.response

        logger.warning(f"Primary provider ({primary}) failed: {first.error}")
        logger.info(f"Falling back to {fallback}...")
        get_metrics().record_fallback()

        second = await self._attempt(fallback, request)
        if second.ok:
            return second.response

        logger.error(f"Fallback provider ({fallback}) also failed: {second.error}")
        raise AllProvidersFailedError(
            f"Failed to generate SQL. Primary ({primary}): {first.error}. "
            f"Fallback ({fallback}): {second.error}",
            errors={primary: first.error, fallback: second.error},
        )
