# Fábrica de proveedores LLM
# Proveedores: gemini, claude

import logging
from typing import Dict

from config.settings import AISettings
from core.ports.llm_port import SQLProvider
from adapters.outbound.llm.claude import ClaudeProvider
from adapters.outbound.llm.gemini import GeminiProvider

logger = logging.getLogger(__name__)


def _create_gemini(ai: AISettings) -> GeminiProvider:
    return GeminiProvider(
        api_key=ai.gemini_api_key,
        default_model=ai.gemini_model,
        temperature=ai.llm_temperature,
        max_tokens=ai.llm_max_tokens,
        timeout_s=ai.llm_timeout_s,
    )


def _create_claude(ai: AISettings) -> ClaudeProvider:
    return ClaudeProvider(
        api_key=ai.claude_api_key,
        default_model=ai.claude_model,
        temperature=ai.llm_temperature,
        max_tokens=ai.llm_max_tokens,
        timeout_s=ai.llm_timeout_s,
    )


# El orden define el de configured_providers()
PROVIDERS = {
    "gemini": _create_gemini,
    "claude": _create_claude,
}


def create_providers(ai: AISettings) -> Dict[str, SQLProvider]:
    """Instancia todos los proveedores. Ninguno conecta hasta el primer uso."""
    providers = {name: factory(ai) for name, factory in PROVIDERS.items()}
    configured = [name for name, p in providers.items() if p.is_configured]
    logger.info(f"Proveedores con credencial: {configured or 'ninguno'}")
    return providers
