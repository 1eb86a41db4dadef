# Invocación común a los proveedores langchain
# Normaliza la respuesta del modelo a SQLGenerationResponse

import asyncio
import logging
from typing import Any

from core.domain.errors import ProviderError
from core.domain.query import SQLGenerationRequest, SQLGenerationResponse
from core.generation.response_parser import parse_llm_response
from utils.prompts import build_messages

logger = logging.getLogger(__name__)


def extract_text(message: Any) -> str:
    """Primer bloque de texto de la respuesta (str o lista de bloques)"""
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        for block in content:
            if isinstance(block, str):
                return block
            if isinstance(block, dict) and block.get("type") == "text":
                return block.get("text") or ""
    return ""


async def generate_with_llm(
    llm,
    request: SQLGenerationRequest,
    provider: str,
    label: str,
    model: str,
    timeout_s: float,
) -> SQLGenerationResponse:
    """
    Envía system prompt + prompt de usuario y parsea la respuesta.

    Args:
        llm: chat model de langchain (expone ainvoke)
        provider: identificador del proveedor ("gemini", "claude")
        label: nombre para mensajes de error ("Gemini", "Claude")
        model: modelo resuelto, se copia en la respuesta
        timeout_s: deadline del lado del cliente

    Raises:
        ProviderError: fallo de transporte, timeout o respuesta sin texto
    """
    messages = build_messages(request)

    try:
        response = await asyncio.wait_for(llm.ainvoke(messages), timeout=timeout_s)
    except asyncio.TimeoutError as e:
        raise ProviderError(
            provider, f"{label} API error: request timed out after {timeout_s:g}s"
        ) from e
    except Exception as e:
        raise ProviderError(provider, f"{label} API error: {e}") from e

    text = extract_text(response)
    if not text.strip():
        raise ProviderError(
            provider, f"{label} API error: No text content in {label} response"
        )

    parsed = parse_llm_response(text)
    logger.debug(f"{label} ({model}) -> {parsed.sql}")

    return SQLGenerationResponse(
        sql=parsed.sql,
        explanation=parsed.explanation,
        confidence=parsed.confidence,
        provider=provider,
        model=model,
    )
