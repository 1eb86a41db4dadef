"""Parser de la respuesta textual del LLM."""

import json
import re
import logging
from typing import NamedTuple

from core.domain.query import CONFIDENCE_LEVELS

logger = logging.getLogger(__name__)

DEFAULT_EXPLANATION = "No explanation provided"
FALLBACK_EXPLANATION = "Extracted SQL from response"

_FENCE_OPEN = re.compile(r"^```[\w-]*")
_SELECT_FALLBACK = re.compile(r"SELECT[\s\S]+?(?:;|\Z)", re.IGNORECASE)


class ParsedResponse(NamedTuple):
    sql: str
    explanation: str
    confidence: str


def _strip_fences(text: str) -> str:
    text = _FENCE_OPEN.sub("", text.strip(), count=1)
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_llm_response(response: str) -> ParsedResponse:
    """
    Extrae sql/explanation/confidence. Nunca lanza excepción.

    Primero intenta JSON (con o sin bloque markdown). Si falla, busca un
    SELECT en el texto y lo devuelve con confianza baja.
    """
    try:
        parsed = json.loads(_strip_fences(response))
    except (ValueError, RecursionError):
        parsed = None

    if isinstance(parsed, dict):
        confidence = parsed.get("confidence")
        return ParsedResponse(
            sql=str(parsed.get("sql") or ""),
            explanation=str(parsed.get("explanation") or DEFAULT_EXPLANATION),
            confidence=confidence if confidence in CONFIDENCE_LEVELS else "medium",
        )

    logger.debug("Respuesta no es JSON, extrayendo SQL del texto")
    match = _SELECT_FALLBACK.search(response)
    return ParsedResponse(
        sql=match.group(0).strip() if match else response,
        explanation=FALLBACK_EXPLANATION,
        confidence="low",
    )
