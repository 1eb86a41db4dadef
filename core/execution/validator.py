"""Validador de SQL: solo lectura (SELECT / WITH)."""

import re
import logging
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)

FORBIDDEN_KEYWORDS = [
    "insert",
    "update",
    "delete",
    "drop",
    "truncate",
    "alter",
    "create",
    "grant",
    "revoke",
    "exec",
    "execute",
]

_keywords = "|".join(FORBIDDEN_KEYWORDS)

FORBIDDEN_PATTERNS = [
    re.compile(rf"^\s*({_keywords})\b", re.IGNORECASE),
    # Sentencias apiladas: "SELECT 1; DROP TABLE t"
    re.compile(rf";\s*({_keywords})\b", re.IGNORECASE),
]

MODIFICATION_ERROR = (
    "Only SELECT queries are allowed. Data modification operations are disabled."
)
PREFIX_ERROR = "Query must start with SELECT or WITH (for CTEs)."


class ValidationResult(NamedTuple):
    valid: bool
    error: Optional[str] = None


def validate_query(sql: str) -> ValidationResult:
    normalized = (sql or "").strip().lower()

    for pattern in FORBIDDEN_PATTERNS:
        match = pattern.search(normalized)
        if match:
            logger.warning(f"SQL peligroso: {match.group(1).upper()}")
            return ValidationResult(False, MODIFICATION_ERROR)

    if not (normalized.startswith("select") or normalized.startswith("with")):
        return ValidationResult(False, PREFIX_ERROR)

    return ValidationResult(True)


def is_safe_sql(sql: str) -> bool:
    return validate_query(sql).valid
