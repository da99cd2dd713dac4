"""Redaction of sensitive values before they reach a log sink.

``User`` rows store a plaintext ``Password`` and error context can carry
whole request payloads, so anything logged from a DTO, a SQL statement or
an exception goes through this module first.

A key is sensitive when it matches the built-in pattern or contains one of
``LOG_CONFIG__SENSITIVE_FIELDS`` (case-insensitive). The value under such a
key becomes ``[REDACTED]`` whatever its type.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Final

from src.core.config import get_settings
from src.core.constants import REDACTED

BUILTIN_SENSITIVE_KEYS: Final[str] = (
    r"password|passwd|pwd|secret|token|api[_-]?key|authorization|"
    r"credential|private[_-]?key|session|connection[_-]?string"
)

# Deeper structures are replaced wholesale
MAX_DEPTH: Final[int] = 10


@lru_cache(maxsize=1)
def _sensitive_key_pattern() -> re.Pattern[str]:
    configured = (
        re.escape(field) for field in get_settings().log_config.sensitive_fields
    )
    return re.compile("|".join((BUILTIN_SENSITIVE_KEYS, *configured)), re.IGNORECASE)


def is_sensitive_field(field_name: str) -> bool:
    return _sensitive_key_pattern().search(field_name) is not None


def sanitize_value(
    value: Any,  # noqa: ANN401
    field_name: str = "",
    depth: int = 0,
) -> Any:  # noqa: ANN401
    """Redact ``value`` if ``field_name`` is sensitive, recursing into containers.

    Args:
        value: Anything JSON-like.
        field_name: Key the value was found under; empty for sequence items.
        depth: Nesting level of ``value``.

    Returns:
        Any: A sanitized copy; the input is never modified.
    """
    if depth > MAX_DEPTH or (field_name and is_sensitive_field(field_name)):
        return REDACTED

    match value:
        case dict():
            return {k: sanitize_value(v, str(k), depth + 1) for k, v in value.items()}
        case list() | tuple():
            items = [sanitize_value(item, "", depth + 1) for item in value]
            return tuple(items) if isinstance(value, tuple) else items
        case _:
            return value


def sanitize_dict(data: dict[str, Any]) -> dict[str, Any]:
    return {key: sanitize_value(value, key) for key, value in data.items()}


def sanitize_error_context(
    error: Exception, context: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Describe ``error`` for a log record.

    Public attributes of the exception other than ``cause`` are reported
    under ``error_attributes``; ``context`` entries are merged in at the top
    level. Both are sanitized.
    """
    attributes = {
        name: value
        for name, value in vars(error).items()
        if not name.startswith("_") and name != "cause"
    }
    described: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        **sanitize_dict(context or {}),
    }
    if attributes:
        described["error_attributes"] = sanitize_dict(attributes)
    return described


def sanitize_sql_params(params: object) -> object:
    """Sanitize bound parameters of a statement.

    Named parameters are checked by key. Positional ones carry no key to
    check and are returned as they are; any other shape is redacted.
    """
    match params:
        case None | list() | tuple():
            return params
        case dict():
            return sanitize_dict(params)
        case _:
            return REDACTED
