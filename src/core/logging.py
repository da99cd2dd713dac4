"""Loguru setup for the API process.

``LogConfig.log_formatter_type`` picks the sink:

- **console**: coloured lines with the bound context shown as ``[key=value]``
- **json**: one JSON object per line on stdout, for log collectors

Records from standard library loggers (uvicorn, SQLAlchemy, OpenTelemetry)
are re-emitted through Loguru by ``InterceptHandler``. In both formats the
values of sensitive-looking extra fields are redacted.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Final, cast

from loguru import logger

from src.core.constants import REDACTED
from src.core.error_context import is_sensitive_field, sanitize_dict

if TYPE_CHECKING:
    from src.core.config import Settings

CORRELATION_ID_DISPLAY_LENGTH: Final[int] = 8
MAX_FIELD_VALUE_LENGTH: Final[int] = 100
# Shown first, in this order, when bound
PRIORITY_FIELDS: Final[tuple[str, ...]] = (
    "correlation_id",
    "request_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "entity",
    "entity_id",
)
STDLIB_LOGGERS: Final[tuple[str, ...]] = ("uvicorn", "uvicorn.error", "uvicorn.access")
CONSOLE_PREFIX: Final[str] = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>"
)


class _LoggingState:
    configured = False


_state = _LoggingState()


def _escape(value: object) -> str:
    """Double the braces so Loguru does not read them as format fields."""
    return str(value).replace("{", "{{").replace("}", "}}")


def _display_value(key: str, value: object) -> str:
    if is_sensitive_field(key):
        return REDACTED
    if key == "correlation_id":
        return str(value)[:CORRELATION_ID_DISPLAY_LENGTH]
    if key == "duration_ms":
        return f"{value}ms"
    text = str(value)
    if len(text) > MAX_FIELD_VALUE_LENGTH:
        return text[: MAX_FIELD_VALUE_LENGTH - 3] + "..."
    return text


def _context_keys(extra: dict[str, Any]) -> Iterator[str]:
    """Priority fields first, then the remaining public ones as bound."""
    yield from (key for key in PRIORITY_FIELDS if extra.get(key) is not None)
    for key, value in extra.items():
        if key in PRIORITY_FIELDS or key.startswith("_") or value is None:
            continue
        yield key


def format_console_with_context(record: dict[str, Any]) -> str:
    """Build the Loguru format string for one console record."""
    extra: dict[str, Any] = record.get("extra", {})
    context = " ".join(
        f"[{_escape(key)}={_escape(_display_value(key, extra[key]))}]"
        for key in _context_keys(extra)
    )

    line = CONSOLE_PREFIX
    if context:
        line += f" | <dim>{context}</dim>"
    line += f" | {_escape(record.get('message', ''))}\n"
    if record.get("exception"):
        line += "{exception}"
    return line


def serialize_for_json(record: dict[str, Any]) -> str:
    """Render a record as one JSON line, extras merged at the top level."""
    public_extra = {
        key: value
        for key, value in record.get("extra", {}).items()
        if not key.startswith("_")
    }
    entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
        **sanitize_dict(public_extra),
    }
    if exc := record.get("exception"):
        entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }
    return json.dumps(entry, default=str) + "\n"


class InterceptHandler(logging.Handler):
    """Standard library handler that re-emits records through Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Report the caller of the stdlib logger, not logging internals
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _json_sink(message: object) -> None:
    if (record := getattr(message, "record", None)) is not None:
        sys.stdout.write(serialize_for_json(record))
        sys.stdout.flush()


def _sink_options(settings: Settings) -> dict[str, Any]:
    if settings.log_config.log_formatter_type == "json":
        return {"sink": _json_sink, "diagnose": False, "backtrace": False}
    return {
        "sink": sys.stdout,
        "format": cast("Any", format_console_with_context),
        "colorize": True,
        "diagnose": settings.debug,
        "backtrace": settings.debug,
    }


def setup_logging(settings: Settings) -> None:
    """Install the configured sink and route stdlib logging into it.

    Later calls are ignored so the app factory can run more than once.
    """
    if _state.configured:
        return

    logger.remove()
    logger.add(
        **_sink_options(settings), level=settings.log_config.log_level, enqueue=True
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in STDLIB_LOGGERS:
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = [InterceptHandler()]
        stdlib_logger.propagate = False

    _state.configured = True
    logger.info(
        "Logging to {} at level {}",
        settings.log_config.log_formatter_type or "console",
        settings.log_config.log_level,
    )
