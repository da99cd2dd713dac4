"""OpenTelemetry tracing for the API and the CRUD services.

``ObservabilityConfig.exporter_type`` selects where finished spans go:
Loguru at DEBUG level (``console``), an OTLP gRPC collector (``otlp``) or
nowhere (``none``). Requests and SQL statements are instrumented
automatically; service operations open their own spans through
``trace_operation``.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Final

from loguru import logger
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import ReadableSpan, TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    SpanExporter,
    SpanExportResult,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

from src.core.context import RequestContext

if TYPE_CHECKING:
    from collections.abc import Generator, Sequence

    from fastapi import FastAPI

    from src.core.config import Settings

DEFAULT_OTLP_ENDPOINT: Final[str] = "http://localhost:4317"
UNTRACED_PATHS: Final[tuple[str, ...]] = ("/health", "/docs", "/redoc", "/openapi.json")
# Low-level spans emitted by the ASGI and DB-API instrumentations
SKIPPED_SPAN_NAMES: Final[frozenset[str]] = frozenset(
    {"connect", "http send", "http receive", "cursor.execute"}
)
NANOSECONDS_PER_MILLISECOND: Final[int] = 1_000_000


class LoguruSpanExporter(SpanExporter):
    """Writes one DEBUG log line per finished span."""

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        for span in spans:
            if span.name in SKIPPED_SPAN_NAMES or not span.get_span_context():
                continue
            logger.bind(**_span_fields(span)).debug("Span {} finished", span.name)
        return SpanExportResult.SUCCESS


def _span_fields(span: ReadableSpan) -> dict[str, Any]:
    span_context = span.get_span_context()
    attributes = dict(span.attributes or {})
    elapsed = None
    if span.start_time and span.end_time:
        elapsed = (span.end_time - span.start_time) // NANOSECONDS_PER_MILLISECOND
    return {
        "trace_id": f"0x{span_context.trace_id:032x}",
        "span_id": f"0x{span_context.span_id:016x}",
        "correlation_id": attributes.get(
            "correlation_id", RequestContext.get_correlation_id()
        ),
        "duration_ms": elapsed,
        "status": span.status.status_code.name,
    }


def _otlp_exporter(settings: Settings) -> SpanExporter:
    endpoint = settings.observability_config.exporter_endpoint or DEFAULT_OTLP_ENDPOINT
    logger.info("Exporting spans to OTLP collector at {}", endpoint)
    return OTLPSpanExporter(
        endpoint=endpoint, insecure=settings.is_development
    )


_EXPORTERS: Final[dict[str, Callable[[Settings], SpanExporter]]] = {
    "console": lambda _settings: LoguruSpanExporter(),
    "otlp": _otlp_exporter,
}


def get_span_exporter(settings: Settings) -> SpanExporter | None:
    """Return the exporter for the configured type, or None for ``none``."""
    build = _EXPORTERS.get(settings.observability_config.exporter_type)
    if build is None:
        logger.info("Span export disabled")
        return None
    return build(settings)


def setup_tracing(settings: Settings) -> None:
    """Install a sampling tracer provider as the global one.

    Does nothing when ``OBSERVABILITY_CONFIG__ENABLE_TRACING`` is false.
    """
    config = settings.observability_config
    if not config.enable_tracing:
        logger.info("Tracing disabled by configuration")
        return

    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": settings.app_name,
                "service.version": settings.app_version,
                "deployment.environment": settings.environment,
            }
        ),
        sampler=TraceIdRatioBased(config.trace_sample_rate),
    )
    if (exporter := get_span_exporter(settings)) is not None:
        provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    logger.info(
        "Tracing enabled ({} exporter, sample rate {})",
        config.exporter_type,
        config.trace_sample_rate,
    )


def shutdown_tracing() -> None:
    """Flush pending spans; a no-op when no SDK provider is installed."""
    provider = trace.get_tracer_provider()
    if isinstance(provider, TracerProvider):
        provider.shutdown()


def instrument_app(app: FastAPI, settings: Settings) -> None:
    """Trace incoming requests and the SQL they run."""
    if not settings.observability_config.enable_tracing:
        return

    FastAPIInstrumentor.instrument_app(
        app,
        excluded_urls=",".join(UNTRACED_PATHS),
        server_request_hook=add_correlation_id_to_span,
    )
    SQLAlchemyInstrumentor().instrument(enable_commenter=True)
    logger.info("Request and SQL instrumentation active")


def add_correlation_id_to_span(span: trace.Span, scope: dict[str, Any]) -> None:
    """Tag the server span with the correlation and request IDs."""
    if span is None or not span.is_recording():
        return

    if correlation_id := RequestContext.get_correlation_id():
        span.set_attribute("correlation_id", correlation_id)

    headers = dict(scope.get("headers", []))
    if request_id := headers.get(b"x-request-id", b"").decode("latin-1"):
        span.set_attribute("request_id", request_id)


@contextmanager
def trace_operation(
    name: str, **attributes: str | int | float | bool
) -> Generator[trace.Span]:
    """Run a block inside a new span carrying ``attributes``.

    Example:
        >>> with trace_operation("Role.get_by_id", entity_id=7):
        ...     ...
    """
    with trace.get_tracer(__name__).start_as_current_span(name) as span:
        span.set_attributes(attributes)
        if correlation_id := RequestContext.get_correlation_id():
            span.set_attribute("correlation_id", correlation_id)
        yield span
