"""OpenTelemetry tracing for gen-ai-example.

Sets up the tracer provider and its exporter, and provides helpers the
orchestrator uses to open task spans and record their outcome:
- Exporter selection (console, OTLP over HTTP, or auto)
- Task spans carrying id, kind and description
- Success and failure recording on an open span
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.trace import Status, StatusCode, Tracer

from gen_ai_example import __version__
from gen_ai_example.observability import attributes as attrs

if TYPE_CHECKING:
    from collections.abc import Generator

    from gen_ai_example.core.config import TracingSettings
    from gen_ai_example.core.task import Task

logger = logging.getLogger(__name__)

INSTRUMENTATION_NAME = "gen_ai_example"
OTLP_TRACES_PATH = "/v1/traces"

_provider: TracerProvider | None = None
_initialized: bool = False


def otlp_traces_url(endpoint: str) -> str:
    """Normalise an OTLP/HTTP endpoint to its traces URL.

    Any path or query on the endpoint is dropped; only scheme, host and
    port are kept.

    Raises:
        ValueError: If the endpoint is not an http(s) URL with a host.
    """
    parts = urlsplit(endpoint)
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise ValueError(f"invalid endpoint URL: {endpoint!r}")
    netloc = parts.hostname
    if parts.port is not None:
        netloc = f"{netloc}:{parts.port}"
    return f"{parts.scheme}://{netloc}{OTLP_TRACES_PATH}"


def create_exporter(settings: TracingSettings) -> SpanExporter:
    """Build the span exporter the settings ask for.

    "auto" tries OTLP over HTTP first and falls back to the console when
    the endpoint is unusable.
    """
    exporter_type = settings.exporter

    if exporter_type == "console":
        return ConsoleSpanExporter()

    try:
        url = otlp_traces_url(settings.resolved_endpoint())
    except ValueError:
        if exporter_type == "http":
            raise
        logger.warning(
            "Failed to create HTTP exporter for %s, falling back to console",
            settings.resolved_endpoint(),
        )
        return ConsoleSpanExporter()

    return OTLPSpanExporter(endpoint=url)


def create_tracer_provider(
    settings: TracingSettings,
    exporter: SpanExporter | None = None,
) -> TracerProvider:
    """Create a tracer provider with a batching exporter attached."""
    resource = Resource.create(
        {
            "service.name": settings.service_name,
            "service.version": __version__,
        }
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(exporter or create_exporter(settings)))
    return provider


def setup_tracing(settings: TracingSettings) -> TracerProvider | None:
    """Initialize OpenTelemetry tracing and install the global provider.

    Returns:
        The provider, or None when tracing is disabled.
    """
    global _provider, _initialized  # noqa: PLW0603

    if _initialized:
        return _provider

    if not settings.enabled:
        _initialized = True
        return None

    _provider = create_tracer_provider(settings)
    trace.set_tracer_provider(_provider)
    _initialized = True
    logger.debug(
        "Tracing initialized: exporter=%s service=%s",
        settings.exporter,
        settings.service_name,
    )
    return _provider


def shutdown_tracing() -> None:
    """Flush pending spans and shut the provider down."""
    global _provider, _initialized  # noqa: PLW0603
    if _provider is not None:
        _provider.force_flush()
        _provider.shutdown()
    _provider = None
    _initialized = False


def reset_tracing() -> None:
    """Reset tracing state without shutting anything down. Useful for testing."""
    global _provider, _initialized  # noqa: PLW0603
    _provider = None
    _initialized = False


def get_tracer(name: str = INSTRUMENTATION_NAME) -> Tracer:
    """Get a tracer from the configured provider.

    Falls back to the global (possibly no-op) provider when setup_tracing
    has not been called.
    """
    if _provider is not None:
        return _provider.get_tracer(name, __version__)
    return trace.get_tracer(name, __version__)


def to_json(value: Any) -> str:
    """Serialize a value for a span attribute."""
    return json.dumps(value, ensure_ascii=False, default=str)


def messages_json(role: str, content: str, **extra: Any) -> str:
    """Render a single chat message list as a JSON attribute value."""
    return to_json([{"role": role, "content": content, **extra}])


@contextmanager
def task_span(tracer: Tracer, task: Task) -> Generator[trace.Span, None, None]:
    """Open a child span for one task.

    Exceptions leaving the block are not recorded automatically; callers
    record the outcome with record_task_result or record_span_error.
    """
    attributes: dict[str, Any] = {
        attrs.TASK_ID: task.id,
        attrs.TASK_KIND: task.kind,
        attrs.TASK_DESCRIPTION: task.description,
        attrs.GEN_AI_TOOL_NAME: f"task_{task.id}",
        attrs.GEN_AI_TOOL_DESCRIPTION: task.description,
    }

    with tracer.start_as_current_span(
        f"agent.execute_task.{task.id}",
        attributes=attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        yield span


def record_task_result(span: trace.Span, result: Any) -> None:
    """Attach the serialized result and an OK status."""
    span.set_attribute(attrs.TASK_RESULT, to_json(result))
    span.set_status(Status(StatusCode.OK))


def record_span_error(span: trace.Span, error: BaseException) -> None:
    """Record the error on the span and mark it failed."""
    span.record_exception(error)
    span.set_status(Status(StatusCode.ERROR, str(error)))
