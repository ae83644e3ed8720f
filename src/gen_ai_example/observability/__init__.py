"""Logging and tracing."""

from gen_ai_example.observability.logging import (
    bind_context,
    clear_context,
    get_logger,
    reset_logging,
    setup_logging,
    unbind_context,
)
from gen_ai_example.observability.tracing import (
    create_exporter,
    create_tracer_provider,
    get_tracer,
    messages_json,
    otlp_traces_url,
    record_span_error,
    record_task_result,
    reset_tracing,
    setup_tracing,
    shutdown_tracing,
    task_span,
    to_json,
)

__all__ = [
    "bind_context",
    "clear_context",
    "create_exporter",
    "create_tracer_provider",
    "get_logger",
    "get_tracer",
    "messages_json",
    "otlp_traces_url",
    "record_span_error",
    "record_task_result",
    "reset_logging",
    "reset_tracing",
    "setup_logging",
    "setup_tracing",
    "shutdown_tracing",
    "task_span",
    "to_json",
    "unbind_context",
]
