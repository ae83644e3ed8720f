"""Shared fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from gen_ai_example.core.registry import ToolRegistry, create_default_registry
from gen_ai_example.orchestrator import PlannerConfig, TaskExecutor, TaskPlanner

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """Collects finished spans in memory."""
    return InMemorySpanExporter()


@pytest.fixture
def tracer(span_exporter: InMemorySpanExporter) -> Tracer:
    """A tracer wired to the in-memory exporter, independent of global state."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider.get_tracer("tests")


@pytest.fixture
def registry() -> ToolRegistry:
    return create_default_registry()


@pytest.fixture
def planner(tracer: Tracer) -> TaskPlanner:
    return TaskPlanner(PlannerConfig(planning_delay_ms=0), tracer=tracer)


@pytest.fixture
def executor(registry: ToolRegistry, tracer: Tracer) -> TaskExecutor:
    return TaskExecutor(registry, tracer=tracer, summarize_delay=0)
