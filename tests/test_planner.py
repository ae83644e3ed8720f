"""Tests for task planning."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from gen_ai_example.core import TaskKind, TaskStatus
from gen_ai_example.orchestrator import (
    CALCULATOR_TOOL,
    WEATHER_TOOL,
    PlannerConfig,
    TaskPlanner,
    extract_calculation,
    extract_city,
)

if TYPE_CHECKING:
    from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
    from opentelemetry.trace import Tracer


class TestPlanShape:
    """Tests for the structure of generated plans."""

    @pytest.mark.parametrize(
        "objective",
        ["", "tell me a joke", "summarize the news", "what time is it?"],
    )
    def test_no_trigger_gives_only_summary(self, planner: TaskPlanner, objective: str) -> None:
        """Without a trigger the plan is exactly one summarize task."""
        tasks = planner.plan(objective)
        assert len(tasks) == 1
        assert tasks[0].kind == TaskKind.SUMMARIZE
        assert tasks[0].parameters == {}

    @pytest.mark.parametrize(
        "objective",
        ["What's the weather today?", "WEATHER report please", "请帮我查询北京的天气"],
    )
    def test_weather_trigger(self, planner: TaskPlanner, objective: str) -> None:
        """A weather objective plans a get_weather call before the summary."""
        tasks = planner.plan(objective)
        assert len(tasks) == 2
        assert tasks[0].kind == TaskKind.TOOL_CALL
        assert tasks[0].parameters["tool"] == WEATHER_TOOL
        assert tasks[-1].kind == TaskKind.SUMMARIZE

    def test_weather_before_calculation(self, planner: TaskPlanner) -> None:
        """Weather is checked before calculation regardless of wording order."""
        tasks = planner.plan("Calculate 10+25 and then tell me the weather")
        assert [t.parameters.get("tool") for t in tasks] == [WEATHER_TOOL, CALCULATOR_TOOL, None]

    def test_summary_is_always_last(self, planner: TaskPlanner) -> None:
        tasks = planner.plan("请帮我查询北京的天气，然后计算10+25的结果")
        assert [t.kind for t in tasks] == ["tool_call", "tool_call", "summarize"]

    def test_tasks_are_pending_with_unique_ids(self, planner: TaskPlanner) -> None:
        first = planner.plan("weather and calculate")
        second = planner.plan("weather and calculate")
        ids = [t.id for t in first + second]
        assert len(set(ids)) == len(ids)
        assert all(t.status is TaskStatus.PENDING for t in first)

    def test_plan_run(self, planner: TaskPlanner) -> None:
        run = planner.plan_run("weather")
        assert run.objective == "weather"
        assert len(run.tasks) == 2
        assert run.results == []

    async def test_plan_async_matches_plan(self, planner: TaskPlanner) -> None:
        tasks = await planner.plan_async("calculate 7*6")
        assert [t.kind for t in tasks] == ["tool_call", "summarize"]


class TestParameters:
    """Tests for parameters extracted from the objective."""

    def test_weather_city_from_objective(self, planner: TaskPlanner) -> None:
        tasks = planner.plan("What's the weather in New York today?")
        assert tasks[0].parameters == {"tool": WEATHER_TOOL, "city": "New York"}

    def test_capitalised_keyword_still_finds_city(self, planner: TaskPlanner) -> None:
        """A sentence starting with "Weather in" is matched like the lowercase form."""
        tasks = planner.plan("Weather in Paris, please")
        assert tasks[0].parameters["city"] == "Paris"

    def test_weather_default_city(self, planner: TaskPlanner) -> None:
        tasks = planner.plan("how is the weather")
        assert tasks[0].parameters["city"] == "Beijing"

    def test_configured_default_city(self, tracer: Tracer) -> None:
        planner = TaskPlanner(PlannerConfig(default_city="Oslo"), tracer=tracer)
        assert planner.plan("weather?")[0].parameters["city"] == "Oslo"

    def test_calculation_from_objective(self, planner: TaskPlanner) -> None:
        tasks = planner.plan("Please calculate 12 / 4")
        assert tasks[0].parameters == {
            "tool": CALCULATOR_TOOL,
            "operation": "divide",
            "a": 12.0,
            "b": 4.0,
        }

    def test_calculation_defaults(self, planner: TaskPlanner) -> None:
        tasks = planner.plan("calculate something for me")
        params = tasks[0].parameters
        assert (params["operation"], params["a"], params["b"]) == ("add", 10.0, 25.0)

    def test_custom_triggers(self, tracer: Tracer) -> None:
        planner = TaskPlanner(PlannerConfig(weather_triggers=["forecast"]), tracer=tracer)
        assert len(planner.plan("forecast for tomorrow")) == 2
        assert len(planner.plan("weather for tomorrow")) == 1


class TestExtraction:
    """Tests for the entity extraction helpers."""

    @pytest.mark.parametrize(
        ("objective", "city"),
        [
            ("weather in Paris", "Paris"),
            ("Weather in Paris", "Paris"),
            ("WEATHER FOR Rome", "Rome"),
            ("Check the weather for San Francisco, please", "San Francisco"),
            ("请帮我查询北京的天气", "北京"),
            ("上海天气怎么样", "上海"),
            ("今天北京天气怎么样", "北京"),
            ("我想知道明天广州的天气", "广州"),
            ("帮我查深圳天气", "深圳"),
            ("今天天气怎么样", None),
            ("the weather is nice", None),
        ],
    )
    def test_extract_city(self, objective: str, city: str | None) -> None:
        assert extract_city(objective) == city

    @pytest.mark.parametrize(
        ("objective", "expected"),
        [
            ("10+25", ("add", 10.0, 25.0)),
            ("what is 9 - 4", ("subtract", 9.0, 4.0)),
            ("7 * 6", ("multiply", 7.0, 6.0)),
            ("3x4", ("multiply", 3.0, 4.0)),
            ("1.5 / 0", ("divide", 1.5, 0.0)),
            ("100 divided by 8", ("divide", 100.0, 8.0)),
            ("2 plus 2", ("add", 2.0, 2.0)),
            ("no numbers here", None),
        ],
    )
    def test_extract_calculation(
        self, objective: str, expected: tuple[str, float, float] | None
    ) -> None:
        assert extract_calculation(objective) == expected


class TestPlanningSpan:
    """Tests for the planning span."""

    def test_plan_emits_span(
        self, planner: TaskPlanner, span_exporter: InMemorySpanExporter
    ) -> None:
        tasks = planner.plan("weather and calculate 1+1")

        spans = span_exporter.get_finished_spans()
        assert [s.name for s in spans] == ["agent.plan_tasks"]
        attributes = spans[0].attributes
        assert attributes["gen_ai.operation.name"] == "create_agent"
        assert attributes["gen_ai.agent.planned_tasks_count"] == len(tasks)
        assert attributes["gen_ai.agent.description"] == "weather and calculate 1+1"
        assert attributes["gen_ai.usage.input_tokens"] > 0
