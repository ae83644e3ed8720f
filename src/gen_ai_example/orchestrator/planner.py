"""Task planning.

The planner turns an objective into an ordered list of tasks. It checks
the objective for a weather intent, then for a calculation intent, and
always closes the plan with a summarize task, so a plan is never empty.

Trigger matching is a case-insensitive substring test. Parameter values
are pulled out of the objective where a simple pattern finds them (the
city after "weather in", an arithmetic expression such as "10+25") and
fall back to the configured defaults otherwise. A language-model planner
would replace both steps.
"""

from __future__ import annotations

import asyncio
import re
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from pydantic import BaseModel, Field

from gen_ai_example.core.task import Run, Task, TaskKind
from gen_ai_example.observability import attributes as attrs
from gen_ai_example.observability.tracing import get_tracer, messages_json

if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.trace import Span, Tracer

WEATHER_TOOL = "get_weather"
CALCULATOR_TOOL = "calculator"
TOOL_PARAMETER = "tool"


class PlannerConfig(BaseModel):
    """Configuration for the task planner."""

    weather_triggers: list[str] = Field(
        default_factory=lambda: ["weather", "天气"],
        description="Substrings that signal a weather intent",
    )
    calculation_triggers: list[str] = Field(
        default_factory=lambda: ["calculate", "calculation", "compute", "计算"],
        description="Substrings that signal a calculation intent",
    )
    default_city: str = Field(default="Beijing", description="City when none is named")
    default_operation: str = Field(default="add", description="Operation when none is found")
    default_operands: tuple[float, float] = Field(
        default=(10.0, 25.0), description="Operands when none are found"
    )
    planning_delay_ms: int = Field(
        default=200, ge=0, description="Simulated thinking time for plan_async"
    )


_ENGLISH_CITY = re.compile(
    r"(?i:weather\s+(?:in|for|at|of))\s+([A-Z][\w'-]*(?:\s+[A-Z][\w'-]*)*)"
)
# Text before the first "天气"; the city is what is left once filler words are cut out.
_CHINESE_CITY = re.compile(r"([\u4e00-\u9fff]+?)天气")
_CHINESE_FILLER = re.compile(
    r"查询|查一下|查|请问|告诉我|帮我|我想知道|今天|明天|后天|现在|目前|的"
)

_NUMBER = r"(-?\d+(?:\.\d+)?)"

_SYMBOL_EXPRESSION = re.compile(_NUMBER + r"\s*([+\-*/xX×÷])\s*" + _NUMBER)
_WORD_EXPRESSION = re.compile(
    _NUMBER + r"\s+(plus|minus|times|multiplied by|divided by|over)\s+" + _NUMBER,
    re.IGNORECASE,
)

_OPERATORS = {
    "+": "add",
    "-": "subtract",
    "*": "multiply",
    "x": "multiply",
    "×": "multiply",
    "/": "divide",
    "÷": "divide",
    "plus": "add",
    "minus": "subtract",
    "times": "multiply",
    "multiplied by": "multiply",
    "divided by": "divide",
    "over": "divide",
}


def _matches(objective: str, triggers: list[str]) -> bool:
    """Case-insensitive substring check against any trigger."""
    text = objective.lower()
    return any(trigger.lower() in text for trigger in triggers)


def extract_city(objective: str) -> str | None:
    """Find the city a weather request is about, if the objective names one."""
    match = _ENGLISH_CITY.search(objective)
    if match:
        return match.group(1).strip()

    match = _CHINESE_CITY.search(objective)
    if match:
        parts = [p for p in _CHINESE_FILLER.split(match.group(1)) if p]
        if parts and 2 <= len(parts[-1]) <= 4:
            return parts[-1]
    return None


def extract_calculation(objective: str) -> tuple[str, float, float] | None:
    """Find a two-operand arithmetic expression in the objective."""
    match = _SYMBOL_EXPRESSION.search(objective) or _WORD_EXPRESSION.search(objective)
    if match is None:
        return None
    left, operator, right = match.groups()
    operation = _OPERATORS[operator.lower()]
    return operation, float(left), float(right)


def estimate_input_tokens(objective: str) -> int:
    """Rough token count of the planning request: one per character plus overhead."""
    return len(objective) + 10


def estimate_output_tokens(tasks: list[Task]) -> int:
    """Rough token count of the planning response."""
    return len(tasks) * 20 + 30


def plan_messages(objective: str, tasks: list[Task]) -> str:
    """The planner's answer rendered as an assistant message."""
    return messages_json(
        "assistant",
        f"Task planning completed for objective: {objective}",
        tasks=[
            {"task_id": t.id, "description": t.description, "type": t.kind} for t in tasks
        ],
    )


class TaskPlanner:
    """Plans the tasks needed to reach an objective.

    Example:
        planner = TaskPlanner()
        tasks = planner.plan("What's the weather in Paris? Then calculate 7*6")
        # -> get_weather(city="Paris"), calculator(multiply, 7, 6), summarize
    """

    def __init__(
        self,
        config: PlannerConfig | None = None,
        *,
        tracer: Tracer | None = None,
        agent_name: str = "assistant",
    ) -> None:
        self._config = config or PlannerConfig()
        self._tracer = tracer or get_tracer()
        self._agent_name = agent_name

    @property
    def config(self) -> PlannerConfig:
        return self._config

    def plan(self, objective: str) -> list[Task]:
        """Create the ordered task list for an objective."""
        with self._plan_span(objective) as span:
            tasks = self.build_tasks(objective)
            self._record_plan(span, objective, tasks)
        return tasks

    async def plan_async(self, objective: str) -> list[Task]:
        """Create the task list, simulating the planner's thinking time."""
        with self._plan_span(objective) as span:
            await asyncio.sleep(self._config.planning_delay_ms / 1000)
            tasks = self.build_tasks(objective)
            self._record_plan(span, objective, tasks)
        return tasks

    def plan_run(self, objective: str) -> Run:
        """Plan an objective and wrap the tasks in a new run."""
        return Run(objective=objective, tasks=self.plan(objective))

    def build_tasks(self, objective: str) -> list[Task]:
        """Build the task list without opening a span."""
        tasks: list[Task] = []

        weather = self.weather_parameters(objective)
        if weather is not None:
            tasks.append(
                Task.create(
                    description="Query weather information",
                    kind=TaskKind.TOOL_CALL,
                    parameters={TOOL_PARAMETER: WEATHER_TOOL, **weather},
                )
            )

        calculation = self.calculation_parameters(objective)
        if calculation is not None:
            tasks.append(
                Task.create(
                    description="Perform mathematical calculation",
                    kind=TaskKind.TOOL_CALL,
                    parameters={TOOL_PARAMETER: CALCULATOR_TOOL, **calculation},
                )
            )

        tasks.append(
            Task.create(
                description="Summarize execution results",
                kind=TaskKind.SUMMARIZE,
            )
        )
        return tasks

    def weather_parameters(self, objective: str) -> dict[str, Any] | None:
        """Parameters for get_weather, or None if the objective has no weather intent."""
        if not _matches(objective, self._config.weather_triggers):
            return None
        return {"city": extract_city(objective) or self._config.default_city}

    def calculation_parameters(self, objective: str) -> dict[str, Any] | None:
        """Parameters for calculator, or None if the objective has no calculation intent."""
        if not _matches(objective, self._config.calculation_triggers):
            return None
        found = extract_calculation(objective)
        if found is None:
            a, b = self._config.default_operands
            found = (self._config.default_operation, a, b)
        operation, a, b = found
        return {"operation": operation, "a": a, "b": b}

    @contextmanager
    def _plan_span(self, objective: str) -> Generator[Span, None, None]:
        with self._tracer.start_as_current_span(
            "agent.plan_tasks",
            attributes={
                attrs.GEN_AI_PROVIDER_NAME: attrs.PROVIDER_OPENAI,
                attrs.GEN_AI_OPERATION_NAME: attrs.OPERATION_CREATE_AGENT,
                attrs.GEN_AI_AGENT_ID: str(uuid4()),
                attrs.GEN_AI_AGENT_NAME: self._agent_name,
                attrs.GEN_AI_AGENT_DESCRIPTION: objective,
            },
        ) as span:
            yield span

    def _record_plan(self, span: Span, objective: str, tasks: list[Task]) -> None:
        span.set_attributes(
            {
                attrs.PLANNED_TASKS_COUNT: len(tasks),
                attrs.GEN_AI_INPUT_MESSAGES: messages_json("user", objective),
                attrs.GEN_AI_OUTPUT_MESSAGES: plan_messages(objective, tasks),
                attrs.GEN_AI_USAGE_INPUT_TOKENS: estimate_input_tokens(objective),
                attrs.GEN_AI_USAGE_OUTPUT_TOKENS: estimate_output_tokens(tasks),
            }
        )

