"""Agent facade: the planning and execution entry points.

An agent owns a tool registry, a planner and an executor that share one
tracer. plan() returns a run for display; execute() runs it and reports
success or failure together with the final task list.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from gen_ai_example.core.errors import TaskFailedError
from gen_ai_example.core.registry import ToolRegistry, create_default_registry
from gen_ai_example.core.task import Run
from gen_ai_example.observability.tracing import get_tracer
from gen_ai_example.orchestrator.executor import TaskExecutor
from gen_ai_example.orchestrator.planner import PlannerConfig, TaskPlanner

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer

    from gen_ai_example.core.config import AgentSettings
    from gen_ai_example.tools.base import Tool


@dataclass
class ExecutionResult:
    """Result of executing a run."""

    success: bool
    objective: str
    tasks: list[dict[str, Any]]
    completed_tasks: int
    total_tasks: int
    duration_ms: int
    error: str | None = None
    failed_task_id: str | None = None
    results: list[Any] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "objective": self.objective,
            "tasks": self.tasks,
            "completed_tasks": self.completed_tasks,
            "total_tasks": self.total_tasks,
            "duration_ms": self.duration_ms,
            "error": self.error,
            "failed_task_id": self.failed_task_id,
        }


class Agent:
    """Plans objectives into tasks and executes them with tracing."""

    def __init__(
        self,
        name: str = "assistant",
        *,
        registry: ToolRegistry | None = None,
        planner: TaskPlanner | None = None,
        executor: TaskExecutor | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        self.name = name
        self._tracer = tracer or get_tracer(f"agent-{name}")
        self.registry = registry if registry is not None else ToolRegistry()
        self.planner = planner or TaskPlanner(tracer=self._tracer, agent_name=name)
        self.executor = executor or TaskExecutor(
            self.registry, tracer=self._tracer, agent_name=name
        )

    @classmethod
    def from_settings(cls, settings: AgentSettings, *, tracer: Tracer | None = None) -> Agent:
        """Build an agent with the built-in tools from agent settings."""
        tracer = tracer or get_tracer(f"agent-{settings.name}")
        registry = create_default_registry()
        planner = TaskPlanner(
            PlannerConfig(
                default_city=settings.default_city,
                planning_delay_ms=settings.planning_delay_ms,
            ),
            tracer=tracer,
            agent_name=settings.name,
        )
        executor = TaskExecutor(
            registry,
            tracer=tracer,
            agent_name=settings.name,
            summarize_delay=settings.summarize_delay_ms / 1000,
        )
        return cls(
            settings.name,
            registry=registry,
            planner=planner,
            executor=executor,
            tracer=tracer,
        )

    def register_tool(self, tool: Tool) -> None:
        self.registry.register(tool)

    def plan(self, objective: str) -> Run:
        """Plan the tasks for an objective."""
        return self.planner.plan_run(objective)

    async def plan_async(self, objective: str) -> Run:
        """Plan the tasks for an objective, with simulated thinking time."""
        tasks = await self.planner.plan_async(objective)
        return Run(objective=objective, tasks=tasks)

    async def execute(self, run: Run) -> ExecutionResult:
        """Execute a planned run and report the outcome.

        A failed task does not raise here; it shows up as success=False with
        the failing task's id, and the tasks list still carries every task's
        final state.
        """
        start = time.monotonic()
        error: TaskFailedError | None = None
        try:
            await self.executor.execute(run)
        except TaskFailedError as e:
            error = e
        duration_ms = int((time.monotonic() - start) * 1000)

        return ExecutionResult(
            success=error is None,
            objective=run.objective,
            tasks=[t.to_dict() for t in run.tasks],
            completed_tasks=len(run.completed()),
            total_tasks=len(run.tasks),
            duration_ms=duration_ms,
            error=str(error) if error else None,
            failed_task_id=error.task_id if error else None,
            results=list(run.results),
        )

    async def ask(self, objective: str) -> ExecutionResult:
        """Plan and execute an objective end-to-end."""
        run = await self.plan_async(objective)
        return await self.execute(run)
