"""Task execution.

The executor walks a run's tasks in list order and dispatches each one by
kind: tool_call tasks go to the tool registry, summarize tasks are handled
locally. Every task gets its own span under a root span for the run.

Execution is fail-fast. The first failing task is marked failed, its error
is recorded on its span, and a TaskFailedError carrying the task id is
raised; tasks after it stay pending and tasks before it keep their results.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from gen_ai_example.core.errors import (
    MissingToolNameError,
    TaskExecutionError,
    TaskFailedError,
    ToolExecutionError,
    UnknownTaskKindError,
)
from gen_ai_example.core.task import Run, Task, TaskKind, TaskStatus
from gen_ai_example.observability import attributes as attrs
from gen_ai_example.observability.logging import bind_context, unbind_context
from gen_ai_example.observability.tracing import (
    get_tracer,
    messages_json,
    record_span_error,
    record_task_result,
    task_span,
)
from gen_ai_example.orchestrator.planner import TOOL_PARAMETER

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer

    from gen_ai_example.core.registry import ToolRegistry
    from gen_ai_example.tools.base import Tool

logger = logging.getLogger(__name__)

# A handler receives the task and the run it belongs to and returns the result.
TaskHandler = Callable[[Task, Run], Awaitable[Any]]


class TaskExecutor:
    """Executes the tasks of a run in order.

    Example:
        executor = TaskExecutor(create_default_registry(), tracer=tracer)
        run = planner.plan_run("check the weather, then calculate 10+25")
        await executor.execute(run)
        run.results  # weather, calculation, summary
    """

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        tracer: Tracer | None = None,
        agent_name: str = "assistant",
        summarize_delay: float = 0.1,
    ) -> None:
        """Initialize the executor.

        Args:
            registry: Tools that tool_call tasks can name.
            tracer: Tracer for run and task spans. Defaults to the configured one.
            agent_name: Agent name reported on the run span.
            summarize_delay: Simulated latency of the summarize step, in seconds.
        """
        self._registry = registry
        self._tracer = tracer or get_tracer()
        self._agent_name = agent_name
        self._summarize_delay = summarize_delay
        self._handlers: dict[str, TaskHandler] = {
            TaskKind.TOOL_CALL.value: self._execute_tool_task,
            TaskKind.SUMMARIZE.value: self._execute_summary_task,
        }

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def register_handler(self, kind: str, handler: TaskHandler) -> None:
        """Handle a new task kind, or replace the handler of an existing one."""
        self._handlers[str(kind)] = handler

    def supported_kinds(self) -> list[str]:
        return sorted(self._handlers)

    async def execute(self, run: Run) -> None:
        """Execute every pending task of the run, in order.

        Raises:
            TaskFailedError: When a task fails. Later tasks are not attempted.
        """
        bind_context(run_id=str(run.id))
        try:
            with self._tracer.start_as_current_span(
                "agent.execute_tasks",
                attributes={
                    attrs.GEN_AI_PROVIDER_NAME: attrs.PROVIDER_OPENAI,
                    attrs.GEN_AI_OPERATION_NAME: attrs.OPERATION_INVOKE_AGENT,
                    attrs.GEN_AI_AGENT_NAME: self._agent_name,
                    attrs.RUN_ID: str(run.id),
                    attrs.RUN_TOTAL_TASKS: len(run.tasks),
                },
            ) as span:
                for task in run.tasks:
                    if task.status is not TaskStatus.PENDING:
                        continue
                    await self._execute_task(task, run)

                completed = len(run.results)
                span.set_attributes(
                    {
                        attrs.RUN_COMPLETED_TASKS: completed,
                        attrs.GEN_AI_OUTPUT_MESSAGES: messages_json(
                            "assistant",
                            f"Task execution finished, {completed} task(s) completed",
                        ),
                    }
                )
            logger.info("Run completed with %d task(s)", completed)
        finally:
            unbind_context("run_id")

    async def _execute_task(self, task: Task, run: Run) -> None:
        """Run one task inside its own span and record the outcome."""
        with task_span(self._tracer, task) as span:
            logger.debug("Executing task %s (%s)", task.id, task.kind)
            try:
                handler = self._handlers.get(task.kind)
                if handler is None:
                    raise UnknownTaskKindError(task.kind)
                result = await handler(task, run)
            except TaskExecutionError as e:
                task.fail(e)
                record_span_error(span, e)
                logger.warning("Task %s failed: %s", task.id, e)
                raise TaskFailedError(task.id, e) from e

            task.complete(result)
            run.results.append(result)
            record_task_result(span, result)
            logger.debug("Task %s completed", task.id)

    async def _execute_tool_task(self, task: Task, _run: Run) -> Any:
        tool_name = task.parameters.get(TOOL_PARAMETER)
        if not isinstance(tool_name, str) or not tool_name:
            raise MissingToolNameError(task.id)

        tool = self._registry.lookup(tool_name)
        params = {k: v for k, v in task.parameters.items() if k != TOOL_PARAMETER}
        return await invoke_tool(tool, params)

    async def _execute_summary_task(self, _task: Task, run: Run) -> dict[str, Any]:
        await asyncio.sleep(self._summarize_delay)
        return {
            "summary": "Task execution completed",
            "total_tasks": len(run.results),
            "results": list(run.results),
            "completed_at": datetime.now(UTC).isoformat(),
        }


async def invoke_tool(tool: Tool, params: Mapping[str, Any]) -> Any:
    """Call a tool, surfacing every failure as a ToolExecutionError.

    Honours the tool's ``timeout`` attribute when it has one.
    """
    timeout = getattr(tool, "timeout", None)
    try:
        if timeout is None:
            return await tool.execute(params)
        return await asyncio.wait_for(tool.execute(params), timeout)
    except ToolExecutionError:
        raise
    except TimeoutError as e:
        raise ToolExecutionError(tool.name, f"timed out after {timeout}s") from e
    except Exception as e:
        raise ToolExecutionError(tool.name, str(e) or type(e).__name__) from e
