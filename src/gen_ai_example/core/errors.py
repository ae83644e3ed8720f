"""Errors raised while planning and executing tasks.

Task-level failures (the ones a single task can end with) derive from
TaskExecutionError. The executor wraps the first of them in a
TaskFailedError, which is what the caller of a run sees.
"""

from __future__ import annotations


class OrchestratorError(Exception):
    """Base exception for orchestrator errors."""


class TaskExecutionError(OrchestratorError):
    """Base exception for failures of a single task."""


class MissingToolNameError(TaskExecutionError):
    """Raised when a tool_call task does not name the tool to invoke."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"missing tool name in parameters of task {task_id}")


class ToolNotFoundError(TaskExecutionError):
    """Raised when a tool is not found in the registry."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"tool not found: {tool_name}")


class ToolExecutionError(TaskExecutionError):
    """Raised when a tool's own invocation fails.

    Covers invalid parameters as well as domain errors such as division
    by zero.
    """

    def __init__(self, tool_name: str, message: str) -> None:
        self.tool_name = tool_name
        self.message = message
        super().__init__(f"{tool_name}: {message}")


class UnknownTaskKindError(TaskExecutionError):
    """Raised when no handler is registered for a task's kind."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"unknown task kind: {kind}")


class TaskFailedError(OrchestratorError):
    """Raised to the caller of a run when one of its tasks fails."""

    def __init__(self, task_id: str, cause: TaskExecutionError) -> None:
        self.task_id = task_id
        self.cause = cause
        super().__init__(f"task {task_id} failed: {cause}")


class InvalidTaskTransitionError(OrchestratorError):
    """Raised when a task leaves a state it has already left."""

    def __init__(self, task_id: str, current: str, target: str) -> None:
        self.task_id = task_id
        self.current = current
        self.target = target
        super().__init__(f"task {task_id} cannot move from {current} to {target}")
