"""Task and run data models.

A task is one unit of work in a plan: a tool invocation, a summary, or any
other kind the executor has a handler for. A run groups the tasks planned
for one objective together with the results they accumulate while the
executor walks them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import TYPE_CHECKING, Any, Self
from uuid import UUID, uuid4

from gen_ai_example.core.errors import InvalidTaskTransitionError

if TYPE_CHECKING:
    from collections.abc import Mapping


class TaskStatus(Enum):
    """Status of a task. Moves forward exactly once."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class TaskKind(StrEnum):
    """Task kinds the executor handles out of the box.

    Task.kind is a plain string, so kinds outside this enum are valid as
    long as a handler is registered for them.
    """

    TOOL_CALL = "tool_call"
    SUMMARIZE = "summarize"


def new_task_id() -> str:
    """Mint a task id that is unique within a process."""
    return f"task-{uuid4().hex[:12]}"


@dataclass(slots=True)
class Task:
    """A single unit of work.

    Attributes:
        id: Unique identifier within a run.
        description: Human-readable summary.
        kind: Task kind tag, e.g. "tool_call" or "summarize".
        parameters: Named values whose shape depends on the kind.
        status: Current status. Only complete() and fail() change it.
        result: Set once by complete(). None until then.
        error: Failure message, set once by fail().
    """

    id: str
    description: str
    kind: str
    parameters: dict[str, Any] = field(default_factory=dict)
    status: TaskStatus = TaskStatus.PENDING
    result: Any = None
    error: str | None = None

    @classmethod
    def create(
        cls,
        description: str,
        kind: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> Self:
        """Create a pending task with a fresh id."""
        return cls(
            id=new_task_id(),
            description=description,
            kind=str(kind),
            parameters=dict(parameters or {}),
        )

    @property
    def is_pending(self) -> bool:
        return self.status is TaskStatus.PENDING

    def complete(self, result: Any) -> None:
        """Mark the task completed and store its result."""
        self._transition(TaskStatus.COMPLETED)
        self.result = result

    def fail(self, error: BaseException | str) -> None:
        """Mark the task failed and record why."""
        self._transition(TaskStatus.FAILED)
        self.error = str(error)

    def _transition(self, target: TaskStatus) -> None:
        if self.status is not TaskStatus.PENDING:
            raise InvalidTaskTransitionError(self.id, self.status.value, target.value)
        self.status = target

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        data: dict[str, Any] = {
            "id": self.id,
            "description": self.description,
            "kind": self.kind,
            "parameters": self.parameters,
            "status": self.status.value,
        }
        if self.status is TaskStatus.COMPLETED:
            data["result"] = self.result
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Deserialize from a dict."""
        return cls(
            id=data["id"],
            description=data.get("description", ""),
            kind=data["kind"],
            parameters=dict(data.get("parameters", {})),
            status=TaskStatus(data.get("status", TaskStatus.PENDING.value)),
            result=data.get("result"),
            error=data.get("error"),
        )


@dataclass
class Run:
    """One planning request and everything its execution produces.

    Attributes:
        objective: The objective the tasks were planned for.
        tasks: Tasks in execution order.
        results: Results of completed tasks, appended in completion order.
        id: Identifier used to correlate logs and spans.
    """

    objective: str
    tasks: list[Task]
    results: list[Any] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)

    def pending(self) -> list[Task]:
        return [t for t in self.tasks if t.status is TaskStatus.PENDING]

    def completed(self) -> list[Task]:
        return [t for t in self.tasks if t.status is TaskStatus.COMPLETED]

    def failed(self) -> list[Task]:
        return [t for t in self.tasks if t.status is TaskStatus.FAILED]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "id": str(self.id),
            "objective": self.objective,
            "tasks": [t.to_dict() for t in self.tasks],
            "results": self.results,
        }
