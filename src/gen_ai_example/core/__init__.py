"""Core types: configuration, errors, tasks and the tool registry."""

from gen_ai_example.core.config import (
    AgentSettings,
    GeneralSettings,
    Settings,
    TracingSettings,
    clear_settings_cache,
    get_settings,
)
from gen_ai_example.core.errors import (
    InvalidTaskTransitionError,
    MissingToolNameError,
    OrchestratorError,
    TaskExecutionError,
    TaskFailedError,
    ToolExecutionError,
    ToolNotFoundError,
    UnknownTaskKindError,
)
from gen_ai_example.core.registry import ToolRegistry, create_default_registry
from gen_ai_example.core.task import Run, Task, TaskKind, TaskStatus, new_task_id

__all__ = [
    "AgentSettings",
    "GeneralSettings",
    "InvalidTaskTransitionError",
    "MissingToolNameError",
    "OrchestratorError",
    "Run",
    "Settings",
    "Task",
    "TaskExecutionError",
    "TaskFailedError",
    "TaskKind",
    "TaskStatus",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolRegistry",
    "TracingSettings",
    "UnknownTaskKindError",
    "clear_settings_cache",
    "create_default_registry",
    "get_settings",
    "new_task_id",
]
