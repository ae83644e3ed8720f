"""Orchestrator for task planning and execution.

Turns an objective into an ordered task list and executes it, emitting one
span per task under a span for the whole run.
"""

from gen_ai_example.orchestrator.agent import Agent, ExecutionResult
from gen_ai_example.orchestrator.executor import TaskExecutor, TaskHandler, invoke_tool
from gen_ai_example.orchestrator.planner import (
    CALCULATOR_TOOL,
    TOOL_PARAMETER,
    WEATHER_TOOL,
    PlannerConfig,
    TaskPlanner,
    extract_calculation,
    extract_city,
)

__all__ = [
    "CALCULATOR_TOOL",
    "TOOL_PARAMETER",
    "WEATHER_TOOL",
    "Agent",
    "ExecutionResult",
    "PlannerConfig",
    "TaskExecutor",
    "TaskHandler",
    "TaskPlanner",
    "extract_calculation",
    "extract_city",
    "invoke_tool",
]
