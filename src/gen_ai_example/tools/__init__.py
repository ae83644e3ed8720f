"""Tools the orchestrator can dispatch to."""

from gen_ai_example.tools.base import BaseTool, Tool
from gen_ai_example.tools.builtin import (
    CalculatorParams,
    CalculatorTool,
    WeatherParams,
    WeatherTool,
    builtin_tools,
)

__all__ = [
    "BaseTool",
    "CalculatorParams",
    "CalculatorTool",
    "Tool",
    "WeatherParams",
    "WeatherTool",
    "builtin_tools",
]
