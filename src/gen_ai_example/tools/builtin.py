"""Built-in tools: weather lookup and a four-function calculator.

Both simulate the latency of an external call; neither reaches the network.
"""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import BaseModel, Field

from gen_ai_example.tools.base import BaseTool

WEATHER_LATENCY_SECONDS = 0.05
CALCULATOR_LATENCY_SECONDS = 0.01

SUPPORTED_OPERATIONS = ("add", "subtract", "multiply", "divide")


class WeatherParams(BaseModel):
    """Parameters for the get_weather tool."""

    city: str = Field(min_length=1, description="City to report on")


class CalculatorParams(BaseModel):
    """Parameters for the calculator tool."""

    operation: str = Field(description="One of add, subtract, multiply, divide")
    a: float = Field(description="Left operand")
    b: float = Field(description="Right operand")


class WeatherTool(BaseTool):
    """Reports canned weather conditions for a city."""

    name = "get_weather"
    description = "Get weather information for a specified city"
    parameters_model = WeatherParams

    async def run(self, params: WeatherParams) -> dict[str, Any]:
        await asyncio.sleep(WEATHER_LATENCY_SECONDS)
        return {
            "city": params.city,
            "temperature": "22°C",
            "condition": "Sunny",
            "humidity": "65%",
        }


class CalculatorTool(BaseTool):
    """Performs basic arithmetic on two operands."""

    name = "calculator"
    description = "Perform basic mathematical calculations"
    parameters_model = CalculatorParams

    async def run(self, params: CalculatorParams) -> dict[str, Any]:
        await asyncio.sleep(CALCULATOR_LATENCY_SECONDS)

        a, b = params.a, params.b
        match params.operation:
            case "add":
                result = a + b
            case "subtract":
                result = a - b
            case "multiply":
                result = a * b
            case "divide":
                if b == 0:
                    raise self.fail("division by zero")
                result = a / b
            case other:
                raise self.fail(f"unsupported operation: {other}")

        return {
            "operation": params.operation,
            "a": a,
            "b": b,
            "result": result,
        }


def builtin_tools() -> list[BaseTool]:
    """Fresh instances of every built-in tool."""
    return [WeatherTool(), CalculatorTool()]
