"""Tool mode: a simulated chat-model call followed by direct tool calls.

The model call decides which tools a message needs, using the planner's
intent checks, and each chosen tool is then executed under its own
tool.execute span. Unlike the agent executor the chain is best-effort: a
failing tool is logged and the remaining tools still run.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from pydantic import BaseModel, Field

from gen_ai_example.core.errors import TaskExecutionError
from gen_ai_example.observability import attributes as attrs
from gen_ai_example.observability.tracing import (
    get_tracer,
    messages_json,
    record_span_error,
    to_json,
)
from gen_ai_example.orchestrator.executor import invoke_tool
from gen_ai_example.orchestrator.planner import CALCULATOR_TOOL, WEATHER_TOOL, TaskPlanner

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer

    from gen_ai_example.core.registry import ToolRegistry

logger = logging.getLogger(__name__)

MODEL_NAME = "gpt-3.5-turbo"
MODEL_LATENCY_SECONDS = 0.03


class ToolCallRequest(BaseModel):
    """A tool the model decided to call."""

    name: str
    description: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ChatModelResponse(BaseModel):
    """The simulated model's reply."""

    role: str = "assistant"
    content: str
    tool_calls: list[ToolCallRequest] = Field(default_factory=list)


@dataclass
class ToolChainResult:
    """Outcome of a tool chain: results and errors keyed by tool name."""

    response: ChatModelResponse
    results: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "response": self.response.model_dump(),
            "results": self.results,
            "errors": self.errors,
        }


class ToolService:
    """Runs tools directly, without planning a task list."""

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        planner: TaskPlanner | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        self._registry = registry
        self._tracer = tracer or get_tracer("tool-service")
        self._planner = planner or TaskPlanner(tracer=self._tracer)

    async def simulate_chat_model_call(self, message: str) -> ChatModelResponse:
        """Ask the simulated model which tools the message needs."""
        with self._tracer.start_as_current_span(
            "chat-model.call",
            attributes={
                attrs.GEN_AI_OPERATION_NAME: attrs.OPERATION_CHAT,
                attrs.GEN_AI_PROVIDER_NAME: attrs.PROVIDER_OPENAI,
                attrs.GEN_AI_REQUEST_MODEL: MODEL_NAME,
                attrs.GEN_AI_CONVERSATION_ID: str(uuid4()),
                attrs.GEN_AI_INPUT_MESSAGES: messages_json("user", message),
            },
        ) as span:
            await asyncio.sleep(MODEL_LATENCY_SECONDS)

            response = ChatModelResponse(
                content="I need to call some tools to help with your request",
                tool_calls=self._choose_tools(message),
            )
            if not response.tool_calls:
                response.content = "No tools are needed for this request"

            output = to_json([response.model_dump()])
            span.set_attributes(
                {
                    attrs.GEN_AI_OUTPUT_MESSAGES: output,
                    attrs.GEN_AI_USAGE_INPUT_TOKENS: len(message),
                    attrs.GEN_AI_USAGE_OUTPUT_TOKENS: len(output),
                    attrs.GEN_AI_RESPONSE_ID: f"chatcmpl-{int(time.time())}",
                    attrs.GEN_AI_RESPONSE_FINISH_REASONS: ["stop"],
                    attrs.GEN_AI_REQUEST_MAX_TOKENS: 2048,
                    attrs.GEN_AI_REQUEST_TEMPERATURE: 0.7,
                    attrs.GEN_AI_REQUEST_TOP_P: 1.0,
                    attrs.GEN_AI_REQUEST_FREQUENCY_PENALTY: 0.0,
                    attrs.GEN_AI_REQUEST_PRESENCE_PENALTY: 0.0,
                    attrs.GEN_AI_REQUEST_CHOICE_COUNT: 1,
                    attrs.GEN_AI_REQUEST_SEED: 42,
                    attrs.GEN_AI_OUTPUT_TYPE: attrs.OUTPUT_TYPE_TEXT,
                }
            )
        return response

    def _choose_tools(self, message: str) -> list[ToolCallRequest]:
        candidates = [
            (WEATHER_TOOL, self._planner.weather_parameters(message)),
            (CALCULATOR_TOOL, self._planner.calculation_parameters(message)),
        ]
        calls = []
        for name, arguments in candidates:
            tool = self._registry.get(name)
            if arguments is None or tool is None:
                continue
            calls.append(
                ToolCallRequest(name=name, description=tool.description, arguments=arguments)
            )
        return calls

    async def execute_tool(self, tool_name: str, params: dict[str, Any]) -> Any:
        """Execute one tool under a tool.execute span.

        Raises:
            ToolNotFoundError: If the tool is not registered.
            ToolExecutionError: If the tool fails.
        """
        with self._tracer.start_as_current_span(
            "tool.execute",
            attributes={
                attrs.GEN_AI_OPERATION_NAME: attrs.OPERATION_EXECUTE_TOOL,
                attrs.GEN_AI_TOOL_NAME: tool_name,
                attrs.GEN_AI_TOOL_CALL_ID: str(uuid4()),
            },
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                tool = self._registry.lookup(tool_name)
                span.set_attributes(
                    {
                        attrs.GEN_AI_TOOL_DESCRIPTION: tool.description,
                        attrs.GEN_AI_TOOL_TYPE: "function",
                        attrs.GEN_AI_TOOL_PARAMS: to_json(params),
                    }
                )
                result = await invoke_tool(tool, params)
            except TaskExecutionError as e:
                record_span_error(span, e)
                raise

            span.set_attribute(attrs.GEN_AI_TOOL_RESULT, to_json(result))
            return result

    async def execute_tool_chain(self, message: str) -> ToolChainResult:
        """Let the simulated model pick tools for a message, then run them all."""
        with self._tracer.start_as_current_span("tool-mode.chain"):
            response = await self.simulate_chat_model_call(message)
            chain = ToolChainResult(response=response)

            for call in response.tool_calls:
                try:
                    chain.results[call.name] = await self.execute_tool(call.name, call.arguments)
                except TaskExecutionError as e:
                    logger.warning("Tool %s failed: %s", call.name, e)
                    chain.errors[call.name] = str(e)

        return chain
