"""Chat mode: a keyword-driven reply under a traced chat span."""

from __future__ import annotations

import asyncio
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from pydantic import BaseModel, Field

from gen_ai_example.observability import attributes as attrs
from gen_ai_example.observability.tracing import get_tracer, messages_json

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer

MODEL_NAME = "gpt-3.5-turbo"
REPLY_LATENCY_SECONDS = 0.1

# Checked in order; the first rule with a matching keyword wins.
REPLY_RULES: list[tuple[tuple[str, ...], str]] = [
    (
        ("python",),
        "Python is a dynamically typed, interpreted language known for its readable "
        "syntax and a large ecosystem, widely used for web services, automation and "
        "data work.",
    ),
    (
        ("weather", "天气"),
        "I can't get live weather data myself, but the weather tool can look it up "
        "for you.",
    ),
    (
        ("thank", "谢谢"),
        "You're welcome! Let me know if there is anything else I can help with.",
    ),
    (
        ("hello", "hi ", "你好", "您好"),
        "Hello! Nice to meet you. I'm an AI assistant and can answer questions "
        "or help with tasks.",
    ),
]


class ChatRequest(BaseModel):
    """A user's chat message."""

    message: str
    user_id: str = "anonymous"


class ChatResponse(BaseModel):
    """The assistant's reply."""

    reply: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


def choose_reply(message: str) -> str:
    """Pick a canned reply by keyword, echoing the message when nothing matches."""
    text = f"{message.lower()} "
    for keywords, reply in REPLY_RULES:
        if any(keyword in text for keyword in keywords):
            return reply
    return (
        f"I understand you said: {message}. "
        "That's an interesting topic, happy to tell you more."
    )


class ChatService:
    """Answers chat messages and traces each exchange."""

    def __init__(self, *, tracer: Tracer | None = None) -> None:
        self._tracer = tracer or get_tracer("chat-service")

    async def process(self, request: ChatRequest) -> ChatResponse:
        """Reply to one chat message."""
        with self._tracer.start_as_current_span(
            "chat.process",
            attributes={
                attrs.GEN_AI_OPERATION_NAME: attrs.OPERATION_CHAT,
                attrs.GEN_AI_PROVIDER_NAME: attrs.PROVIDER_OPENAI,
                attrs.GEN_AI_REQUEST_MODEL: MODEL_NAME,
                attrs.GEN_AI_CONVERSATION_ID: str(uuid4()),
                attrs.GEN_AI_INPUT_MESSAGES: messages_json("user", request.message),
            },
        ) as span:
            await asyncio.sleep(REPLY_LATENCY_SECONDS)
            response = ChatResponse(reply=choose_reply(request.message))

            span.set_attributes(
                {
                    attrs.GEN_AI_OUTPUT_MESSAGES: messages_json("assistant", response.reply),
                    attrs.GEN_AI_USAGE_INPUT_TOKENS: len(request.message),
                    attrs.GEN_AI_USAGE_OUTPUT_TOKENS: len(response.reply),
                    attrs.GEN_AI_RESPONSE_ID: f"chatcmpl-{int(time.time())}",
                    attrs.GEN_AI_RESPONSE_FINISH_REASONS: ["stop"],
                    attrs.GEN_AI_REQUEST_MAX_TOKENS: 2048,
                    attrs.GEN_AI_REQUEST_TEMPERATURE: 0.7,
                    attrs.GEN_AI_OUTPUT_TYPE: attrs.OUTPUT_TYPE_TEXT,
                }
            )
        return response
