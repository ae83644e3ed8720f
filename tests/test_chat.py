"""Tests for chat mode."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from gen_ai_example.chat import ChatRequest, ChatService, choose_reply

if TYPE_CHECKING:
    from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
    from opentelemetry.trace import Tracer


class TestChooseReply:
    """Tests for the keyword replies."""

    @pytest.mark.parametrize(
        ("message", "fragment"),
        [
            ("Tell me about Python", "Python is"),
            ("How's the WEATHER?", "weather tool"),
            ("今天天气怎么样", "weather tool"),
            ("thanks a lot", "welcome"),
            ("谢谢", "welcome"),
            ("hello", "Nice to meet you"),
            ("hi", "Nice to meet you"),
            ("你好", "Nice to meet you"),
        ],
    )
    def test_keyword_replies(self, message: str, fragment: str) -> None:
        assert fragment in choose_reply(message)

    def test_first_rule_wins(self) -> None:
        """Python outranks greetings when both appear."""
        assert choose_reply("hello, python fans").startswith("Python is")

    def test_hi_needs_word_boundary(self) -> None:
        assert "Nice to meet you" not in choose_reply("this is chips")

    def test_fallback_echoes_message(self) -> None:
        reply = choose_reply("quantum knitting")
        assert reply.startswith("I understand you said: quantum knitting.")


class TestChatService:
    """Tests for ChatService."""

    async def test_process(self, tracer: Tracer) -> None:
        response = await ChatService(tracer=tracer).process(ChatRequest(message="Hello"))
        assert "Nice to meet you" in response.reply
        assert response.timestamp.tzinfo is not None

    async def test_default_user(self) -> None:
        assert ChatRequest(message="x").user_id == "anonymous"

    async def test_chat_span(self, tracer: Tracer, span_exporter: InMemorySpanExporter) -> None:
        await ChatService(tracer=tracer).process(ChatRequest(message="thank you"))

        (span,) = span_exporter.get_finished_spans()
        assert span.name == "chat.process"
        assert span.attributes["gen_ai.operation.name"] == "chat"
        assert "welcome" in span.attributes["gen_ai.output.messages"]
        assert span.attributes["gen_ai.usage.input_tokens"] == len("thank you")
