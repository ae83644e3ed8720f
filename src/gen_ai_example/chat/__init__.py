"""Chat mode."""

from gen_ai_example.chat.service import ChatRequest, ChatResponse, ChatService, choose_reply

__all__ = ["ChatRequest", "ChatResponse", "ChatService", "choose_reply"]
