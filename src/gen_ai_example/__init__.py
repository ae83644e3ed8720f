"""gen-ai-example: a traced generative-AI task orchestrator."""

__version__ = "0.1.0"
