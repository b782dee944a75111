"""LLM module."""

from visit_planner.llm.completion import ChatMessage, CompletionClient, CompletionResult
from visit_planner.llm.model_factory import build_completion_client

__all__ = ["ChatMessage", "CompletionClient", "CompletionResult", "build_completion_client"]
