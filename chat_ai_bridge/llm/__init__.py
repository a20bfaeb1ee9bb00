"""LLM module."""

from .llm_provider import ILLMProvider, LLMProvider, extract_completion

__all__ = ["ILLMProvider", "LLMProvider", "extract_completion"]
