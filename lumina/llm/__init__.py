"""Lumina LLM integration module.

Provides a thin wrapper around the Anthropic API and the prompt templates
used for entry analysis and follow-up questions.
"""

from lumina.llm.client import LLMClient, LLMResponse

__all__ = [
    "LLMClient",
    "LLMResponse",
]
