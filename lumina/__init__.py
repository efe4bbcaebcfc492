"""Lumina Journal -- moderated personal journaling with LLM reflection."""

__version__ = "0.1.0"
