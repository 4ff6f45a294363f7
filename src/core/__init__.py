"""Shared library utilities."""

from src.core.llm import AIProvider, get_chat_llm
from src.core.logging import get_logger
from src.core.text import truncate_text

__all__ = [
    "AIProvider",
    "get_chat_llm",
    "get_logger",
    "truncate_text",
]
