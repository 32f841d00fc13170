"""Utility modules."""

from cowrite.utils.logging import get_logger, configure_logging
from cowrite.utils.structured_llm import StructuredLLMCaller, StructuredOutputError

__all__ = [
    "get_logger",
    "configure_logging",
    "StructuredLLMCaller",
    "StructuredOutputError",
]
