"""Configuration module."""

from cowrite.config.settings import Settings, get_settings
from cowrite.config.models import TokenUsage

__all__ = ["Settings", "get_settings", "TokenUsage"]
