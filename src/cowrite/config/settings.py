"""Application settings via environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings via environment variables."""

    # LLM Provider
    llm_provider: Literal["anthropic"] = "anthropic"
    anthropic_api_key: str = ""
    note_taker_model: str = "sonnet"
    note_taker_temperature: float = 0.1
    suggestion_model: str = "sonnet"
    llm_max_retries: int = 3  # structured output attempts
    llm_max_tokens: int = 4096

    # LLM transport (retry, circuit breaker, timeout)
    llm_retry_attempts: int = 3
    llm_backoff_min_secs: float = 2.0
    llm_backoff_max_secs: float = 60.0
    llm_breaker_failures: int = 3
    llm_breaker_recovery_secs: float = 60.0
    llm_timeout_secs: float = 120.0

    # Store
    # "memory" keeps everything in-process, "local" writes JSON files
    store_backend: Literal["memory", "local"] = "memory"
    store_path: str = "./storage/store"

    # Suggestions
    # "position" removes only the accepted entry, "value" removes every
    # entry with an identical (prevText, suggestedText) pair
    suggestion_removal: Literal["position", "value"] = "position"

    # Suggestion card layout (pixels)
    card_spacing: float = 12.0
    card_base_height_estimate: float = 70.0
    card_details_height_estimate: float = 200.0
    card_measured_padding: float = 12.0
    card_anchor_offset: float = 10.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def remove_suggestions_by_value(self) -> bool:
        """Whether accepting a suggestion also drops identical duplicates."""
        return self.suggestion_removal == "value"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
