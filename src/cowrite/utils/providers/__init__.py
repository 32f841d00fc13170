"""LLM providers."""

from cowrite.config.settings import Settings, get_settings
from cowrite.core.resilience import TransportPolicy
from cowrite.utils.providers.anthropic import AnthropicProvider
from cowrite.utils.providers.base import BaseLLMProvider, CompletionRequest, LLMResponse


def create_provider(
    provider: str | None = None,
    settings: Settings | None = None,
    api_key: str | None = None,
) -> BaseLLMProvider:
    """
    Build the configured provider with a transport policy from settings.

    Raises:
        ValueError: If the provider is unknown or its API key is missing
    """
    settings = settings or get_settings()
    provider_name = provider or settings.llm_provider

    if provider_name == "anthropic":
        api_key = api_key or settings.anthropic_api_key
        if not api_key:
            raise ValueError("Anthropic API key required. Set ANTHROPIC_API_KEY.")
        return AnthropicProvider(api_key, TransportPolicy.from_settings(settings))

    raise ValueError(f"Unknown LLM provider: {provider_name}. Supported providers: anthropic")


__all__ = [
    "AnthropicProvider",
    "BaseLLMProvider",
    "CompletionRequest",
    "LLMResponse",
    "create_provider",
]
