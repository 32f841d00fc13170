"""Anthropic Messages API provider.

Requests go through a ``TransportPolicy``. SDK errors worth retrying are
translated into ``TransientError`` first so the policy can see them.
"""

from typing import Any

import anthropic
from anthropic import AsyncAnthropic

from cowrite.config.models import TokenUsage
from cowrite.core.resilience import RateLimitError, TransientError, TransportPolicy
from cowrite.utils.providers.base import BaseLLMProvider, CompletionRequest, LLMResponse


OVERLOADED = 529


class AnthropicProvider(BaseLLMProvider):
    name = "anthropic"

    def __init__(self, api_key: str, policy: TransportPolicy | None = None):
        self._client = AsyncAnthropic(api_key=api_key)
        self._create = (policy or TransportPolicy()).guard(self._create_message)

    async def _create_message(self, **params: Any) -> Any:
        try:
            return await self._client.messages.create(**params)
        except anthropic.RateLimitError as e:
            raise RateLimitError(f"Anthropic rate limit: {e}") from e
        except (anthropic.APIConnectionError, anthropic.InternalServerError) as e:
            raise TransientError(f"Anthropic unavailable: {e}") from e
        except anthropic.APIStatusError as e:
            if e.status_code == OVERLOADED:
                raise TransientError(f"Anthropic overloaded: {e}") from e
            raise

    async def _send(self, request: CompletionRequest) -> LLMResponse:
        params: dict[str, Any] = {
            "model": request.model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.system:
            params["system"] = request.system

        message = await self._create(**params)

        return LLMResponse(
            content="".join(block.text for block in message.content if block.type == "text"),
            model=message.model or request.model,
            usage=TokenUsage(
                input_tokens=message.usage.input_tokens,
                output_tokens=message.usage.output_tokens,
                cache_read_tokens=getattr(message.usage, "cache_read_input_tokens", None) or 0,
                cache_write_tokens=getattr(message.usage, "cache_creation_input_tokens", None) or 0,
            ),
            stop_reason=message.stop_reason or "",
        )
