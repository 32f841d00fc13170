"""Provider interface for one-shot completions."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace

from cowrite.config.models import TokenUsage
from cowrite.utils.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class CompletionRequest:
    """A single user turn with an optional system prompt."""

    prompt: str
    system: str = ""
    model: str = "sonnet"
    max_tokens: int = 4096
    temperature: float = 0.0


@dataclass
class LLMResponse:
    content: str
    model: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    stop_reason: str = ""


class BaseLLMProvider(ABC):
    """
    A model endpoint the note taker and the suggester can prompt.

    Subclasses implement ``_send``. ``complete`` resolves model aliases
    and logs every exchange.
    """

    name: str = "base"

    MODEL_ALIASES: dict[str, str] = {
        "haiku": "claude-3-haiku-20240307",
        "sonnet": "claude-3-5-sonnet-20240620",
        "opus": "claude-3-opus-20240229",
    }

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        model = self.MODEL_ALIASES.get(request.model, request.model)
        logger.debug(
            "Sending completion",
            provider=self.name,
            model=model,
            prompt_length=len(request.prompt),
        )
        response = await self._send(replace(request, model=model))
        logger.debug(
            "Completion received",
            provider=self.name,
            model=response.model,
            stop_reason=response.stop_reason,
            usage=response.usage.to_dict(),
        )
        return response

    @abstractmethod
    async def _send(self, request: CompletionRequest) -> LLMResponse:
        """Send ``request`` with its model already resolved."""
        ...
