"""Structured LLM output with Pydantic validation and retry-with-feedback.

The note taker and the suggestion generator ask the model for JSON that
matches a Pydantic schema. When the output does not parse or validate,
the error is fed back to the model on the next attempt.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Generic, Type, TypeVar

from pydantic import BaseModel, ValidationError

from cowrite.config.models import TokenUsage
from cowrite.utils.providers import BaseLLMProvider, CompletionRequest, create_provider
from cowrite.utils.logging import get_logger


logger = get_logger(__name__)


T = TypeVar("T", bound=BaseModel)


class StructuredOutputError(Exception):
    """Raised when LLM output cannot be validated after retries."""

    def __init__(self, message: str, attempts: list[dict[str, Any]]):
        super().__init__(message)
        self.attempts = attempts  # History of failed attempts


@dataclass
class StructuredResult(Generic[T]):
    """Result from structured LLM call including token usage."""

    data: T
    usage: TokenUsage = field(default_factory=TokenUsage)
    model: str = ""
    attempts: int = 1


class StructuredLLMCaller:
    """
    Calls LLM expecting structured JSON output with validation and retry.

    Design Pattern: Retry with Feedback
    """

    def __init__(
        self,
        provider: BaseLLMProvider | None = None,
        max_retries: int = 3,
        max_tokens: int = 4096,
    ):
        """
        Initialize structured LLM caller.

        Args:
            provider: Provider to prompt (built from settings if not provided)
            max_retries: Maximum number of attempts
            max_tokens: Output token limit per attempt
        """
        self.provider = provider or create_provider()
        self.max_retries = max_retries
        self.max_tokens = max_tokens

    async def call(
        self,
        prompt: str,
        response_model: Type[T],
        system: str | None = None,
        model: str = "sonnet",
        temperature: float = 0.0,
    ) -> T:
        """
        Call LLM and parse response into Pydantic model.

        Raises:
            StructuredOutputError: After max_retries failures
        """
        result = await self.call_with_usage(
            prompt=prompt,
            response_model=response_model,
            system=system,
            model=model,
            temperature=temperature,
        )
        return result.data

    async def call_with_usage(
        self,
        prompt: str,
        response_model: Type[T],
        system: str | None = None,
        model: str = "sonnet",
        temperature: float = 0.0,
    ) -> StructuredResult[T]:
        """
        Call LLM and parse response, returning result with token usage.

        Args:
            prompt: User prompt requesting structured output
            response_model: Pydantic model class for validation
            system: System prompt (schema instructions are appended)
            model: LLM model to use
            temperature: Sampling temperature

        Returns:
            StructuredResult with validated data and usage info

        Raises:
            StructuredOutputError: After max_retries failures
        """
        schema_instruction = self._build_schema_instruction(
            response_model.model_json_schema(by_alias=True)
        )
        full_system = f"{system or ''}\n\n{schema_instruction}".strip()

        attempts: list[dict[str, Any]] = []
        current_prompt = prompt
        total_usage = TokenUsage()
        final_model = model

        for attempt in range(1, self.max_retries + 1):
            response = await self.provider.complete(
                CompletionRequest(
                    prompt=current_prompt,
                    system=full_system,
                    model=model,
                    max_tokens=self.max_tokens,
                    temperature=temperature,
                )
            )
            total_usage = total_usage + response.usage
            final_model = response.model
            raw_output = response.content

            try:
                data = json.loads(self._extract_json(raw_output))
                parsed = response_model.model_validate(data)
            except json.JSONDecodeError as e:
                error_type = "JSON Parse Error"
                error_msg = f"Invalid JSON: {e.msg} at position {e.pos}"
            except ValidationError as e:
                error_type = "Schema Validation Error"
                error_msg = self._format_validation_errors(e)
            else:
                logger.debug(
                    "Parsed structured output",
                    model=response_model.__name__,
                    attempts=attempt,
                    usage=total_usage.to_dict(),
                )
                return StructuredResult(
                    data=parsed,
                    usage=total_usage,
                    model=final_model,
                    attempts=attempt,
                )

            logger.warning(
                "Structured output rejected",
                attempt=attempt,
                error_type=error_type,
                error=error_msg,
            )
            attempts.append(
                {
                    "attempt": attempt,
                    "raw_output": raw_output[:500],
                    "error_type": error_type,
                    "error": error_msg,
                }
            )
            current_prompt = self._build_retry_prompt(
                original_prompt=prompt,
                error_type=error_type,
                error_details=error_msg,
                raw_output=raw_output,
            )

        logger.error(
            "Failed to get valid structured output after retries",
            max_retries=self.max_retries,
            model=response_model.__name__,
        )
        raise StructuredOutputError(
            f"Failed to get valid structured output after {self.max_retries} attempts",
            attempts=attempts,
        )

    def _build_schema_instruction(self, schema: dict[str, Any]) -> str:
        """Build instruction telling LLM the expected schema."""
        return f"""You MUST respond with valid JSON matching this schema:

```json
{json.dumps(schema, indent=2)}
```

Rules:
1. Output ONLY valid JSON, no explanations before or after
2. All required fields must be present
3. Field types must match the schema exactly"""

    def _build_retry_prompt(
        self,
        original_prompt: str,
        error_type: str,
        error_details: str,
        raw_output: str,
    ) -> str:
        """Build prompt for retry with error feedback."""
        return f"""{original_prompt}

---
PREVIOUS ATTEMPT FAILED - Please fix and try again.

Error Type: {error_type}
Error Details: {error_details}

Your previous output was:
```
{raw_output[:1000]}
```

Please provide a corrected JSON response that fixes these issues."""

    def _extract_json(self, text: str) -> str:
        """Extract the JSON payload, tolerating markdown fences and chatter."""
        text = text.strip()

        fence = text.find("```")
        if fence != -1:
            start = text.find("\n", fence)
            end = text.find("```", start + 1) if start != -1 else -1
            if start != -1 and end > start:
                return text[start + 1 : end].strip()

        start = text.find("{")
        if start == -1:
            return text

        depth = 0
        in_string = False
        escape = False
        for i in range(start, len(text)):
            char = text[i]
            if escape:
                escape = False
            elif char == "\\":
                escape = True
            elif char == '"':
                in_string = not in_string
            elif in_string:
                continue
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start : i + 1]

        return text

    def _format_validation_errors(self, error: ValidationError) -> str:
        """Format Pydantic validation errors for LLM feedback."""
        return "\n".join(
            f"- Field '{' -> '.join(str(x) for x in e['loc'])}': {e['msg']}"
            for e in error.errors()
        )
