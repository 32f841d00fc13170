"""Suggest changes agent.

Reads the user's reflections, asks the model for targeted edits to the
current text and attaches them as the pending suggestions of that text.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from langchain_core.messages import BaseMessage
from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, START, StateGraph
from langgraph.graph.state import CompiledStateGraph
from pydantic import BaseModel, Field

from cowrite.agents.state import SuggestChangesState
from cowrite.artifacts.models import Suggestion
from cowrite.artifacts.variants import extract_plain_text
from cowrite.artifacts.versions import get_current
from cowrite.config.prompts import SUGGEST_CHANGES_PROMPT, SUGGEST_CHANGES_SYSTEM_PROMPT
from cowrite.config.settings import get_settings
from cowrite.core.exceptions import AgentError, ExternalCollaboratorError, PreconditionError
from cowrite.store.base import BaseStore
from cowrite.suggestions.engine import attach_suggestions
from cowrite.utils.logging import get_logger
from cowrite.utils.structured_llm import StructuredLLMCaller, StructuredOutputError


logger = get_logger(__name__)


REFLECTIONS_NAMESPACE = "memories"
REFLECTIONS_KEY = "reflection"


def format_reflections(value: dict[str, Any] | None) -> str:
    """Render stored reflections (style rules and facts) for a prompt."""
    if not value:
        return "No reflections found."

    style_rules = value.get("styleRules") or []
    facts = value.get("content") or []
    if not style_rules and not facts:
        return "No reflections found."

    style = "\n".join(f"- {rule}" for rule in style_rules) or "- (none)"
    content = "\n".join(f"- {fact}" for fact in facts) or "- (none)"
    return (
        f"<style-guidelines>\n{style}\n</style-guidelines>\n\n"
        f"<key-facts>\n{content}\n</key-facts>"
    )


def last_human_message(messages: Sequence[Any]) -> str | None:
    for message in reversed(messages):
        if isinstance(message, BaseMessage):
            if message.type == "human":
                return message.content if isinstance(message.content, str) else str(message.content)
        elif isinstance(message, dict) and message.get("type") == "human":
            return str(message.get("content", ""))
    return None


class SuggestionBatch(BaseModel):
    """Schema the suggestion model must answer with."""

    suggestions: list[Suggestion] = Field(default_factory=list)


class SuggestionGenerator(Protocol):
    async def generate(
        self,
        content_text: str,
        reflections: str,
        human_message: str,
    ) -> list[Suggestion]:
        ...


class LLMSuggestionGenerator:
    """Suggestion generator backed by a structured LLM call."""

    def __init__(self, caller: StructuredLLMCaller | None = None, model: str | None = None):
        settings = get_settings()
        self.caller = caller or StructuredLLMCaller(
            max_retries=settings.llm_max_retries,
            max_tokens=settings.llm_max_tokens,
        )
        self.model = model or settings.suggestion_model

    async def generate(
        self,
        content_text: str,
        reflections: str,
        human_message: str,
    ) -> list[Suggestion]:
        prompt = SUGGEST_CHANGES_PROMPT.format(
            reflections=reflections,
            artifact_content=content_text,
            human_message=human_message,
        )
        try:
            batch = await self.caller.call(
                prompt=prompt,
                response_model=SuggestionBatch,
                system=SUGGEST_CHANGES_SYSTEM_PROMPT,
                model=self.model,
            )
        except StructuredOutputError as e:
            raise AgentError(str(e), agent_name="suggest_changes") from e
        return batch.suggestions


def create_suggest_changes_graph(
    store: BaseStore,
    generator: SuggestionGenerator,
) -> CompiledStateGraph:
    """
    Create the suggest changes graph.

    Flow:
        START → suggest_changes → END

    Raises (from the node):
        PreconditionError: Missing assistant_id, artifact or human message
        AgentError: The generator failed
    """

    async def suggest_changes(
        state: SuggestChangesState, config: RunnableConfig
    ) -> dict[str, Any]:
        configurable = (config or {}).get("configurable", {})
        assistant_id = configurable.get("assistant_id")
        if not assistant_id:
            raise PreconditionError("Missing assistant_id", field="assistant_id")

        artifact = state.get("artifact")
        current = get_current(artifact)
        if current is None:
            raise PreconditionError("No artifact found", field="artifact")

        human_message = last_human_message(state.get("messages", []))
        if human_message is None:
            raise PreconditionError("No recent human message found", field="messages")

        item = await store.get((REFLECTIONS_NAMESPACE, assistant_id), REFLECTIONS_KEY)
        reflections = format_reflections(item.value if item else None)

        try:
            suggestions = await generator.generate(
                extract_plain_text(current), reflections, human_message
            )
        except ExternalCollaboratorError:
            raise
        except Exception as e:
            logger.error("Suggestion generation failed", error=str(e))
            raise AgentError(
                f"Suggestion generation failed: {e}", agent_name="suggest_changes"
            ) from e

        logger.info("Suggestions generated", count=len(suggestions))
        return {"artifact": attach_suggestions(artifact, suggestions)}

    graph = StateGraph(SuggestChangesState)
    graph.add_node("suggest_changes", suggest_changes)
    graph.add_edge(START, "suggest_changes")
    graph.add_edge("suggest_changes", END)

    logger.debug("Suggest changes graph compiled")
    return graph.compile()
