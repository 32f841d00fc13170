"""Note taker agent.

Distills the latest exchange into a notes fragment and merges it into the
record stored for the conversation.
"""

from __future__ import annotations

from typing import Any, Sequence

from langchain_core.messages import BaseMessage
from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, START, StateGraph
from langgraph.graph.state import CompiledStateGraph
from pydantic import BaseModel, Field

from cowrite.agents.state import NoteTakerState
from cowrite.artifacts.models import Artifact
from cowrite.artifacts.variants import extract_plain_text
from cowrite.artifacts.versions import get_current
from cowrite.config.prompts import NOTE_TAKER_PROMPT, NOTE_TAKER_SYSTEM_PROMPT
from cowrite.config.settings import get_settings
from cowrite.core.exceptions import AgentError
from cowrite.notes.accumulator import NotesAccumulator
from cowrite.notes.models import NotesRecord
from cowrite.utils.logging import get_logger
from cowrite.utils.structured_llm import StructuredLLMCaller, StructuredOutputError


logger = get_logger(__name__)


class NotesFragment(BaseModel):
    """Schema the note taker model must answer with."""

    goals_notes: list[str] = Field(default_factory=list, description="New notes on the user's goals")
    style_notes: list[str] = Field(default_factory=list, description="New notes on style preferences")
    ideas_notes: list[str] = Field(default_factory=list, description="New content ideas")
    structure_notes: list[str] = Field(default_factory=list, description="New notes on structure")

    def to_record(self) -> NotesRecord:
        return NotesRecord(
            goals_notes=tuple(self.goals_notes),
            style_notes=tuple(self.style_notes),
            ideas_notes=tuple(self.ideas_notes),
            structure_notes=tuple(self.structure_notes),
        )


def format_messages(messages: Sequence[Any]) -> str:
    """Render messages as ``<type>`` tagged blocks."""
    blocks = []
    for message in messages:
        if isinstance(message, BaseMessage):
            kind, content = message.type, message.content
        else:
            kind, content = message.get("type", "unknown"), message.get("content", "")
        if not isinstance(content, str):
            content = str(content)
        blocks.append(f"<{kind}>\n{content}\n</{kind}>")
    return "\n\n".join(blocks)


class LLMNotesGenerator:
    """Notes generator backed by a structured LLM call."""

    def __init__(
        self,
        caller: StructuredLLMCaller | None = None,
        model: str | None = None,
        temperature: float | None = None,
    ):
        settings = get_settings()
        self.caller = caller or StructuredLLMCaller(
            max_retries=settings.llm_max_retries,
            max_tokens=settings.llm_max_tokens,
        )
        self.model = model or settings.note_taker_model
        self.temperature = (
            settings.note_taker_temperature if temperature is None else temperature
        )

    async def generate(
        self,
        messages: Sequence[Any],
        artifact: Artifact | None,
        existing: NotesRecord | None,
    ) -> NotesRecord:
        prompt = NOTE_TAKER_PROMPT.format(
            existing_notes=(existing or NotesRecord()).format_sections(),
            artifact=extract_plain_text(get_current(artifact)) or "No artifact yet.",
            messages=format_messages(messages),
        )
        try:
            fragment = await self.caller.call(
                prompt=prompt,
                response_model=NotesFragment,
                system=NOTE_TAKER_SYSTEM_PROMPT,
                model=self.model,
                temperature=self.temperature,
            )
        except StructuredOutputError as e:
            raise AgentError(str(e), agent_name="note_taker") from e
        return fragment.to_record()


def create_note_taker_graph(accumulator: NotesAccumulator) -> CompiledStateGraph:
    """
    Create the note taker graph.

    Flow:
        START → take_notes → END

    ``assistant_id`` and ``thread_id`` are read from
    ``config["configurable"]``.
    """

    async def take_notes(state: NoteTakerState, config: RunnableConfig) -> dict[str, Any]:
        configurable = (config or {}).get("configurable", {})
        messages = state.get("messages", [])
        notes = await accumulator.take_notes(
            configurable.get("assistant_id"),
            configurable.get("thread_id"),
            messages,
            state.get("artifact"),
        )
        return {"notes": notes, "stored_successfully": True}

    graph = StateGraph(NoteTakerState)
    graph.add_node("take_notes", take_notes)
    graph.add_edge(START, "take_notes")
    graph.add_edge("take_notes", END)

    logger.debug("Note taker graph compiled")
    return graph.compile()
