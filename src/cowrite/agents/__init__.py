"""Agent collaborators built as LangGraph graphs."""

from cowrite.agents.note_taker import (
    LLMNotesGenerator,
    NotesFragment,
    create_note_taker_graph,
    format_messages,
)
from cowrite.agents.suggest_changes import (
    LLMSuggestionGenerator,
    SuggestionBatch,
    SuggestionGenerator,
    create_suggest_changes_graph,
    format_reflections,
    last_human_message,
)

__all__ = [
    "LLMNotesGenerator",
    "NotesFragment",
    "create_note_taker_graph",
    "format_messages",
    "LLMSuggestionGenerator",
    "SuggestionBatch",
    "SuggestionGenerator",
    "create_suggest_changes_graph",
    "format_reflections",
    "last_human_message",
]
