"""LangGraph state definitions for the collaborator graphs.

Messages use the ``add_messages`` reducer so callers can feed a whole
conversation or append to an existing one.
"""

from __future__ import annotations

from typing import Annotated

from langchain_core.messages import AnyMessage
from langgraph.graph.message import add_messages
from typing_extensions import TypedDict

from cowrite.artifacts.models import Artifact
from cowrite.notes.models import NotesRecord


class NoteTakerState(TypedDict, total=False):
    """State flowing through the note taker graph."""

    messages: Annotated[list[AnyMessage], add_messages]
    artifact: Artifact | None

    # Output
    notes: NotesRecord | None
    stored_successfully: bool


class SuggestChangesState(TypedDict, total=False):
    """State flowing through the suggest changes graph."""

    messages: Annotated[list[AnyMessage], add_messages]
    artifact: Artifact | None
