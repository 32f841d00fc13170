"""API request/response models."""

from typing import Any, Literal

from pydantic import Field

from cowrite.artifacts.models import Artifact, ContentVariant, CowriteModel, Suggestion
from cowrite.artifacts.versions import Direction
from cowrite.notes.models import NotesRecord


class HealthResponse(CowriteModel):
    """Response model for health check."""

    status: str
    version: str
    store_backend: str


class ErrorResponse(CowriteModel):
    """Body returned for domain errors."""

    error_code: str
    error_message: str
    recoverable: bool


# =============================================================================
# Store proxy
# =============================================================================


class StoreGetRequest(CowriteModel):
    namespace: list[str] = Field(min_length=1)
    key: str = Field(min_length=1)


class StorePutRequest(StoreGetRequest):
    value: dict[str, Any]


class StoreItemResponse(CowriteModel):
    namespace: list[str]
    key: str
    value: dict[str, Any]
    created_at: str
    updated_at: str


class StoreGetResponse(CowriteModel):
    item: StoreItemResponse | None = None


class StorePutResponse(CowriteModel):
    success: bool = True


# =============================================================================
# Notes
# =============================================================================


class ChatMessage(CowriteModel):
    """Conversation message as sent by the web client."""

    type: Literal["human", "ai", "system"]
    content: str


class TakeNotesRequest(CowriteModel):
    assistant_id: str | None = None
    thread_id: str | None = None
    messages: list[ChatMessage] = Field(default_factory=list)
    artifact: Artifact | None = None


class NotesResponse(CowriteModel):
    notes: NotesRecord | None = None


# =============================================================================
# Artifacts
# =============================================================================


class ArtifactRequest(CowriteModel):
    artifact: Artifact | None = None


class ArtifactResponse(CowriteModel):
    artifact: Artifact | None = None


class CurrentContentResponse(CowriteModel):
    content: ContentVariant | None = None
    kind: str
    plain_text: str


class AppendRequest(CowriteModel):
    artifact: Artifact | None = None
    content: ContentVariant


class NavigateRequest(CowriteModel):
    artifact: Artifact
    direction: Direction
    is_streaming: bool = False


class NavigateResponse(CowriteModel):
    artifact: Artifact
    can_go_back: bool
    can_go_forward: bool


class AnnotateRequest(CowriteModel):
    text: str
    suggestions: list[Suggestion] = Field(default_factory=list)


class SuggestionPositionModel(CowriteModel):
    index: int
    offset: int
    annotated_offset: int
    rendered: bool


class AnnotateResponse(CowriteModel):
    text: str
    positions: list[SuggestionPositionModel]
    order: list[int]


class ApplySuggestionRequest(CowriteModel):
    artifact: Artifact
    index: int
    is_streaming: bool = False
    match_by_value: bool | None = None  # Defaults to the server setting


class ApplySuggestionResponse(CowriteModel):
    artifact: Artifact
    outcome: str


class AttachSuggestionsRequest(CowriteModel):
    artifact: Artifact
    suggestions: list[Suggestion]


class BoardMoveRequest(CowriteModel):
    artifact: Artifact
    note_index: int
    x: float
    y: float
    is_streaming: bool = False


class CardMetricsModel(CowriteModel):
    index: int
    desired_y: float | None = None
    measured_height: float | None = None


class LayoutRequest(CowriteModel):
    cards: list[CardMetricsModel]
    selected: int | None = None


class LayoutResponse(CowriteModel):
    tops: list[float]
