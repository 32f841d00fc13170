"""FastAPI routes for the artifact and notes API."""

from fastapi import APIRouter, HTTPException

from cowrite import __version__
from cowrite.api.dependencies import NotesAccumulatorDep, SettingsDep, StoreDep
from cowrite.api.models import (
    AnnotateRequest,
    AnnotateResponse,
    AppendRequest,
    ApplySuggestionRequest,
    ApplySuggestionResponse,
    ArtifactRequest,
    ArtifactResponse,
    AttachSuggestionsRequest,
    BoardMoveRequest,
    CurrentContentResponse,
    HealthResponse,
    LayoutRequest,
    LayoutResponse,
    NavigateRequest,
    NavigateResponse,
    NotesResponse,
    StoreGetRequest,
    StoreGetResponse,
    StoreItemResponse,
    StorePutRequest,
    StorePutResponse,
    SuggestionPositionModel,
    TakeNotesRequest,
)
from cowrite.artifacts.board import move_board_note
from cowrite.artifacts.variants import classify, extract_plain_text
from cowrite.artifacts.versions import (
    Direction,
    append_version,
    can_navigate,
    get_current,
    navigate,
)
from cowrite.suggestions.annotate import annotate
from cowrite.suggestions.engine import apply_suggestion, attach_suggestions
from cowrite.suggestions.layout import CardMetrics, LayoutConfig, layout_cards
from cowrite.utils.logging import get_logger


logger = get_logger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: SettingsDep) -> HealthResponse:
    """
    Health check endpoint.

    Returns application status, version and the configured store backend.
    """
    return HealthResponse(
        status="ok",
        version=__version__,
        store_backend=settings.store_backend,
    )


# =============================================================================
# Store proxy
# =============================================================================


@router.post("/store/get", response_model=StoreGetResponse)
async def store_get(request: StoreGetRequest, store: StoreDep) -> StoreGetResponse:
    item = await store.get(request.namespace, request.key)
    if item is None:
        return StoreGetResponse(item=None)
    return StoreGetResponse(
        item=StoreItemResponse(
            namespace=list(item.namespace),
            key=item.key,
            value=item.value,
            created_at=item.created_at.isoformat(),
            updated_at=item.updated_at.isoformat(),
        )
    )


@router.post("/store/put", response_model=StorePutResponse)
async def store_put(request: StorePutRequest, store: StoreDep) -> StorePutResponse:
    await store.put(request.namespace, request.key, request.value)
    return StorePutResponse(success=True)


# =============================================================================
# Notes
# =============================================================================


@router.get("/notes/{assistant_id}/{thread_id}", response_model=NotesResponse)
async def get_notes(
    assistant_id: str,
    thread_id: str,
    accumulator: NotesAccumulatorDep,
) -> NotesResponse:
    """Return the notes accumulated for a conversation, if any."""
    return NotesResponse(notes=await accumulator.load(assistant_id, thread_id))


@router.post("/notes/take", response_model=NotesResponse)
async def take_notes(
    request: TakeNotesRequest,
    accumulator: NotesAccumulatorDep,
) -> NotesResponse:
    """
    Run the note taker over a conversation and merge its notes.

    Missing identifiers yield 422, agent or store failures 502.
    """
    notes = await accumulator.take_notes(
        request.assistant_id,
        request.thread_id,
        [message.model_dump() for message in request.messages],
        request.artifact,
    )
    logger.info(
        "Notes taken",
        assistant_id=request.assistant_id,
        thread_id=request.thread_id,
        messages=len(request.messages),
    )
    return NotesResponse(notes=notes)


# =============================================================================
# Artifacts
# =============================================================================


@router.post("/artifacts/current", response_model=CurrentContentResponse)
async def current_content(request: ArtifactRequest) -> CurrentContentResponse:
    content = get_current(request.artifact)
    return CurrentContentResponse(
        content=content,
        kind=classify(content).value,
        plain_text=extract_plain_text(content),
    )


@router.post("/artifacts/append", response_model=ArtifactResponse)
async def append(request: AppendRequest) -> ArtifactResponse:
    return ArtifactResponse(artifact=append_version(request.artifact, request.content))


@router.post("/artifacts/navigate", response_model=NavigateResponse)
async def navigate_versions(request: NavigateRequest) -> NavigateResponse:
    artifact = navigate(
        request.artifact, request.direction, is_streaming=request.is_streaming
    )
    return NavigateResponse(
        artifact=artifact,
        can_go_back=can_navigate(artifact, Direction.BACK, is_streaming=request.is_streaming),
        can_go_forward=can_navigate(
            artifact, Direction.FORWARD, is_streaming=request.is_streaming
        ),
    )


@router.post("/artifacts/annotate", response_model=AnnotateResponse)
async def annotate_text(request: AnnotateRequest) -> AnnotateResponse:
    result = annotate(request.text, request.suggestions)
    return AnnotateResponse(
        text=result.text,
        positions=[
            SuggestionPositionModel(
                index=p.index,
                offset=p.offset,
                annotated_offset=p.annotated_offset,
                rendered=p.rendered,
            )
            for p in result.positions
        ],
        order=list(result.order),
    )


@router.post("/artifacts/suggestions/apply", response_model=ApplySuggestionResponse)
async def apply(
    request: ApplySuggestionRequest,
    settings: SettingsDep,
) -> ApplySuggestionResponse:
    match_by_value = (
        settings.remove_suggestions_by_value
        if request.match_by_value is None
        else request.match_by_value
    )
    result = apply_suggestion(
        request.artifact,
        request.index,
        is_streaming=request.is_streaming,
        match_by_value=match_by_value,
    )
    return ApplySuggestionResponse(artifact=result.artifact, outcome=result.outcome.value)


@router.post("/artifacts/suggestions/attach", response_model=ArtifactResponse)
async def attach(request: AttachSuggestionsRequest) -> ArtifactResponse:
    return ArtifactResponse(
        artifact=attach_suggestions(request.artifact, request.suggestions)
    )


@router.post("/artifacts/board/move", response_model=ArtifactResponse)
async def move_note(request: BoardMoveRequest) -> ArtifactResponse:
    try:
        artifact = move_board_note(
            request.artifact,
            request.note_index,
            request.x,
            request.y,
            is_streaming=request.is_streaming,
        )
    except IndexError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return ArtifactResponse(artifact=artifact)


@router.post("/artifacts/layout", response_model=LayoutResponse)
async def layout(request: LayoutRequest, settings: SettingsDep) -> LayoutResponse:
    cards = [
        CardMetrics(
            index=card.index,
            desired_y=card.desired_y,
            measured_height=card.measured_height,
        )
        for card in request.cards
    ]
    tops = layout_cards(cards, request.selected, LayoutConfig.from_settings(settings))
    return LayoutResponse(tops=tops)
