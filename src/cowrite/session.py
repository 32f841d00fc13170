"""Artifact session.

One session owns one artifact on behalf of one view. It tracks outstanding
agent responses (streams) and routes every user action through the pure
version-store and suggestion functions with the current streaming flag.
"""

from dataclasses import dataclass

from cowrite.artifacts.board import move_board_note
from cowrite.artifacts.models import Artifact, ContentKind, ContentVariant, Suggestion
from cowrite.artifacts.variants import classify, extract_plain_text
from cowrite.artifacts.versions import (
    Direction,
    append_version,
    can_navigate,
    get_current,
    navigate,
)
from cowrite.suggestions.annotate import AnnotatedText, MarkerFormat, annotate
from cowrite.suggestions.engine import (
    ApplyResult,
    SuggestionPhase,
    SuggestionReconciler,
    attach_suggestions,
)
from cowrite.utils.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class SessionView:
    """Everything the view layer needs to draw the artifact panel."""

    content: ContentVariant | None
    annotated: AnnotatedText | None  # None for boards and empty artifacts
    can_go_back: bool
    can_go_forward: bool
    phase: SuggestionPhase
    selected_index: int | None
    is_streaming: bool
    update_failed: bool


class ArtifactSession:
    """
    Single-owner container for an artifact and its transient UI state.

    Streams are identified by tokens from ``begin_stream``. Streaming stays
    on while any token is outstanding; each completed stream appends a new
    version in completion order.
    """

    def __init__(
        self,
        artifact: Artifact | None = None,
        match_by_value: bool = False,
        markers: MarkerFormat = MarkerFormat(),
    ):
        self.artifact = artifact
        self.update_failed = False
        self.markers = markers
        self.reconciler = SuggestionReconciler(match_by_value=match_by_value)
        self._next_token = 0
        self._outstanding: set[int] = set()
        self._partial_text: str | None = None

    @property
    def is_streaming(self) -> bool:
        return bool(self._outstanding)

    # =========================================================================
    # Streams
    # =========================================================================

    def begin_stream(self) -> int:
        self._next_token += 1
        token = self._next_token
        self._outstanding.add(token)
        self.update_failed = False
        logger.debug("Stream started", token=token, outstanding=len(self._outstanding))
        return token

    def receive_partial(self, token: int, text: str) -> None:
        if token not in self._outstanding:
            logger.debug("Partial for unknown stream ignored", token=token)
            return
        self._partial_text = text

    def complete_stream(self, token: int, content: ContentVariant) -> Artifact:
        """Append the stream's final content as the newest version."""
        if token not in self._outstanding:
            logger.warning("Completion for unknown stream ignored", token=token)
            return self.artifact
        self._finish(token)
        self.artifact = append_version(self.artifact, content)
        logger.info(
            "Stream completed",
            token=token,
            current_index=self.artifact.current_index,
        )
        return self.artifact

    def fail_stream(self, token: int, error: Exception | str) -> None:
        """Flag the failure for the view; the artifact is left untouched."""
        if token not in self._outstanding:
            return
        self._finish(token)
        self.update_failed = True
        logger.error("Artifact update failed", token=token, error=str(error))

    def _finish(self, token: int) -> None:
        self._outstanding.discard(token)
        if not self._outstanding:
            self._partial_text = None

    # =========================================================================
    # User actions
    # =========================================================================

    def navigate(self, direction: Direction) -> Artifact | None:
        if self.artifact is not None:
            self.artifact = navigate(self.artifact, direction, is_streaming=self.is_streaming)
        return self.artifact

    def select(self, index: int) -> Artifact | None:
        if self.artifact is not None:
            self.artifact = self.reconciler.select(
                self.artifact, index, is_streaming=self.is_streaming
            )
        return self.artifact

    def deselect(self) -> None:
        self.reconciler.deselect()

    def apply(self, index: int) -> ApplyResult | None:
        if self.artifact is None:
            return None
        result = self.reconciler.apply(self.artifact, index, is_streaming=self.is_streaming)
        self.artifact = result.artifact
        return result

    def attach_suggestions(self, suggestions: list[Suggestion]) -> Artifact | None:
        if self.artifact is not None:
            self.reconciler.deselect()
            self.artifact = attach_suggestions(self.artifact, suggestions)
        return self.artifact

    def move_board_note(self, note_index: int, x: float, y: float) -> Artifact | None:
        if self.artifact is not None:
            self.artifact = move_board_note(
                self.artifact, note_index, x, y, is_streaming=self.is_streaming
            )
        return self.artifact

    def commit_edit(self, text: str) -> Artifact | None:
        """Append a direct user edit of the current text or code as a new version.

        Pending suggestions were made against the previous text, so the new
        text snapshot starts without any.
        """
        if self.artifact is None or self.is_streaming:
            return self.artifact

        current = get_current(self.artifact)
        kind = classify(current)
        if kind is ContentKind.TEXT:
            update = {"full_markdown": text, "suggested_changes": ()}
        elif kind is ContentKind.CODE:
            update = {"code": text}
        else:
            logger.warning("Direct edit ignored", kind=kind.value)
            return self.artifact

        self.reconciler.deselect()
        self.artifact = append_version(self.artifact, current.model_copy(update=update))
        return self.artifact

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(self) -> SessionView:
        current = get_current(self.artifact)
        kind = classify(current)

        annotated = None
        if self.is_streaming and self._partial_text is not None:
            annotated = annotate(self._partial_text, [], self.markers)
        elif kind is ContentKind.TEXT:
            annotated = annotate(current.full_markdown, current.suggested_changes, self.markers)
        elif kind is ContentKind.CODE:
            annotated = annotate(extract_plain_text(current), [], self.markers)

        return SessionView(
            content=current,
            annotated=annotated,
            can_go_back=can_navigate(self.artifact, Direction.BACK, is_streaming=self.is_streaming),
            can_go_forward=can_navigate(
                self.artifact, Direction.FORWARD, is_streaming=self.is_streaming
            ),
            phase=self.reconciler.phase(self.artifact),
            selected_index=self.reconciler.selected_index(self.artifact),
            is_streaming=self.is_streaming,
            update_failed=self.update_failed,
        )
