"""Suggestion reconciliation engine.

Commits pending suggestions into canonical text and tracks which pending
suggestion the user has selected. Canonical text only ever receives plain
replacements; removed/added markers exist in rendered views alone.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from cowrite.artifacts.models import Artifact, ContentKind, Suggestion, TextContent
from cowrite.artifacts.variants import classify
from cowrite.artifacts.versions import get_current, replace_current
from cowrite.suggestions.annotate import locate
from cowrite.utils.logging import get_logger


logger = get_logger(__name__)


# =============================================================================
# PURE OPERATIONS
# =============================================================================


def apply_to_text(text: str, suggestion: Suggestion) -> tuple[str, bool]:
    """Replace the first occurrence of ``prev_text``.

    Returns:
        The new text and whether a replacement happened
    """
    offset = locate(text, suggestion)
    if offset == -1:
        return text, False
    end = offset + len(suggestion.prev_text)
    return text[:offset] + suggestion.suggested_text + text[end:], True


def remove_suggestion(
    suggestions: Sequence[Suggestion],
    index: int,
    *,
    match_by_value: bool = False,
) -> tuple[Suggestion, ...]:
    """Drop the suggestion at ``index`` from the pending list.

    With ``match_by_value`` every entry proposing the same
    (prev_text, suggested_text) pair is dropped as well.
    """
    if index < 0 or index >= len(suggestions):
        return tuple(suggestions)
    if match_by_value:
        target = suggestions[index]
        return tuple(s for s in suggestions if not s.same_edit(target))
    return tuple(s for i, s in enumerate(suggestions) if i != index)


class ApplyOutcome(str, Enum):
    APPLIED = "applied"    # Text replaced and suggestion removed
    STALE = "stale"        # prev_text absent, suggestion removed only
    DISABLED = "disabled"  # Nothing happened


@dataclass(frozen=True)
class ApplyResult:
    artifact: Artifact
    outcome: ApplyOutcome

    @property
    def changed(self) -> bool:
        return self.outcome is not ApplyOutcome.DISABLED


def _pending(artifact: Artifact | None) -> tuple[Suggestion, ...]:
    current = get_current(artifact)
    if classify(current) is not ContentKind.TEXT:
        return ()
    return current.suggested_changes


def apply_suggestion(
    artifact: Artifact,
    index: int,
    *,
    is_streaming: bool = False,
    match_by_value: bool = False,
) -> ApplyResult:
    """Commit the pending suggestion at ``index`` into the current text.

    A stale suggestion (``prev_text`` no longer present) is removed without
    touching the text. Disabled while streaming, for non-text content and
    for indices outside the pending list.
    """
    if is_streaming:
        logger.debug("Suggestion apply ignored while streaming", index=index)
        return ApplyResult(artifact, ApplyOutcome.DISABLED)

    current = get_current(artifact)
    if classify(current) is not ContentKind.TEXT:
        logger.warning("Suggestion apply ignored for non-text content", index=index)
        return ApplyResult(artifact, ApplyOutcome.DISABLED)

    pending = current.suggested_changes
    if index < 0 or index >= len(pending):
        logger.warning("Suggestion index out of range", index=index, pending=len(pending))
        return ApplyResult(artifact, ApplyOutcome.DISABLED)

    text, replaced = apply_to_text(current.full_markdown, pending[index])
    if not replaced:
        logger.warning("Stale suggestion removed without applying", index=index)

    remaining = remove_suggestion(pending, index, match_by_value=match_by_value)

    def mutate(content: TextContent) -> TextContent:
        return content.model_copy(
            update={"full_markdown": text, "suggested_changes": remaining}
        )

    return ApplyResult(
        replace_current(artifact, mutate),
        ApplyOutcome.APPLIED if replaced else ApplyOutcome.STALE,
    )


def attach_suggestions(
    artifact: Artifact,
    suggestions: Sequence[Suggestion],
) -> Artifact:
    """Replace the pending list of the current text snapshot."""
    current = get_current(artifact)
    if classify(current) is not ContentKind.TEXT:
        logger.warning("Suggestions ignored for non-text content", count=len(suggestions))
        return artifact

    batch = tuple(suggestions)
    logger.info("Suggestions attached", count=len(batch), index=current.index)
    return replace_current(
        artifact,
        lambda content: content.model_copy(update={"suggested_changes": batch}),
    )


# =============================================================================
# STATE MACHINE
# =============================================================================


class SuggestionPhase(str, Enum):
    IDLE = "idle"          # No pending suggestions
    PENDING = "pending"    # Suggestions present, none selected
    SELECTED = "selected"  # One suggestion highlighted


class SuggestionReconciler:
    """
    Selection state over the pending suggestions of a text snapshot.

    The reconciler only remembers which position is selected and for which
    snapshot; the phase is derived from the artifact passed in, so a pending
    list that shrinks underneath a selection drops the selection.
    """

    def __init__(self, match_by_value: bool = False):
        self.match_by_value = match_by_value
        self._selected: int | None = None
        self._snapshot_index: int | None = None

    def selected_index(self, artifact: Artifact | None) -> int | None:
        if self._selected is None:
            return None
        current = get_current(artifact)
        if current is None or current.index != self._snapshot_index:
            return None
        if self._selected >= len(_pending(artifact)):
            return None
        return self._selected

    def phase(self, artifact: Artifact | None) -> SuggestionPhase:
        if not _pending(artifact):
            return SuggestionPhase.IDLE
        if self.selected_index(artifact) is None:
            return SuggestionPhase.PENDING
        return SuggestionPhase.SELECTED

    def select(
        self,
        artifact: Artifact,
        index: int,
        *,
        is_streaming: bool = False,
    ) -> Artifact:
        """Highlight ``index``; selecting it a second time applies it."""
        pending = _pending(artifact)
        if index < 0 or index >= len(pending):
            logger.debug("Selection ignored", index=index, pending=len(pending))
            return artifact

        if self.selected_index(artifact) == index:
            return self.apply(artifact, index, is_streaming=is_streaming).artifact

        self._selected = index
        self._snapshot_index = get_current(artifact).index
        return artifact

    def deselect(self) -> None:
        self._selected = None
        self._snapshot_index = None

    def apply(
        self,
        artifact: Artifact,
        index: int,
        *,
        is_streaming: bool = False,
    ) -> ApplyResult:
        """Commit ``index`` and clear the selection if anything changed."""
        result = apply_suggestion(
            artifact,
            index,
            is_streaming=is_streaming,
            match_by_value=self.match_by_value,
        )
        if result.changed:
            self.deselect()
        return result
