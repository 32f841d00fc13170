"""Artifact version store.

Pure transformations over immutable ``Artifact`` values. Indices are
assigned sequentially from 1 and never reused; every operation returns a
new artifact (or the same one for a no-op) and never mutates its input.
"""

from enum import Enum
from typing import Callable

from cowrite.artifacts.models import Artifact, ContentVariant
from cowrite.utils.logging import get_logger


logger = get_logger(__name__)


class Direction(str, Enum):
    BACK = "back"
    FORWARD = "forward"


def create_artifact(content: ContentVariant) -> Artifact:
    """Start a new artifact whose first draft gets index 1."""
    first = content.model_copy(update={"index": 1})
    return Artifact(current_index=1, contents=(first,))


def get_current(artifact: Artifact | None) -> ContentVariant | None:
    """Resolve the selected snapshot.

    Falls back to the last snapshot when ``current_index`` matches none,
    so a non-empty artifact always has a current snapshot.
    """
    if artifact is None or not artifact.contents:
        return None
    for content in artifact.contents:
        if content.index == artifact.current_index:
            return content
    logger.debug(
        "Current index not found, using last snapshot",
        current_index=artifact.current_index,
    )
    return artifact.contents[-1]


def append_version(artifact: Artifact | None, content: ContentVariant) -> Artifact:
    """Append ``content`` as the newest version and select it.

    The caller-supplied index is ignored; the new index is one past the
    highest existing index.
    """
    if artifact is None or not artifact.contents:
        return create_artifact(content)

    next_index = max(artifact.indices) + 1
    appended = content.model_copy(update={"index": next_index})
    return Artifact(
        current_index=next_index,
        contents=(*artifact.contents, appended),
    )


def _neighbour(artifact: Artifact, direction: Direction) -> int | None:
    current = get_current(artifact)
    if current is None:
        return None
    if direction is Direction.BACK:
        lower = [i for i in artifact.indices if i < current.index]
        return max(lower) if lower else None
    higher = [i for i in artifact.indices if i > current.index]
    return min(higher) if higher else None


def can_navigate(
    artifact: Artifact | None,
    direction: Direction,
    *,
    is_streaming: bool = False,
) -> bool:
    """Whether ``navigate`` would move in ``direction``."""
    if artifact is None or is_streaming:
        return False
    return _neighbour(artifact, Direction(direction)) is not None


def navigate(
    artifact: Artifact,
    direction: Direction,
    *,
    is_streaming: bool = False,
) -> Artifact:
    """Move the selection to the adjacent version.

    Returns ``artifact`` unchanged at either boundary and while a response
    is streaming.
    """
    if is_streaming:
        logger.debug("Navigation ignored while streaming", direction=str(direction))
        return artifact

    target = _neighbour(artifact, Direction(direction))
    if target is None:
        return artifact
    return artifact.model_copy(update={"current_index": target})


def replace_current(
    artifact: Artifact,
    mutator: Callable[[ContentVariant], ContentVariant],
) -> Artifact:
    """Replace the current snapshot with ``mutator(current)``.

    Every other snapshot and the order are preserved. The replacement keeps
    the index of the snapshot it replaces.
    """
    current = get_current(artifact)
    if current is None:
        return artifact

    replaced = mutator(current)
    if replaced.index != current.index:
        replaced = replaced.model_copy(update={"index": current.index})

    contents = tuple(
        replaced if content is current else content
        for content in artifact.contents
    )
    return artifact.model_copy(update={"contents": contents})
