"""Rendering projection of pending suggestions onto text.

``annotate`` is pure: it recomputes the mapping from the pending list to
rendered markers on every call and never touches the canonical text.
Markers carry the suggestion's position in the pending list, which is
only meaningful for the render pass that produced it.
"""

from dataclasses import dataclass
from typing import Sequence

from cowrite.artifacts.models import Suggestion


@dataclass(frozen=True)
class MarkerFormat:
    """Templates wrapping removed and added text.

    ``{index}`` is replaced by the suggestion's position in the pending
    list.
    """

    removed_open: str = '<span class="suggestion-removed" data-suggestion-index="{index}">'
    added_open: str = '<span class="suggestion-added" data-suggestion-index="{index}">'
    close: str = "</span>"

    def render(self, index: int, suggestion: Suggestion) -> str:
        return (
            f"{self.removed_open.format(index=index)}{suggestion.prev_text}{self.close}"
            f"{self.added_open.format(index=index)}{suggestion.suggested_text}{self.close}"
        )


@dataclass(frozen=True)
class SuggestionPosition:
    """Where one suggestion landed in a render pass."""

    index: int              # Position in the pending list
    offset: int             # First occurrence in canonical text, -1 if absent
    annotated_offset: int   # Start of its markers in annotated text, -1 if not rendered
    rendered: bool


@dataclass(frozen=True)
class AnnotatedText:
    text: str
    positions: tuple[SuggestionPosition, ...]
    order: tuple[int, ...]  # Pending-list positions sorted by offset

    def position_of(self, index: int) -> SuggestionPosition | None:
        for position in self.positions:
            if position.index == index:
                return position
        return None


def locate(text: str, suggestion: Suggestion) -> int:
    """First offset of ``prev_text`` in ``text``, -1 when absent or empty."""
    if not suggestion.prev_text:
        return -1
    return text.find(suggestion.prev_text)


def annotate(
    text: str,
    suggestions: Sequence[Suggestion],
    markers: MarkerFormat = MarkerFormat(),
) -> AnnotatedText:
    """Splice suggestion markers into ``text``.

    Suggestions are ordered by the offset of their ``prev_text`` (absent
    ones last, stable) and spliced right to left so earlier offsets stay
    valid. A suggestion overlapping a range already spliced to its right
    is left unrendered. Among suggestions at the same offset the lowest
    list position is spliced.
    """
    offsets = [locate(text, suggestion) for suggestion in suggestions]
    order = sorted(
        range(len(suggestions)),
        key=lambda i: (offsets[i] == -1, offsets[i]),
    )

    rendered: set[int] = set()
    boundary = len(text)
    annotated = text
    found = [i for i, offset in enumerate(offsets) if offset != -1]
    for i in sorted(found, key=lambda i: (-offsets[i], i)):
        offset = offsets[i]
        end = offset + len(suggestions[i].prev_text)
        if end > boundary:
            continue
        annotated = annotated[:offset] + markers.render(i, suggestions[i]) + annotated[end:]
        rendered.add(i)
        boundary = offset

    # Annotated offsets shift by the growth of every splice to the left
    annotated_offsets: dict[int, int] = {}
    shift = 0
    for i in order:
        if i not in rendered:
            continue
        annotated_offsets[i] = offsets[i] + shift
        shift += len(markers.render(i, suggestions[i])) - len(suggestions[i].prev_text)

    positions = tuple(
        SuggestionPosition(
            index=i,
            offset=offsets[i],
            annotated_offset=annotated_offsets.get(i, -1),
            rendered=i in rendered,
        )
        for i in range(len(suggestions))
    )
    return AnnotatedText(text=annotated, positions=positions, order=tuple(order))
