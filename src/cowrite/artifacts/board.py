"""Board codec.

A board snapshot stores one JSON note per line:
``{"title": ..., "content": ..., "x": ..., "y": ..., "color": ...}``.

Parsing never aborts on a bad line. Malformed lines are kept verbatim so
re-serialization reproduces them, and moving one note re-encodes only that
note's line.
"""

import json
from dataclasses import dataclass, field
from typing import Any

from cowrite.artifacts.models import Artifact, BoardContent, ContentKind
from cowrite.artifacts.variants import classify
from cowrite.artifacts.versions import get_current, replace_current
from cowrite.utils.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class BoardNote:
    """A valid note as read from one board line."""

    title: str
    content: str
    x: float
    y: float
    color: str


@dataclass(frozen=True)
class BoardLine:
    """One line of the board, valid or not."""

    raw: str
    note: BoardNote | None = None
    record: dict[str, Any] | None = field(default=None, compare=False)

    @property
    def is_note(self) -> bool:
        return self.note is not None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_note(record: Any) -> BoardNote | None:
    if not isinstance(record, dict):
        return None
    if not all(isinstance(record.get(k), str) for k in ("title", "content", "color")):
        return None
    if not (_is_number(record.get("x")) and _is_number(record.get("y"))):
        return None
    return BoardNote(
        title=record["title"],
        content=record["content"],
        x=record["x"],
        y=record["y"],
        color=record["color"],
    )


def _encode_number(value: float) -> int | float:
    # Integral coordinates are written without a fractional part
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class BoardDocument:
    """Parsed board, line by line."""

    lines: tuple[BoardLine, ...] = ()

    @property
    def notes(self) -> list[BoardNote]:
        return [line.note for line in self.lines if line.note is not None]

    def serialize(self) -> str:
        return "\n".join(line.raw for line in self.lines)

    def move_note(self, note_index: int, x: float, y: float) -> "BoardDocument":
        """Return a document with note ``note_index`` moved to (x, y).

        Only that note's line is re-encoded; every other line is kept
        byte-identical.

        Raises:
            IndexError: If ``note_index`` does not address a valid note
        """
        note_lines = [i for i, line in enumerate(self.lines) if line.is_note]
        if note_index < 0 or note_index >= len(note_lines):
            raise IndexError(f"Board note {note_index} out of range")

        position = note_lines[note_index]
        line = self.lines[position]
        record = dict(line.record or {})
        record["x"] = _encode_number(x)
        record["y"] = _encode_number(y)
        raw = json.dumps(record, separators=(",", ":"), ensure_ascii=False)
        moved = BoardLine(raw=raw, note=_to_note(record), record=record)

        lines = list(self.lines)
        lines[position] = moved
        return BoardDocument(lines=tuple(lines))


def parse_board(board: str) -> BoardDocument:
    """Parse NDJSON board text.

    Blank and bad lines are kept verbatim as non-note lines, so
    ``serialize()`` reproduces ``board`` byte for byte. Bad lines are logged.
    """
    lines: list[BoardLine] = []
    for number, raw in enumerate(board.split("\n"), start=1):
        if not raw.strip():
            lines.append(BoardLine(raw=raw))
            continue
        try:
            record = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Malformed board line kept as-is", line=number, error=e.msg)
            lines.append(BoardLine(raw=raw))
            continue

        note = _to_note(record)
        if note is None:
            logger.warning("Board line is not a valid note", line=number)
            lines.append(BoardLine(raw=raw))
            continue
        lines.append(BoardLine(raw=raw, note=note, record=record))

    return BoardDocument(lines=tuple(lines))


def move_board_note(
    artifact: Artifact,
    note_index: int,
    x: float,
    y: float,
    *,
    is_streaming: bool = False,
) -> Artifact:
    """Commit a drag-and-drop move of one note on the current board.

    No-op while streaming or when the current snapshot is not a board.
    """
    if is_streaming:
        logger.debug("Board move ignored while streaming", note_index=note_index)
        return artifact

    current = get_current(artifact)
    if classify(current) is not ContentKind.BOARD:
        logger.warning("Board move ignored for non-board content")
        return artifact

    def mutate(content: BoardContent) -> BoardContent:
        document = parse_board(content.board).move_note(note_index, x, y)
        return content.model_copy(update={"board": document.serialize()})

    return replace_current(artifact, mutate)
