"""Artifact model, version store and board codec."""

from cowrite.artifacts.models import (
    Artifact,
    BoardContent,
    CodeContent,
    ContentKind,
    ContentVariant,
    ProgrammingLanguage,
    Suggestion,
    TextContent,
)
from cowrite.artifacts.variants import classify, extract_plain_text, parse_content
from cowrite.artifacts.versions import (
    Direction,
    append_version,
    can_navigate,
    create_artifact,
    get_current,
    navigate,
    replace_current,
)
from cowrite.artifacts.board import (
    BoardDocument,
    BoardLine,
    BoardNote,
    move_board_note,
    parse_board,
)

__all__ = [
    # Models
    "Artifact",
    "BoardContent",
    "CodeContent",
    "ContentKind",
    "ContentVariant",
    "ProgrammingLanguage",
    "Suggestion",
    "TextContent",
    # Variants
    "classify",
    "extract_plain_text",
    "parse_content",
    # Versions
    "Direction",
    "append_version",
    "can_navigate",
    "create_artifact",
    "get_current",
    "navigate",
    "replace_current",
    # Board
    "BoardDocument",
    "BoardLine",
    "BoardNote",
    "move_board_note",
    "parse_board",
]
