"""Artifact data models.

An artifact is an append-only list of immutable content snapshots. Each
snapshot is one of three variants discriminated by its ``type`` tag. The
wire format uses camelCase field names (``fullMarkdown``,
``currentIndex``...) while Python code uses snake_case.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CowriteModel(BaseModel):
    """Frozen base model with camelCase aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        """Serialize with wire (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)


class ContentKind(str, Enum):
    """Result of classifying a content snapshot."""

    TEXT = "text"
    CODE = "code"
    BOARD = "board"
    UNKNOWN = "unknown"


class ProgrammingLanguage(str, Enum):
    """Languages a code snapshot can be written in."""

    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    CPP = "cpp"
    JAVA = "java"
    PHP = "php"
    PYTHON = "python"
    HTML = "html"
    SQL = "sql"
    JSON = "json"
    RUST = "rust"
    XML = "xml"
    CLOJURE = "clojure"
    CSHARP = "csharp"
    OTHER = "other"


class Suggestion(CowriteModel):
    """A proposed replacement of ``prev_text`` by ``suggested_text``.

    ``description`` is display-only and never part of equality matching.
    """

    prev_text: str
    suggested_text: str
    description: str = ""

    def same_edit(self, other: "Suggestion") -> bool:
        """True when both propose the identical (prev, suggested) pair."""
        return (
            self.prev_text == other.prev_text
            and self.suggested_text == other.suggested_text
        )


class TextContent(CowriteModel):
    type: Literal["text"] = "text"
    index: int = Field(ge=1)
    title: str
    full_markdown: str
    suggested_changes: tuple[Suggestion, ...] = ()


class CodeContent(CowriteModel):
    type: Literal["code"] = "code"
    index: int = Field(ge=1)
    title: str
    code: str
    language: ProgrammingLanguage = ProgrammingLanguage.OTHER


class BoardContent(CowriteModel):
    """Board snapshot. ``board`` holds newline-delimited JSON notes."""

    type: Literal["board"] = "board"
    index: int = Field(ge=1)
    title: str
    board: str = ""


ContentVariant = Annotated[
    Union[TextContent, CodeContent, BoardContent],
    Field(discriminator="type"),
]


class Artifact(CowriteModel):
    """Versioned document: ordered snapshots plus the selected index."""

    current_index: int
    contents: tuple[ContentVariant, ...] = ()

    @property
    def indices(self) -> list[int]:
        return [content.index for content in self.contents]
