"""Single classification point for content snapshots.

Every call site that needs to know which variant it holds goes through
``classify``. Mappings (raw wire payloads) and model instances are both
accepted so the check works before and after validation.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter, ValidationError

from cowrite.artifacts.models import (
    BoardContent,
    CodeContent,
    ContentKind,
    ContentVariant,
    TextContent,
)
from cowrite.utils.logging import get_logger


logger = get_logger(__name__)

_content_adapter: TypeAdapter[ContentVariant] = TypeAdapter(ContentVariant)

_KINDS = {kind.value: kind for kind in ContentKind if kind is not ContentKind.UNKNOWN}


def classify(content: Any) -> ContentKind:
    """Return the variant kind of ``content``. Never raises."""
    if isinstance(content, TextContent):
        return ContentKind.TEXT
    if isinstance(content, CodeContent):
        return ContentKind.CODE
    if isinstance(content, BoardContent):
        return ContentKind.BOARD
    if isinstance(content, Mapping):
        tag = content.get("type")
        if isinstance(tag, str):
            return _KINDS.get(tag, ContentKind.UNKNOWN)
    return ContentKind.UNKNOWN


def extract_plain_text(content: Any) -> str:
    """Linear text projection of a snapshot.

    Text yields its markdown and code its source. Boards have no linear
    projection and yield an empty string, as do unknown values.
    """
    kind = classify(content)
    if kind is ContentKind.UNKNOWN or kind is ContentKind.BOARD:
        return ""

    field = "full_markdown" if kind is ContentKind.TEXT else "code"
    if isinstance(content, Mapping):
        alias = "fullMarkdown" if kind is ContentKind.TEXT else "code"
        value = content.get(alias, content.get(field, ""))
        return value if isinstance(value, str) else ""
    return getattr(content, field)


def parse_content(raw: Any) -> ContentVariant | None:
    """Validate a raw mapping into a content variant.

    Returns None for unknown tags or payloads that fail validation.
    """
    if classify(raw) is ContentKind.UNKNOWN:
        return None
    if not isinstance(raw, Mapping):
        return raw
    try:
        return _content_adapter.validate_python(dict(raw))
    except ValidationError as e:
        logger.warning("Invalid content payload", errors=e.error_count())
        return None
