"""Local filesystem store backend."""

import json
import uuid
from pathlib import Path
from typing import Any, Sequence
from urllib.parse import quote

import aiofiles
import aiofiles.os

from cowrite.core.exceptions import StoreError
from cowrite.store.base import BaseStore, StoreItem, _utcnow
from cowrite.utils.logging import get_logger


logger = get_logger(__name__)


def _encode_segment(segment: str) -> str:
    """Make a namespace segment or key safe to use as one path component."""
    encoded = quote(segment, safe="")
    if encoded in (".", ".."):
        return encoded.replace(".", "%2E")
    return encoded


class LocalFileStore(BaseStore):
    """
    One JSON file per item.

    Directory structure:
        {base_path}/
        └── {namespace[0]}/
            └── {namespace[1]}/
                └── {key}.json

    Writes go to a temporary file that is then renamed over the target, so
    a reader never observes a half-written item.
    """

    def __init__(self, base_path: str = "./storage/store"):
        self._base_path = Path(base_path)

    def _item_path(self, namespace: Sequence[str], key: str) -> Path:
        if not namespace or not key:
            raise StoreError("Namespace and key are required", tuple(namespace), key)
        segments = [_encode_segment(segment) for segment in namespace]
        return self._base_path.joinpath(*segments) / f"{_encode_segment(key)}.json"

    async def initialize(self) -> None:
        try:
            await aiofiles.os.makedirs(self._base_path, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create store directory: {e}") from e
        logger.info("Local store ready", base_path=str(self._base_path))

    async def get(self, namespace: Sequence[str], key: str) -> StoreItem | None:
        path = self._item_path(namespace, key)
        if not await aiofiles.os.path.exists(path):
            return None

        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                data = json.loads(await f.read())
            return StoreItem.from_dict(data)
        except (OSError, ValueError, KeyError) as e:
            raise StoreError(
                f"Cannot read store item: {e}", tuple(namespace), key
            ) from e

    async def put(self, namespace: Sequence[str], key: str, value: dict[str, Any]) -> None:
        path = self._item_path(namespace, key)
        existing = await self.get(namespace, key)
        now = _utcnow()
        item = StoreItem(
            namespace=tuple(namespace),
            key=key,
            value=value,
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )

        temp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        try:
            await aiofiles.os.makedirs(path.parent, exist_ok=True)
            async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(item.to_dict(), indent=2))
            await aiofiles.os.replace(temp_path, path)
        except (OSError, TypeError, ValueError) as e:
            if await aiofiles.os.path.exists(temp_path):
                await aiofiles.os.remove(temp_path)
            raise StoreError(
                f"Cannot write store item: {e}", tuple(namespace), key
            ) from e

        logger.debug("Stored item", namespace="/".join(namespace), key=key)
