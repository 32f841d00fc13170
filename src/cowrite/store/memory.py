"""In-process store backend."""

import copy
from typing import Any, Sequence

from cowrite.store.base import BaseStore, Namespace, StoreItem, _utcnow


class InMemoryStore(BaseStore):
    """Dict-backed store. Values are deep-copied in and out."""

    def __init__(self) -> None:
        self._items: dict[tuple[Namespace, str], StoreItem] = {}

    async def get(self, namespace: Sequence[str], key: str) -> StoreItem | None:
        item = self._items.get((tuple(namespace), key))
        return copy.deepcopy(item)

    async def put(self, namespace: Sequence[str], key: str, value: dict[str, Any]) -> None:
        address = (tuple(namespace), key)
        existing = self._items.get(address)
        now = _utcnow()
        self._items[address] = StoreItem(
            namespace=address[0],
            key=key,
            value=copy.deepcopy(value),
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )

    def __len__(self) -> int:
        return len(self._items)
