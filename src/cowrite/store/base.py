"""Abstract key-value store used for persisted notes and reflections."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence


Namespace = tuple[str, ...]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StoreItem:
    """A stored value with its address and timestamps."""

    namespace: Namespace
    key: str
    value: dict[str, Any]
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for storage."""
        return {
            "namespace": list(self.namespace),
            "key": self.key,
            "value": self.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoreItem":
        """Deserialize from dictionary."""
        return cls(
            namespace=tuple(data["namespace"]),
            key=data["key"],
            value=data["value"],
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )


class BaseStore(ABC):
    """
    Opaque key-value store addressed by (namespace, key).

    Namespaces follow the ``("notes", assistant_id, thread_id)`` and
    ``("memories", assistant_id)`` conventions. Implementations wrap their
    I/O failures in ``StoreError``.
    """

    async def initialize(self) -> None:
        """Prepare the backend (create directories, open connections)."""

    async def close(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def get(self, namespace: Sequence[str], key: str) -> StoreItem | None:
        """
        Fetch an item.

        Args:
            namespace: Namespace path segments
            key: Key within the namespace

        Returns:
            The stored item or None if absent

        Raises:
            StoreError: If the backend cannot be read
        """
        ...

    @abstractmethod
    async def put(self, namespace: Sequence[str], key: str, value: dict[str, Any]) -> None:
        """
        Create or replace an item.

        Args:
            namespace: Namespace path segments
            key: Key within the namespace
            value: JSON-serializable mapping

        Raises:
            StoreError: If the backend cannot be written
        """
        ...
