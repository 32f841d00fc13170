"""Key-value store backends."""

from cowrite.config.settings import Settings
from cowrite.store.base import BaseStore, Namespace, StoreItem
from cowrite.store.local import LocalFileStore
from cowrite.store.memory import InMemoryStore


def create_store(settings: Settings) -> BaseStore:
    """Build the backend selected by ``settings.store_backend``."""
    if settings.store_backend == "local":
        return LocalFileStore(settings.store_path)
    return InMemoryStore()


__all__ = [
    "BaseStore",
    "Namespace",
    "StoreItem",
    "InMemoryStore",
    "LocalFileStore",
    "create_store",
]
