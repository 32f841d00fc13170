"""FastAPI dependency injection."""

from typing import Annotated

from fastapi import Depends, Request

from cowrite.config.settings import Settings, get_settings
from cowrite.notes.accumulator import NotesAccumulator
from cowrite.store.base import BaseStore


def get_app_settings() -> Settings:
    """Get application settings."""
    return get_settings()


async def get_store(request: Request) -> BaseStore:
    """Get the key-value store from application state."""
    return request.app.state.store


async def get_notes_accumulator(request: Request) -> NotesAccumulator:
    """
    Get the shared notes accumulator.

    It is shared across requests so merges for the same conversation are
    serialized by its per-key locks.
    """
    return request.app.state.notes_accumulator


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
StoreDep = Annotated[BaseStore, Depends(get_store)]
NotesAccumulatorDep = Annotated[NotesAccumulator, Depends(get_notes_accumulator)]
