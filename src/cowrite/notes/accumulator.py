"""Notes accumulator.

Merges note fragments produced by the note-taking agent into the record
persisted for an (assistant, thread) pair. The persisted record is the only
state shared across sessions, so every write goes through ``merge_notes``
followed by a single put.
"""

import asyncio
import weakref
from datetime import datetime, timezone
from typing import Any, Protocol, Sequence

from pydantic import ValidationError

from cowrite.artifacts.models import Artifact
from cowrite.core.exceptions import (
    AgentError,
    ExternalCollaboratorError,
    PreconditionError,
    StoreError,
)
from cowrite.notes.models import NOTE_CATEGORIES, NotesRecord
from cowrite.store.base import BaseStore, Namespace
from cowrite.utils.logging import get_logger


logger = get_logger(__name__)


NOTES_NAMESPACE = "notes"
NOTES_KEY = "ghostwriter_notes"


def merge_notes(existing: NotesRecord | None, incoming: NotesRecord) -> NotesRecord:
    """Concatenate each category and drop duplicates, first occurrence wins."""
    if existing is None:
        existing = NotesRecord()
    # NotesRecord deduplicates on validation
    return NotesRecord(
        **{
            category: getattr(existing, category) + getattr(incoming, category)
            for category in NOTE_CATEGORIES
        }
    )


class NotesGenerator(Protocol):
    """Agent that distills a conversation into a notes fragment."""

    async def generate(
        self,
        messages: Sequence[Any],
        artifact: Artifact | None,
        existing: NotesRecord | None,
    ) -> NotesRecord:
        ...


class NotesAccumulator:
    """
    Loads, merges and stores notes for (assistant_id, thread_id).

    Merges for the same key are serialized within this process. Writers in
    other processes can still race; the store keeps the last write.
    """

    def __init__(self, store: BaseStore, generator: NotesGenerator | None = None):
        """
        Args:
            store: Key-value store holding the notes records
            generator: Note-taking agent, required only by ``take_notes``
        """
        self.store = store
        self.generator = generator
        # Entries vanish once no merge holds or waits on the lock
        self._locks: weakref.WeakValueDictionary[Namespace, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    @staticmethod
    def notes_key(assistant_id: str | None, thread_id: str | None) -> tuple[Namespace, str]:
        """
        Store address of the notes for a conversation.

        Raises:
            PreconditionError: If either identifier is missing
        """
        if not assistant_id:
            raise PreconditionError("Missing assistant_id", field="assistant_id")
        if not thread_id:
            raise PreconditionError("Missing thread_id", field="thread_id")
        return (NOTES_NAMESPACE, assistant_id, thread_id), NOTES_KEY

    def _lock_for(self, namespace: Namespace) -> asyncio.Lock:
        lock = self._locks.get(namespace)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[namespace] = lock
        return lock

    async def load(self, assistant_id: str, thread_id: str) -> NotesRecord | None:
        namespace, key = self.notes_key(assistant_id, thread_id)
        item = await self.store.get(namespace, key)
        if item is None:
            return None
        try:
            return NotesRecord.model_validate(item.value)
        except ValidationError as e:
            raise StoreError(
                f"Stored notes are malformed: {e.error_count()} errors",
                namespace=namespace,
                key=key,
            ) from e

    async def merge_and_store(
        self,
        assistant_id: str,
        thread_id: str,
        incoming: NotesRecord,
        message_count: int = 0,
    ) -> NotesRecord:
        """Merge ``incoming`` into the stored record and persist the result."""
        namespace, key = self.notes_key(assistant_id, thread_id)
        async with self._lock_for(namespace):
            existing = await self.load(assistant_id, thread_id)
            merged = merge_notes(existing, incoming)
            value = {
                **merged.to_wire(),
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "messageCount": message_count,
            }
            await self.store.put(namespace, key, value)

        logger.info(
            "Notes stored",
            assistant_id=assistant_id,
            thread_id=thread_id,
            goals=len(merged.goals_notes),
            style=len(merged.style_notes),
            ideas=len(merged.ideas_notes),
            structure=len(merged.structure_notes),
        )
        return merged

    async def take_notes(
        self,
        assistant_id: str | None,
        thread_id: str | None,
        messages: Sequence[Any],
        artifact: Artifact | None = None,
    ) -> NotesRecord:
        """
        Run the note-taking agent and merge its fragment.

        Raises:
            PreconditionError: If an identifier is missing
            AgentError: If the generator fails; the stored record is untouched
            StoreError: If the store fails
        """
        self.notes_key(assistant_id, thread_id)
        if self.generator is None:
            raise AgentError("No notes generator configured", agent_name="note_taker")

        existing = await self.load(assistant_id, thread_id)
        try:
            fragment = await self.generator.generate(messages, artifact, existing)
        except ExternalCollaboratorError:
            raise
        except Exception as e:
            logger.error("Note generation failed", error=str(e))
            raise AgentError(f"Note generation failed: {e}", agent_name="note_taker") from e

        return await self.merge_and_store(
            assistant_id,
            thread_id,
            fragment,
            message_count=len(messages),
        )
