"""Notes accumulated per conversation."""

from cowrite.notes.models import NOTE_CATEGORIES, NotesRecord, dedupe
from cowrite.notes.accumulator import (
    NOTES_KEY,
    NOTES_NAMESPACE,
    NotesAccumulator,
    NotesGenerator,
    merge_notes,
)

__all__ = [
    "NOTE_CATEGORIES",
    "NotesRecord",
    "dedupe",
    "NOTES_KEY",
    "NOTES_NAMESPACE",
    "NotesAccumulator",
    "NotesGenerator",
    "merge_notes",
]
