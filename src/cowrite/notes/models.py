"""Categorized notes accumulated per (assistant, thread)."""

from typing import Iterable

from pydantic import field_validator

from cowrite.artifacts.models import CowriteModel


NOTE_CATEGORIES = ("goals_notes", "style_notes", "ideas_notes", "structure_notes")


def dedupe(items: Iterable[str]) -> tuple[str, ...]:
    """Drop exact duplicates, keeping the first occurrence."""
    return tuple(dict.fromkeys(items))


class NotesRecord(CowriteModel):
    """Four insertion-ordered, duplicate-free note lists."""

    goals_notes: tuple[str, ...] = ()
    style_notes: tuple[str, ...] = ()
    ideas_notes: tuple[str, ...] = ()
    structure_notes: tuple[str, ...] = ()

    @field_validator(*NOTE_CATEGORIES, mode="after")
    @classmethod
    def _unique(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return dedupe(value)

    def is_empty(self) -> bool:
        return not any(getattr(self, category) for category in NOTE_CATEGORIES)

    def format_sections(self) -> str:
        """Render the notes as markdown sections for a prompt."""
        if self.is_empty():
            return "No existing notes found."

        sections = []
        for heading, items in (
            ("Goals", self.goals_notes),
            ("Style Notes", self.style_notes),
            ("Ideas", self.ideas_notes),
            ("Structure", self.structure_notes),
        ):
            body = "\n".join(f"- {item}" for item in items) or "- (none)"
            sections.append(f"# {heading}\n{body}")
        return "\n\n".join(sections)
