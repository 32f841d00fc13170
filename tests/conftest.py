"""Pytest fixtures for testing."""

import pytest

from cowrite.artifacts.models import (
    Artifact,
    BoardContent,
    CodeContent,
    ProgrammingLanguage,
    Suggestion,
)
from cowrite.config.settings import Settings
from cowrite.store.memory import InMemoryStore

from tests.factories import make_artifact, make_text


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        anthropic_api_key="test-key",
        log_level="DEBUG",
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def cat_artifact() -> Artifact:
    """Single text version with one pending suggestion."""
    return make_artifact(
        make_text("The cat sat.", [Suggestion(prev_text="cat", suggested_text="dog")])
    )


@pytest.fixture
def three_versions() -> Artifact:
    """Text, code and board versions with the last one selected."""
    return make_artifact(
        make_text("First draft", index=1),
        CodeContent(index=2, title="Script", code="print('hi')", language=ProgrammingLanguage.PYTHON),
        BoardContent(
            index=3,
            title="Board",
            board='{"title":"A","content":"a","x":0,"y":0,"color":"red"}',
        ),
    )
