"""Tests for the HTTP API."""

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from cowrite.api.dependencies import get_notes_accumulator, get_store
from cowrite.artifacts.models import Artifact, BoardContent, Suggestion
from cowrite.main import create_app
from cowrite.notes.accumulator import NotesAccumulator
from cowrite.notes.models import NotesRecord
from cowrite.store.memory import InMemoryStore

from tests.factories import FakeNotesGenerator, make_artifact, make_text


@pytest.fixture
def api_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def generator() -> FakeNotesGenerator:
    return FakeNotesGenerator(NotesRecord(ideas_notes=("A twist ending",)))


@pytest.fixture
def client(api_store: InMemoryStore, generator: FakeNotesGenerator) -> Iterator[TestClient]:
    app = create_app()
    accumulator = NotesAccumulator(api_store, generator)
    app.dependency_overrides[get_store] = lambda: api_store
    app.dependency_overrides[get_notes_accumulator] = lambda: accumulator
    with TestClient(app) as test_client:
        yield test_client


def wire(artifact: Artifact) -> dict:
    return artifact.to_wire()


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestStoreProxy:
    """Tests for the store endpoints."""

    def test_put_then_get(self, client: TestClient) -> None:
        body = {"namespace": ["memories", "asst"], "key": "reflection", "value": {"content": ["x"]}}

        assert client.post("/api/v1/store/put", json=body).json() == {"success": True}
        item = client.post(
            "/api/v1/store/get", json={"namespace": ["memories", "asst"], "key": "reflection"}
        ).json()["item"]

        assert item["value"] == {"content": ["x"]}
        assert "createdAt" in item

    def test_get_missing(self, client: TestClient) -> None:
        response = client.post("/api/v1/store/get", json={"namespace": ["x"], "key": "y"})
        assert response.json() == {"item": None}


class TestNotes:
    """Tests for the notes endpoints."""

    def test_take_then_read(self, client: TestClient, generator: FakeNotesGenerator) -> None:
        response = client.post(
            "/api/v1/notes/take",
            json={
                "assistantId": "asst",
                "threadId": "thr",
                "messages": [{"type": "human", "content": "Add a twist"}],
            },
        )

        assert response.status_code == 200
        assert response.json()["notes"]["ideasNotes"] == ["A twist ending"]
        assert generator.calls[0]["messages"] == [{"type": "human", "content": "Add a twist"}]

        stored = client.get("/api/v1/notes/asst/thr").json()
        assert stored["notes"]["ideasNotes"] == ["A twist ending"]

    def test_missing_thread_is_422(self, client: TestClient) -> None:
        response = client.post("/api/v1/notes/take", json={"assistantId": "asst", "messages": []})

        assert response.status_code == 422
        assert response.json() == {
            "error_code": "precondition_failed",
            "error_message": "Missing thread_id",
            "recoverable": False,
        }

    def test_agent_failure_is_502(self, client: TestClient, generator: FakeNotesGenerator) -> None:
        generator.error = RuntimeError("model unavailable")

        response = client.post(
            "/api/v1/notes/take", json={"assistantId": "a", "threadId": "t", "messages": []}
        )

        assert response.status_code == 502
        assert response.json()["error_code"] == "agent_failure"
        assert response.json()["recoverable"] is True

    def test_unknown_notes(self, client: TestClient) -> None:
        assert client.get("/api/v1/notes/a/none").json() == {"notes": None}


class TestArtifacts:
    """Tests for the artifact endpoints."""

    def test_current_falls_back_to_last(self, client: TestClient) -> None:
        artifact = make_artifact(make_text("one", index=1), make_text("two", index=2), current_index=9)

        body = client.post("/api/v1/artifacts/current", json={"artifact": wire(artifact)}).json()

        assert body["kind"] == "text"
        assert body["plainText"] == "two"

    def test_append_and_navigate(self, client: TestClient) -> None:
        artifact = make_artifact(make_text("one"))

        appended = client.post(
            "/api/v1/artifacts/append",
            json={"artifact": wire(artifact), "content": make_text("two", index=1).to_wire()},
        ).json()["artifact"]
        assert appended["currentIndex"] == 2

        navigated = client.post(
            "/api/v1/artifacts/navigate",
            json={"artifact": appended, "direction": "back"},
        ).json()
        assert navigated["artifact"]["currentIndex"] == 1
        assert navigated["canGoForward"] is True
        assert navigated["canGoBack"] is False

    def test_annotate(self, client: TestClient) -> None:
        body = client.post(
            "/api/v1/artifacts/annotate",
            json={"text": "A B C", "suggestions": [
                {"prevText": "C", "suggestedText": "Z"},
                {"prevText": "A", "suggestedText": "X"},
            ]},
        ).json()

        assert body["order"] == [1, 0]
        assert body["positions"][0]["offset"] == 4

    def test_apply_suggestion(self, client: TestClient, cat_artifact: Artifact) -> None:
        body = client.post(
            "/api/v1/artifacts/suggestions/apply",
            json={"artifact": wire(cat_artifact), "index": 0},
        ).json()

        assert body["outcome"] == "applied"
        assert body["artifact"]["contents"][0]["fullMarkdown"] == "The dog sat."
        assert body["artifact"]["contents"][0]["suggestedChanges"] == []

    def test_attach_suggestions(self, client: TestClient, cat_artifact: Artifact) -> None:
        suggestion = Suggestion(prev_text="sat", suggested_text="stood")

        body = client.post(
            "/api/v1/artifacts/suggestions/attach",
            json={"artifact": wire(cat_artifact), "suggestions": [suggestion.to_wire()]},
        ).json()

        assert body["artifact"]["contents"][0]["suggestedChanges"][0]["prevText"] == "sat"

    def test_board_move(self, client: TestClient) -> None:
        board = '{"title":"a","content":"b","x":0,"y":0,"color":"red"}'
        artifact = make_artifact(BoardContent(index=1, title="b", board=board))

        ok = client.post(
            "/api/v1/artifacts/board/move",
            json={"artifact": wire(artifact), "noteIndex": 0, "x": 5, "y": 6},
        )
        bad = client.post(
            "/api/v1/artifacts/board/move",
            json={"artifact": wire(artifact), "noteIndex": 3, "x": 5, "y": 6},
        )

        assert ok.json()["artifact"]["contents"][0]["board"] == (
            '{"title":"a","content":"b","x":5,"y":6,"color":"red"}'
        )
        assert bad.status_code == 422

    def test_layout(self, client: TestClient) -> None:
        body = client.post(
            "/api/v1/artifacts/layout",
            json={"cards": [
                {"index": 0, "desiredY": 100, "measuredHeight": 50},
                {"index": 1, "desiredY": 110, "measuredHeight": 50},
            ]},
        ).json()

        assert body["tops"] == [100, 174]
