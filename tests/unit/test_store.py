"""Tests for store backends."""

from pathlib import Path

import pytest

from cowrite.config.settings import Settings
from cowrite.store import InMemoryStore, LocalFileStore, create_store


class TestInMemoryStore:
    """Tests for InMemoryStore."""

    @pytest.mark.asyncio
    async def test_get_missing(self) -> None:
        assert await InMemoryStore().get(("notes", "a"), "k") is None

    @pytest.mark.asyncio
    async def test_put_then_get(self) -> None:
        store = InMemoryStore()

        await store.put(["notes", "a"], "k", {"v": [1]})
        item = await store.get(("notes", "a"), "k")

        assert item.value == {"v": [1]}
        assert item.namespace == ("notes", "a")

    @pytest.mark.asyncio
    async def test_values_are_copied(self) -> None:
        store = InMemoryStore()
        value = {"v": [1]}

        await store.put(("n",), "k", value)
        value["v"].append(2)
        item = await store.get(("n",), "k")
        item.value["v"].append(3)

        assert (await store.get(("n",), "k")).value == {"v": [1]}

    @pytest.mark.asyncio
    async def test_overwrite_keeps_created_at(self) -> None:
        store = InMemoryStore()
        await store.put(("n",), "k", {"v": 1})
        first = await store.get(("n",), "k")

        await store.put(("n",), "k", {"v": 2})
        second = await store.get(("n",), "k")

        assert second.created_at == first.created_at
        assert second.value == {"v": 2}


class TestLocalFileStore:
    """Tests for LocalFileStore."""

    @pytest.mark.asyncio
    async def test_round_trip(self, tmp_path: Path) -> None:
        store = LocalFileStore(str(tmp_path))
        await store.initialize()

        await store.put(("notes", "asst", "thread"), "ghostwriter_notes", {"goalsNotes": ["a"]})
        item = await store.get(("notes", "asst", "thread"), "ghostwriter_notes")

        assert item.value == {"goalsNotes": ["a"]}
        assert (tmp_path / "notes" / "asst" / "thread" / "ghostwriter_notes.json").exists()

    @pytest.mark.asyncio
    async def test_missing_item(self, tmp_path: Path) -> None:
        assert await LocalFileStore(str(tmp_path)).get(("x",), "y") is None

    @pytest.mark.asyncio
    async def test_no_temp_files_left(self, tmp_path: Path) -> None:
        store = LocalFileStore(str(tmp_path))

        await store.put(("n",), "k", {"v": 1})
        await store.put(("n",), "k", {"v": 2})

        assert [p.name for p in (tmp_path / "n").iterdir()] == ["k.json"]
        assert (await store.get(("n",), "k")).value == {"v": 2}

    @pytest.mark.asyncio
    async def test_segments_cannot_escape_base(self, tmp_path: Path) -> None:
        store = LocalFileStore(str(tmp_path / "base"))

        await store.put(("..", "a/b"), "k", {"v": 1})

        assert not (tmp_path / "a").exists()
        assert (await store.get(("..", "a/b"), "k")).value == {"v": 1}


class TestCreateStore:
    """Tests for create_store."""

    def test_memory_default(self) -> None:
        assert isinstance(create_store(Settings()), InMemoryStore)

    def test_local(self, tmp_path: Path) -> None:
        store = create_store(Settings(store_backend="local", store_path=str(tmp_path)))
        assert isinstance(store, LocalFileStore)
