"""Tests for the note taker and suggest changes graphs."""

import json

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from cowrite.agents.note_taker import (
    LLMNotesGenerator,
    create_note_taker_graph,
    format_messages,
)
from cowrite.agents.suggest_changes import (
    LLMSuggestionGenerator,
    create_suggest_changes_graph,
    format_reflections,
    last_human_message,
)
from cowrite.artifacts.models import Artifact, Suggestion
from cowrite.core.exceptions import AgentError, PreconditionError
from cowrite.notes.accumulator import NotesAccumulator
from cowrite.notes.models import NotesRecord
from cowrite.store.memory import InMemoryStore
from cowrite.utils.providers.base import BaseLLMProvider, CompletionRequest, LLMResponse
from cowrite.utils.structured_llm import StructuredLLMCaller

from tests.factories import FakeNotesGenerator, FakeSuggestionGenerator


class ScriptedProvider(BaseLLMProvider):
    """Provider replaying canned completions."""

    name = "scripted"

    def __init__(self, outputs: list[str]):
        self.outputs = list(outputs)
        self.prompts: list[str] = []

    async def _send(self, request: CompletionRequest) -> LLMResponse:
        self.prompts.append(request.prompt)
        return LLMResponse(content=self.outputs.pop(0), model=request.model)


def scripted_caller(*outputs: str) -> tuple[StructuredLLMCaller, ScriptedProvider]:
    provider = ScriptedProvider(list(outputs))
    return StructuredLLMCaller(provider, max_retries=2), provider


CONFIG = {"configurable": {"assistant_id": "asst", "thread_id": "thr"}}


class TestFormatting:
    """Tests for prompt formatting helpers."""

    def test_format_messages(self) -> None:
        text = format_messages([HumanMessage(content="hi"), AIMessage(content="hello")])
        assert text == "<human>\nhi\n</human>\n\n<ai>\nhello\n</ai>"

    def test_format_reflections(self) -> None:
        assert format_reflections(None) == "No reflections found."
        text = format_reflections({"styleRules": ["Be brief"], "content": ["Likes cats"]})
        assert "- Be brief" in text
        assert "- Likes cats" in text

    def test_last_human_message(self) -> None:
        messages = [HumanMessage(content="one"), AIMessage(content="x"), HumanMessage(content="two")]
        assert last_human_message(messages) == "two"
        assert last_human_message([AIMessage(content="x")]) is None


class TestNoteTakerGraph:
    """Tests for the note taker graph."""

    @pytest.mark.asyncio
    async def test_stores_notes(self, cat_artifact: Artifact) -> None:
        store = InMemoryStore()
        generator = FakeNotesGenerator(NotesRecord(style_notes=("Plain words",)))
        graph = create_note_taker_graph(NotesAccumulator(store, generator))

        result = await graph.ainvoke(
            {"messages": [HumanMessage(content="Keep it plain")], "artifact": cat_artifact},
            config=CONFIG,
        )

        assert result["stored_successfully"] is True
        assert result["notes"].style_notes == ("Plain words",)
        assert (await store.get(("notes", "asst", "thr"), "ghostwriter_notes")) is not None

    @pytest.mark.asyncio
    async def test_missing_thread_id(self) -> None:
        graph = create_note_taker_graph(NotesAccumulator(InMemoryStore(), FakeNotesGenerator()))

        with pytest.raises(PreconditionError):
            await graph.ainvoke(
                {"messages": [HumanMessage(content="hi")]},
                config={"configurable": {"assistant_id": "asst"}},
            )

    @pytest.mark.asyncio
    async def test_llm_generator_retries_with_feedback(self, cat_artifact: Artifact) -> None:
        caller, provider = scripted_caller(
            "not json at all",
            json.dumps({"goals_notes": ["Finish the story"], "style_notes": []}),
        )
        generator = LLMNotesGenerator(caller=caller, model="haiku", temperature=0)

        notes = await generator.generate([HumanMessage(content="hi")], cat_artifact, None)

        assert notes.goals_notes == ("Finish the story",)
        assert "PREVIOUS ATTEMPT FAILED" in provider.prompts[1]
        assert "The cat sat." in provider.prompts[0]

    @pytest.mark.asyncio
    async def test_llm_generator_without_artifact(self) -> None:
        caller, provider = scripted_caller(json.dumps({"ideas_notes": ["A heist"]}))

        notes = await LLMNotesGenerator(caller=caller).generate(
            [HumanMessage(content="hi")], None, NotesRecord(goals_notes=("Win",))
        )

        assert notes.ideas_notes == ("A heist",)
        assert "No artifact yet." in provider.prompts[0]
        assert "- Win" in provider.prompts[0]

    @pytest.mark.asyncio
    async def test_llm_generator_gives_up(self) -> None:
        caller, _ = scripted_caller("nope", "still nope")
        generator = LLMNotesGenerator(caller=caller)

        with pytest.raises(AgentError):
            await generator.generate([], None, None)


class TestSuggestChangesGraph:
    """Tests for the suggest changes graph."""

    @pytest.mark.asyncio
    async def test_attaches_batch(self, cat_artifact: Artifact) -> None:
        store = InMemoryStore()
        await store.put(("memories", "asst"), "reflection", {"styleRules": ["No slang"], "content": []})
        batch = [Suggestion(prev_text="sat", suggested_text="stood", description="Stronger verb")]
        generator = FakeSuggestionGenerator(batch)
        graph = create_suggest_changes_graph(store, generator)

        result = await graph.ainvoke(
            {"messages": [HumanMessage(content="Make it punchier")], "artifact": cat_artifact},
            config=CONFIG,
        )

        assert result["artifact"].contents[0].suggested_changes == tuple(batch)
        assert generator.calls[0]["human_message"] == "Make it punchier"
        assert "No slang" in generator.calls[0]["reflections"]
        assert generator.calls[0]["content_text"] == "The cat sat."

    @pytest.mark.asyncio
    async def test_without_reflections(self, cat_artifact: Artifact) -> None:
        generator = FakeSuggestionGenerator([])
        graph = create_suggest_changes_graph(InMemoryStore(), generator)

        await graph.ainvoke(
            {"messages": [HumanMessage(content="go")], "artifact": cat_artifact},
            config=CONFIG,
        )

        assert generator.calls[0]["reflections"] == "No reflections found."

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "state,config",
        [
            ({"messages": [HumanMessage(content="go")]}, CONFIG),
            ({"messages": [AIMessage(content="done")], "artifact": None}, CONFIG),
            ({"messages": [HumanMessage(content="go")]}, {"configurable": {}}),
        ],
    )
    async def test_preconditions(self, state, config) -> None:
        graph = create_suggest_changes_graph(InMemoryStore(), FakeSuggestionGenerator())

        with pytest.raises(PreconditionError):
            await graph.ainvoke(state, config=config)

    @pytest.mark.asyncio
    async def test_generator_failure(self, cat_artifact: Artifact) -> None:
        graph = create_suggest_changes_graph(
            InMemoryStore(), FakeSuggestionGenerator(error=RuntimeError("down"))
        )

        with pytest.raises(AgentError):
            await graph.ainvoke(
                {"messages": [HumanMessage(content="go")], "artifact": cat_artifact},
                config=CONFIG,
            )

    @pytest.mark.asyncio
    async def test_llm_suggestion_generator(self) -> None:
        caller, provider = scripted_caller(
            '```json\n{"suggestions": [{"prevText": "cat", "suggestedText": "dog"}]}\n```'
        )

        suggestions = await LLMSuggestionGenerator(caller=caller).generate(
            "The cat sat.", "No reflections found.", "Swap the animal"
        )

        assert suggestions == [Suggestion(prev_text="cat", suggested_text="dog")]
        assert "Swap the animal" in provider.prompts[0]
