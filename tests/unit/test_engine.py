"""Tests for the suggestion reconciliation engine."""

import pytest

from cowrite.artifacts.models import Artifact, BoardContent, Suggestion
from cowrite.suggestions.annotate import annotate
from cowrite.suggestions.engine import (
    ApplyOutcome,
    SuggestionPhase,
    SuggestionReconciler,
    apply_suggestion,
    apply_to_text,
    attach_suggestions,
    remove_suggestion,
)

from tests.factories import make_artifact, make_text


A = Suggestion(prev_text="A", suggested_text="X")
C = Suggestion(prev_text="C", suggested_text="Z")


class TestApplyToText:
    """Tests for apply_to_text."""

    def test_first_occurrence_only(self) -> None:
        assert apply_to_text("a a a", Suggestion(prev_text="a", suggested_text="b")) == (
            "b a a",
            True,
        )

    def test_absent_or_empty(self) -> None:
        assert apply_to_text("abc", Suggestion(prev_text="z", suggested_text="y")) == ("abc", False)
        assert apply_to_text("abc", Suggestion(prev_text="", suggested_text="y")) == ("abc", False)


class TestRemoveSuggestion:
    """Tests for remove_suggestion."""

    def test_by_position_keeps_duplicates(self) -> None:
        assert remove_suggestion([A, A, C], 0) == (A, C)

    def test_by_value_removes_duplicates(self) -> None:
        assert remove_suggestion([A, C, A], 0, match_by_value=True) == (C,)

    def test_out_of_range(self) -> None:
        assert remove_suggestion([A], 3) == (A,)


class TestApplySuggestion:
    """Tests for apply_suggestion."""

    def test_cat_becomes_dog(self, cat_artifact: Artifact) -> None:
        result = apply_suggestion(cat_artifact, 0)

        current = result.artifact.contents[0]
        assert result.outcome is ApplyOutcome.APPLIED
        assert current.full_markdown == "The dog sat."
        assert current.suggested_changes == ()
        assert cat_artifact.contents[0].full_markdown == "The cat sat."

    def test_stale_suggestion_removed_text_unchanged(self) -> None:
        artifact = make_artifact(
            make_text("The cat sat.", [Suggestion(prev_text="zebra", suggested_text="horse")])
        )

        result = apply_suggestion(artifact, 0)

        assert result.outcome is ApplyOutcome.STALE
        assert result.artifact.contents[0].full_markdown == "The cat sat."
        assert result.artifact.contents[0].suggested_changes == ()

    def test_applying_second_keeps_first_locatable(self) -> None:
        artifact = make_artifact(make_text("A B C", [A, C]))

        after = apply_suggestion(artifact, 1).artifact
        content = after.contents[0]
        rendered = annotate(content.full_markdown, content.suggested_changes)

        assert content.full_markdown == "A B Z"
        assert content.suggested_changes == (A,)
        assert rendered.positions[0].offset == 0
        assert rendered.positions[0].rendered

    def test_next_annotate_sees_one_fewer(self) -> None:
        text = "one two three"
        s0 = Suggestion(prev_text="two", suggested_text="2")
        s1 = Suggestion(prev_text="three", suggested_text="3")
        artifact = make_artifact(make_text(text, [s0, s1]))
        offset = annotate(text, [s0, s1]).positions[0].offset

        content = apply_suggestion(artifact, 0).artifact.contents[0]

        assert len(annotate(content.full_markdown, content.suggested_changes).positions) == 1
        assert content.full_markdown[offset:offset + 1] == "2"

    def test_duplicate_pairs_by_mode(self) -> None:
        artifact = make_artifact(make_text("A A", [A, A]))

        by_position = apply_suggestion(artifact, 0).artifact.contents[0]
        by_value = apply_suggestion(artifact, 0, match_by_value=True).artifact.contents[0]

        assert by_position.suggested_changes == (A,)
        assert by_value.suggested_changes == ()
        assert by_position.full_markdown == "X A"

    def test_disabled_cases(self, cat_artifact: Artifact) -> None:
        board = make_artifact(BoardContent(index=1, title="b", board=""))

        assert apply_suggestion(cat_artifact, 0, is_streaming=True).outcome is ApplyOutcome.DISABLED
        assert apply_suggestion(cat_artifact, 5).artifact is cat_artifact
        assert apply_suggestion(board, 0).outcome is ApplyOutcome.DISABLED

    def test_only_current_version_changes(self) -> None:
        artifact = make_artifact(
            make_text("The cat sat.", index=1),
            make_text("The cat ran.", [Suggestion(prev_text="cat", suggested_text="dog")], index=2),
        )

        result = apply_suggestion(artifact, 0).artifact

        assert result.contents[0] == artifact.contents[0]
        assert result.contents[1].full_markdown == "The dog ran."


class TestAttachSuggestions:
    """Tests for attach_suggestions."""

    def test_replaces_pending_list(self, cat_artifact: Artifact) -> None:
        result = attach_suggestions(cat_artifact, [A, C])
        assert result.contents[0].suggested_changes == (A, C)

    def test_ignored_for_board(self) -> None:
        board = make_artifact(BoardContent(index=1, title="b", board=""))
        assert attach_suggestions(board, [A]) is board


class TestSuggestionReconciler:
    """Tests for the selection state machine."""

    @pytest.fixture
    def reconciler(self) -> SuggestionReconciler:
        return SuggestionReconciler()

    @pytest.fixture
    def artifact(self) -> Artifact:
        return make_artifact(make_text("A B C", [A, C]))

    def test_phases(self, reconciler: SuggestionReconciler, artifact: Artifact) -> None:
        assert reconciler.phase(make_artifact(make_text("x"))) is SuggestionPhase.IDLE
        assert reconciler.phase(artifact) is SuggestionPhase.PENDING

        reconciler.select(artifact, 1)

        assert reconciler.phase(artifact) is SuggestionPhase.SELECTED
        assert reconciler.selected_index(artifact) == 1

    def test_deselect_keeps_text(self, reconciler: SuggestionReconciler, artifact: Artifact) -> None:
        reconciler.select(artifact, 0)
        reconciler.deselect()
        assert reconciler.phase(artifact) is SuggestionPhase.PENDING

    def test_select_twice_applies(self, reconciler: SuggestionReconciler, artifact: Artifact) -> None:
        artifact = reconciler.select(artifact, 0)
        artifact = reconciler.select(artifact, 0)

        assert artifact.contents[0].full_markdown == "X B C"
        assert reconciler.phase(artifact) is SuggestionPhase.PENDING

    def test_apply_last_goes_idle(self, reconciler: SuggestionReconciler, cat_artifact: Artifact) -> None:
        reconciler.select(cat_artifact, 0)

        result = reconciler.apply(cat_artifact, 0)

        assert reconciler.phase(result.artifact) is SuggestionPhase.IDLE

    def test_out_of_range_select_ignored(self, reconciler: SuggestionReconciler, artifact: Artifact) -> None:
        reconciler.select(artifact, 9)
        assert reconciler.phase(artifact) is SuggestionPhase.PENDING

    def test_shrinking_list_drops_selection(self, reconciler: SuggestionReconciler, artifact: Artifact) -> None:
        reconciler.select(artifact, 1)

        shrunk = attach_suggestions(artifact, [A])

        assert reconciler.selected_index(shrunk) is None
        assert reconciler.phase(shrunk) is SuggestionPhase.PENDING

    def test_apply_while_streaming_keeps_selection(
        self, reconciler: SuggestionReconciler, artifact: Artifact
    ) -> None:
        reconciler.select(artifact, 0)

        result = reconciler.apply(artifact, 0, is_streaming=True)

        assert result.artifact is artifact
        assert reconciler.selected_index(artifact) == 0
