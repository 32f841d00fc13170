"""Suggestion rendering, reconciliation and card layout."""

from cowrite.suggestions.annotate import (
    AnnotatedText,
    MarkerFormat,
    SuggestionPosition,
    annotate,
)
from cowrite.suggestions.engine import (
    ApplyOutcome,
    ApplyResult,
    SuggestionPhase,
    SuggestionReconciler,
    apply_suggestion,
    apply_to_text,
    attach_suggestions,
    remove_suggestion,
)
from cowrite.suggestions.layout import (
    CardMetrics,
    LayoutConfig,
    desired_positions,
    layout_cards,
)

__all__ = [
    "AnnotatedText",
    "MarkerFormat",
    "SuggestionPosition",
    "annotate",
    "ApplyOutcome",
    "ApplyResult",
    "SuggestionPhase",
    "SuggestionReconciler",
    "apply_suggestion",
    "apply_to_text",
    "attach_suggestions",
    "remove_suggestion",
    "CardMetrics",
    "LayoutConfig",
    "desired_positions",
    "layout_cards",
]
