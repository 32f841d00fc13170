"""Positioning of suggestion cards beside the annotated text.

The layout is a pure function over explicit inputs: the desired top of
each card (its marker's rendered offset, supplied by the view layer) and
its measured height when known. Re-run it whenever the pending list, the
selection or the scroll position changes.
"""

from dataclasses import dataclass
from typing import Sequence

from cowrite.config.settings import Settings


@dataclass(frozen=True)
class LayoutConfig:
    """Spacing and height estimates in pixels."""

    spacing: float = 12.0
    base_estimate: float = 70.0
    details_estimate: float = 200.0
    measured_padding: float = 12.0
    anchor_offset: float = 10.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "LayoutConfig":
        return cls(
            spacing=settings.card_spacing,
            base_estimate=settings.card_base_height_estimate,
            details_estimate=settings.card_details_height_estimate,
            measured_padding=settings.card_measured_padding,
            anchor_offset=settings.card_anchor_offset,
        )


@dataclass(frozen=True)
class CardMetrics:
    index: int
    desired_y: float | None = None        # None when the marker was not measured
    measured_height: float | None = None  # None when the card was not measured


def desired_positions(
    marker_tops: Sequence[float | None],
    scroll_top: float,
    anchor_offset: float = LayoutConfig.anchor_offset,
) -> list[float | None]:
    """Convert marker tops relative to the container into desired card tops."""
    return [
        None if top is None else top + scroll_top - anchor_offset
        for top in marker_tops
    ]


def _desired(card: CardMetrics, config: LayoutConfig) -> float:
    if card.desired_y is not None:
        return card.desired_y
    return card.index * (config.base_estimate + config.spacing)


def _height(card: CardMetrics, selected: bool, config: LayoutConfig) -> float:
    if card.measured_height is not None:
        return card.measured_height + config.measured_padding
    if selected:
        return config.base_estimate + config.details_estimate
    return config.base_estimate


def layout_cards(
    cards: Sequence[CardMetrics],
    selected: int | None = None,
    config: LayoutConfig = LayoutConfig(),
) -> list[float]:
    """
    Compute the top of every card, returned in input order.

    Args:
        cards: One entry per pending suggestion
        selected: Index of the selected suggestion, if any
        config: Spacing and height estimates

    Returns:
        Card tops, one per entry of ``cards``
    """
    desired = {card.index: _desired(card, config) for card in cards}
    heights = {
        card.index: _height(card, card.index == selected, config) for card in cards
    }
    tops: dict[int, float] = {}

    if selected is not None and selected in desired:
        anchor = desired[selected]
        tops[selected] = anchor

        above = sorted(
            (c.index for c in cards if c.index != selected and desired[c.index] < anchor),
            key=lambda i: desired[i],
            reverse=True,
        )
        last_top = anchor
        for i in above:
            top = min(desired[i], last_top - heights[i] - config.spacing)
            tops[i] = top
            last_top = top

        below = sorted(
            (c.index for c in cards if c.index != selected and desired[c.index] >= anchor),
            key=lambda i: desired[i],
        )
        next_top = anchor + heights[selected] + config.spacing
        for i in below:
            top = max(desired[i], next_top)
            tops[i] = top
            next_top = top + heights[i] + config.spacing
    else:
        next_top = 0.0
        for i in sorted(desired, key=lambda i: desired[i]):
            top = max(desired[i], next_top)
            tops[i] = top
            next_top = top + heights[i] + config.spacing

    return [tops[card.index] for card in cards]
