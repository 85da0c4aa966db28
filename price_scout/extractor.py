"""Locate the dish cards inside the search API payload.

The payload nests the dish list inside a list of heterogeneous card
groups whose position moves between releases, so extraction is a list
of strategies tried in order.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, NamedTuple, Optional, Sequence

from .models import RawCard

LOGGER = logging.getLogger(__name__)

_PRIMARY_GROUP_INDEX = 1


class ExtractionStrategy(NamedTuple):
    name: str
    locate: Callable[[Any], Optional[List[RawCard]]]


def _top_level_cards(payload: Any) -> Optional[list]:
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if not isinstance(data, dict):
        return None
    cards = data.get("cards")
    return cards if isinstance(cards, list) else None


def _dish_cards(group: Any) -> Optional[List[RawCard]]:
    """Return ``groupedCard.cardGroupMap.DISH.cards`` if ``group`` has it."""

    if not isinstance(group, dict):
        return None
    node: Any = group
    for key in ("groupedCard", "cardGroupMap", "DISH", "cards"):
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node if isinstance(node, list) else None


def locate_fixed_path(payload: Any) -> Optional[List[RawCard]]:
    cards = _top_level_cards(payload)
    if cards is None or len(cards) <= _PRIMARY_GROUP_INDEX:
        return None
    return _dish_cards(cards[_PRIMARY_GROUP_INDEX])


def locate_by_scan(payload: Any) -> Optional[List[RawCard]]:
    for group in _top_level_cards(payload) or []:
        found = _dish_cards(group)
        if found is not None:
            return found
    return None


DEFAULT_STRATEGIES: Sequence[ExtractionStrategy] = (
    ExtractionStrategy("fixed_path", locate_fixed_path),
    ExtractionStrategy("scan_fallback", locate_by_scan),
)


def extract_cards(
    payload: Any, strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES
) -> List[RawCard]:
    """Return the dish card array, or an empty list when none is present."""

    for strategy in strategies:
        cards = strategy.locate(payload)
        if cards is not None:
            LOGGER.debug("Extracted %d cards via %s", len(cards), strategy.name)
            return cards
    LOGGER.info("No dish card group found in API payload")
    return []
