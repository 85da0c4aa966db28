"""Card normalisation and quality filtering."""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from .models import DropCounts, NormalizedCard, PartialCard, RawCard

LOGGER = logging.getLogger(__name__)

_DISH_TYPE_MARKER = "Dish"
_MISSING = (None, "")


def _dig(node: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def _require_mapping(value: Any, label: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(f"{label} is {type(value).__name__}, expected an object")
    return value


def read_partial_card(raw: RawCard) -> Optional[PartialCard]:
    """Read the fields we care about from a raw card.

    Returns ``None`` for cards that are not dish listings. Raises
    ``TypeError`` when the card claims to be a dish but its structure is
    unusable.
    """

    body = _dig(raw, "card", "card")
    card_type = _dig(body, "@type")
    if not card_type or _DISH_TYPE_MARKER not in card_type:
        return None
    info = _dig(body, "info")
    restaurant = _dig(body, "restaurant", "info")
    if not info or not restaurant:
        return None
    info = _require_mapping(info, "info")
    restaurant = _require_mapping(restaurant, "restaurant.info")

    rating = _dig(info, "ratings", "aggregatedRating")
    return PartialCard(
        restaurant_name=restaurant.get("name"),
        image_id=info.get("imageId"),
        price=info.get("price"),
        locality=restaurant.get("locality"),
        delivery_time=_dig(restaurant, "sla", "deliveryTime"),
        avg_rating_restaurant=restaurant.get("avgRating"),
        aggregated_rating=_dig(rating, "rating"),
        rating_count=_dig(rating, "ratingCount"),
        rating_count_v2=_dig(rating, "ratingCountV2"),
        last_mile_travel=_dig(restaurant, "sla", "lastMileTravel"),
    )


def _or_default(value: Any, default: Any) -> Any:
    return default if value in _MISSING else value


def fill_defaults(partial: PartialCard) -> NormalizedCard:
    """Apply the default policy: empty string for text, zero for numbers."""

    return NormalizedCard(
        restaurant_name=str(_or_default(partial.restaurant_name, "")),
        image_id=str(_or_default(partial.image_id, "")),
        price=_or_default(partial.price, 0),
        locality=str(_or_default(partial.locality, "")),
        delivery_time=_or_default(partial.delivery_time, ""),
        avg_rating_restaurant=_or_default(partial.avg_rating_restaurant, ""),
        aggregated_rating=_or_default(partial.aggregated_rating, 0),
        rating_count=_or_default(partial.rating_count, 0),
        rating_count_v2=_or_default(partial.rating_count_v2, 0),
        last_mile_travel=_or_default(partial.last_mile_travel, 0),
    )


def _is_present(value: Any) -> bool:
    if value in _MISSING or value is False:
        return False
    if isinstance(value, str):
        return value.strip() not in {"", "0"}
    return value != 0


def has_complete_rating(card: NormalizedCard) -> bool:
    return (
        _is_present(card.aggregated_rating)
        and _is_present(card.rating_count)
        and _is_present(card.rating_count_v2)
    )


def normalise_cards(raw_cards: Iterable[RawCard], drops: DropCounts) -> List[NormalizedCard]:
    """Map raw cards to normalised ones, skipping non-dish and broken cards."""

    normalised: List[NormalizedCard] = []
    for index, raw in enumerate(raw_cards):
        drops.total += 1
        try:
            partial = read_partial_card(raw)
            if partial is None:
                drops.not_dish += 1
                continue
            normalised.append(fill_defaults(partial))
        except (TypeError, ValueError, AttributeError) as exc:
            drops.malformed += 1
            LOGGER.debug("Skipping malformed card #%d: %s", index, exc)
    return normalised


def filter_rated(cards: Iterable[NormalizedCard], drops: DropCounts) -> List[NormalizedCard]:
    """Keep only cards carrying a rating, a rating count and a v2 rating count."""

    kept: List[NormalizedCard] = []
    for card in cards:
        if has_complete_rating(card):
            kept.append(card)
        else:
            drops.unrated += 1
    return kept


def prepare_cards(raw_cards: Iterable[RawCard]) -> Tuple[List[NormalizedCard], DropCounts]:
    """Full processing pipeline returning usable cards and drop counts."""

    drops = DropCounts()
    cards = filter_rated(normalise_cards(raw_cards, drops), drops)
    drops.kept = len(cards)
    LOGGER.info(
        "Kept %d of %d cards (not dish: %d, malformed: %d, unrated: %d)",
        drops.kept,
        drops.total,
        drops.not_dish,
        drops.malformed,
        drops.unrated,
    )
    return cards, drops
