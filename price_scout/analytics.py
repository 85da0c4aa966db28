"""Price statistics over normalised competitor cards."""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from .config import ScrapeSettings
from .models import AnalyticsResult, NormalizedCard, PriceSummary, TopCard


def _numeric(value: Any) -> Optional[float]:
    """Return ``value`` as a float when it is a real number, else ``None``."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return float(value)


def _parse_rating(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        rating = float(str(value).strip())
    except ValueError:
        return None
    if math.isnan(rating) or math.isinf(rating):
        return None
    return rating


def cards_to_dataframe(cards: Sequence[NormalizedCard]) -> pd.DataFrame:
    """Tabulate the numeric views of each card, indexed by position."""

    records: List[Dict[str, Any]] = []
    for card in cards:
        price = _numeric(card.price)
        rating = _parse_rating(card.aggregated_rating)
        records.append(
            {
                "price": math.nan if price is None else price,
                "rating": math.nan if rating is None else rating,
            }
        )
    return pd.DataFrame.from_records(records, columns=["price", "rating"])


def _pick_extremes(cards: Sequence[NormalizedCard], prices: pd.Series) -> tuple[NormalizedCard, NormalizedCard]:
    # idxmin/idxmax return the first occurrence, so ties keep input order.
    numeric = prices.dropna()
    if numeric.empty:
        return cards[0], cards[0]
    return cards[int(numeric.idxmin())], cards[int(numeric.idxmax())]


def summarise_cards(cards: Sequence[NormalizedCard]) -> AnalyticsResult:
    """Compute min/max/average price and the scatter series."""

    if not cards:
        raise ValueError("cannot summarise an empty card sequence")

    df = cards_to_dataframe(cards)
    min_card, max_card = _pick_extremes(cards, df["price"])

    positive = df["price"][df["price"] > 0]
    avg_price = float(positive.mean()) if not positive.empty else 0.0

    price_vs_rating = tuple(
        {"price": card.price, "rating": float(rating)}
        for card, rating in zip(cards, df["rating"])
        if not math.isnan(rating)
    )
    price_vs_distance = tuple(
        {"price": card.price, "distance": card.last_mile_travel} for card in cards
    )

    return AnalyticsResult(
        min=PriceSummary.from_card(min_card),
        max=PriceSummary.from_card(max_card),
        avg_price=avg_price,
        price_vs_rating=price_vs_rating,
        price_vs_distance=price_vs_distance,
    )


def top_rated_cards(
    cards: Sequence[NormalizedCard], settings: Optional[ScrapeSettings] = None
) -> List[TopCard]:
    """Return the ``top_n`` best rated cards with CDN image URLs."""

    settings = settings or ScrapeSettings()
    if not cards:
        return []

    df = cards_to_dataframe(cards)
    ranking = df["rating"].fillna(0).sort_values(ascending=False, kind="stable")

    top: List[TopCard] = []
    for position in ranking.index[: settings.top_n]:
        card = cards[int(position)]
        top.append(
            TopCard(
                name=card.restaurant_name,
                image_url=settings.cdn_image_template.format(image_id=card.image_id),
                price=card.price,
                rating=card.aggregated_rating,
                rating_count=card.rating_count,
                rating_count_v2=card.rating_count_v2,
            )
        )
    return top
