"""Shared data structures used across capture, processing and analytics."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from requests.structures import CaseInsensitiveDict

RawCard = Dict[str, Any]
Scalar = Union[str, int, float]


@dataclass
class CapturedRequest:
    """Snapshot of the internal search API call made by the loaded page."""

    url: str
    method: str
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)

    @classmethod
    def from_parts(cls, url: str, method: str, headers: Mapping[str, str]) -> "CapturedRequest":
        return cls(url=url, method=method.upper(), headers=CaseInsensitiveDict(headers))


@dataclass
class PartialCard:
    """Fields read from a raw card before any defaults are applied."""

    restaurant_name: Optional[str] = None
    image_id: Optional[str] = None
    price: Optional[Scalar] = None
    locality: Optional[str] = None
    delivery_time: Optional[Scalar] = None
    avg_rating_restaurant: Optional[Scalar] = None
    aggregated_rating: Optional[Scalar] = None
    rating_count: Optional[Scalar] = None
    rating_count_v2: Optional[Scalar] = None
    last_mile_travel: Optional[Scalar] = None


@dataclass(frozen=True)
class NormalizedCard:
    """A flattened dish listing from a competitor restaurant."""

    restaurant_name: str
    image_id: str
    price: Scalar
    locality: str
    delivery_time: Scalar
    avg_rating_restaurant: Scalar
    aggregated_rating: Scalar
    rating_count: Scalar
    rating_count_v2: Scalar
    last_mile_travel: Scalar


@dataclass(frozen=True)
class PriceSummary:
    name: str
    price: Scalar
    locality: str
    delivery_time: Scalar
    avg_rating: Scalar

    @classmethod
    def from_card(cls, card: NormalizedCard) -> "PriceSummary":
        return cls(
            name=card.restaurant_name,
            price=card.price,
            locality=card.locality,
            delivery_time=card.delivery_time,
            avg_rating=card.avg_rating_restaurant,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "price": self.price,
            "locality": self.locality,
            "deliveryTime": self.delivery_time,
            "avgRating": self.avg_rating,
        }


@dataclass(frozen=True)
class AnalyticsResult:
    """Price statistics across all normalized cards of one query."""

    min: PriceSummary
    max: PriceSummary
    avg_price: float
    price_vs_rating: tuple = ()
    price_vs_distance: tuple = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min": self.min.to_dict(),
            "max": self.max.to_dict(),
            "avgPrice": self.avg_price,
            "priceVSrating": [dict(pair) for pair in self.price_vs_rating],
            "priceVSdistance": [dict(pair) for pair in self.price_vs_distance],
        }


@dataclass(frozen=True)
class TopCard:
    """A highly rated competitor dish ready for display."""

    name: str
    image_url: str
    price: Scalar
    rating: Scalar
    rating_count: Scalar
    rating_count_v2: Scalar

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "imageId": self.image_url,
            "price": self.price,
            "ratings": {
                "rating": self.rating,
                "ratingCount": self.rating_count,
                "ratingCountV2": self.rating_count_v2,
            },
        }


@dataclass
class DropCounts:
    """How many raw cards were discarded at each gate."""

    total: int = 0
    not_dish: int = 0
    malformed: int = 0
    unrated: int = 0
    kept: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "notDish": self.not_dish,
            "malformed": self.malformed,
            "unrated": self.unrated,
            "kept": self.kept,
        }


STATUS_OK = "ok"
STATUS_NOT_CAPTURED = "not_captured"
STATUS_NO_CARDS = "no_cards"


@dataclass
class ScrapeOutcome:
    """Result of one pipeline run. ``status`` separates empty from populated."""

    status: str
    message: str
    analytics: Optional[AnalyticsResult] = None
    cards: List[TopCard] = field(default_factory=list)
    drops: Optional[DropCounts] = None

    @property
    def is_empty(self) -> bool:
        return self.status != STATUS_OK

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "analytics": self.analytics.to_dict() if self.analytics else {},
            "cards": [card.to_dict() for card in self.cards],
        }
        if self.drops is not None:
            data["diagnostics"] = self.drops.to_dict()
        return {"data": data}
