"""Shared builders for search API payloads."""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import pytest

DISH_TYPE = "type.googleapis.com/swiggy.presentation.food.v2.Dish"


def build_raw_card(
    name: str = "Spice Route",
    price: Any = 25000,
    rating: Any = "4.4",
    rating_count: Any = "120 ratings",
    rating_count_v2: Any = "120",
    image_id: Optional[str] = "dish/abc123",
    locality: str = "Chandni Chowk",
    delivery_time: Any = 32,
    avg_rating: Any = 4.2,
    distance: Any = 2.4,
    card_type: str = DISH_TYPE,
) -> Dict[str, Any]:
    info: Dict[str, Any] = {
        "name": f"{name} Biryani",
        "price": price,
        "ratings": {
            "aggregatedRating": {
                "rating": rating,
                "ratingCount": rating_count,
                "ratingCountV2": rating_count_v2,
            }
        },
    }
    if image_id is not None:
        info["imageId"] = image_id
    return {
        "card": {
            "card": {
                "@type": card_type,
                "info": info,
                "restaurant": {
                    "info": {
                        "name": name,
                        "locality": locality,
                        "avgRating": avg_rating,
                        "sla": {"deliveryTime": delivery_time, "lastMileTravel": distance},
                    }
                },
            }
        }
    }


def build_payload(cards: List[Dict[str, Any]], group_index: int = 1) -> Dict[str, Any]:
    groups: List[Dict[str, Any]] = [{"card": {"card": {"@type": "Filler"}}} for _ in range(group_index)]
    groups.append({"groupedCard": {"cardGroupMap": {"DISH": {"cards": cards}}}})
    return {"statusCode": 0, "data": {"cards": groups}}


@pytest.fixture
def raw_card() -> Callable[..., Dict[str, Any]]:
    return build_raw_card


@pytest.fixture
def payload() -> Callable[..., Dict[str, Any]]:
    return build_payload
