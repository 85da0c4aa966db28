"""End-to-end tests for the pipeline with stubbed capture and HTTP."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from price_scout.config import ScrapeRequest, ScrapeSettings
from price_scout.errors import ReplayParseError
from price_scout.models import STATUS_NO_CARDS, STATUS_NOT_CAPTURED, STATUS_OK, CapturedRequest
from price_scout.workflow import run_price_scrape

API_URL = "https://www.swiggy.com/dapi/restaurants/search/v3?lat=1&lng=2&str=x&submitAction=ENTER"


class _StubCapturer:
    def __init__(self, captured: Optional[CapturedRequest]) -> None:
        self.captured = captured
        self.terms: List[str] = []

    def capture(self, search_term: str) -> Optional[CapturedRequest]:
        self.terms.append(search_term)
        return self.captured


class _StubResponse:
    def __init__(self, body: Any) -> None:
        self._body = body

    def raise_for_status(self) -> None:
        return None

    def json(self) -> Any:
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class _StubSession:
    def __init__(self, body: Any) -> None:
        self.body = body
        self.urls: List[str] = []

    def get(self, url: str, headers: Dict[str, str], timeout: float) -> _StubResponse:
        self.urls.append(url)
        return _StubResponse(self.body)


@pytest.fixture
def captured() -> CapturedRequest:
    return CapturedRequest.from_parts(API_URL, "GET", {"accept": "*/*"})


def test_full_pipeline_produces_analytics(captured, payload, raw_card) -> None:
    body = payload(
        [
            raw_card(name="Cheap", price=10000, rating="3.9"),
            raw_card(name="Mid", price=20000, rating="4.6"),
            raw_card(name="Dear", price=30000, rating="4.1"),
            raw_card(name="Unrated", price=5000, rating=None),
            {"card": {"card": {"@type": "type.googleapis.com/swiggy.Restaurant"}}},
        ]
    )
    capturer = _StubCapturer(captured)
    session = _StubSession(body)

    outcome = run_price_scrape(
        ScrapeRequest(item="Biryani", latitude=28.6, longitude=77.2),
        capturer=capturer,
        session=session,  # type: ignore[arg-type]
    )

    assert outcome.status == STATUS_OK
    assert capturer.terms == ["Biryani"]
    assert "lat=28.6" in session.urls[0] and "lng=77.2" in session.urls[0]
    data = outcome.to_dict()["data"]
    assert data["analytics"]["min"]["name"] == "Cheap"
    assert data["analytics"]["max"]["name"] == "Dear"
    assert data["analytics"]["avgPrice"] == pytest.approx(20000.0)
    assert [card["name"] for card in data["cards"]] == ["Mid", "Dear", "Cheap"]
    assert data["diagnostics"] == {"total": 5, "notDish": 1, "malformed": 0, "unrated": 1, "kept": 3}


def test_capture_miss_is_an_empty_outcome(payload) -> None:
    session = _StubSession(payload([]))

    outcome = run_price_scrape(ScrapeRequest(), capturer=_StubCapturer(None), session=session)  # type: ignore[arg-type]

    assert outcome.status == STATUS_NOT_CAPTURED
    assert outcome.is_empty
    assert outcome.message == "v3 API request not found"
    assert outcome.to_dict() == {"data": {"analytics": {}, "cards": []}}
    assert session.urls == []


def test_no_valid_cards_is_an_empty_outcome(captured, payload, raw_card) -> None:
    body = payload([raw_card(rating_count=0)])

    outcome = run_price_scrape(
        ScrapeRequest(), capturer=_StubCapturer(captured), session=_StubSession(body)  # type: ignore[arg-type]
    )

    assert outcome.status == STATUS_NO_CARDS
    assert outcome.message == "No valid cards found to process"
    assert outcome.analytics is None
    assert outcome.to_dict()["data"]["analytics"] == {}
    assert outcome.to_dict()["data"]["cards"] == []


def test_empty_card_array_short_circuits(captured, payload) -> None:
    outcome = run_price_scrape(
        ScrapeRequest(), capturer=_StubCapturer(captured), session=_StubSession(payload([]))  # type: ignore[arg-type]
    )

    assert outcome.status == STATUS_NO_CARDS
    assert outcome.drops is not None and outcome.drops.total == 0


def test_repeated_runs_are_identical(captured, payload, raw_card) -> None:
    body = payload([raw_card(name=f"R{index}", price=10000 + index * 1500, rating=f"4.{index}") for index in range(7)])
    scrape_request = ScrapeRequest(item="Biryani", latitude=19.07, longitude=72.87)
    settings = ScrapeSettings()

    first = run_price_scrape(scrape_request, settings, _StubCapturer(captured), _StubSession(body))  # type: ignore[arg-type]
    second = run_price_scrape(scrape_request, settings, _StubCapturer(captured), _StubSession(body))  # type: ignore[arg-type]

    assert first.to_dict() == second.to_dict()
    assert first.analytics == second.analytics


def test_parse_failure_propagates(captured) -> None:
    session = _StubSession(ValueError("Expecting value"))

    with pytest.raises(ReplayParseError):
        run_price_scrape(ScrapeRequest(), capturer=_StubCapturer(captured), session=session)  # type: ignore[arg-type]
