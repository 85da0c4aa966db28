"""High level orchestration for running the price benchmarking pipeline."""
from __future__ import annotations

import logging
from typing import Optional

import requests

from .analytics import summarise_cards, top_rated_cards
from .config import ScrapeRequest, ScrapeSettings
from .extractor import extract_cards
from .models import (
    STATUS_NO_CARDS,
    STATUS_NOT_CAPTURED,
    STATUS_OK,
    ScrapeOutcome,
)
from .processor import prepare_cards
from .replay import replay_request
from .sources import PlaywrightCapturer, RequestCapturer

LOGGER = logging.getLogger(__name__)

MESSAGE_OK = "API response retrieved successfully"
MESSAGE_NOT_CAPTURED = "v3 API request not found"
MESSAGE_NO_CARDS = "No valid cards found to process"


def run_price_scrape(
    request: ScrapeRequest,
    settings: Optional[ScrapeSettings] = None,
    capturer: Optional[RequestCapturer] = None,
    session: Optional[requests.Session] = None,
) -> ScrapeOutcome:
    """Capture, replay, extract, normalise and aggregate for one query.

    Empty outcomes are returned, failures are raised as
    :class:`~price_scout.errors.ScrapeError` subclasses.
    """

    settings = settings or ScrapeSettings()
    capturer = capturer or PlaywrightCapturer(settings)

    captured = capturer.capture(request.item)
    if captured is None:
        return ScrapeOutcome(status=STATUS_NOT_CAPTURED, message=MESSAGE_NOT_CAPTURED)

    payload = replay_request(
        captured,
        request.latitude,
        request.longitude,
        request.item,
        settings=settings,
        session=session,
    )
    raw_cards = extract_cards(payload)
    cards, drops = prepare_cards(raw_cards)
    if not cards:
        return ScrapeOutcome(status=STATUS_NO_CARDS, message=MESSAGE_NO_CARDS, drops=drops)

    analytics = summarise_cards(cards)
    top_cards = top_rated_cards(cards, settings)
    LOGGER.info(
        "Benchmarked %r at (%s, %s): %d cards, average price %.2f",
        request.item,
        request.latitude,
        request.longitude,
        len(cards),
        analytics.avg_price,
    )
    return ScrapeOutcome(
        status=STATUS_OK,
        message=MESSAGE_OK,
        analytics=analytics,
        cards=top_cards,
        drops=drops,
    )
