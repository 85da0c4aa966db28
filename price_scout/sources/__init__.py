"""Capture backends that discover the search API request."""
from __future__ import annotations

from typing import Optional, Protocol

from price_scout.models import CapturedRequest
from .playwright_capture import PlaywrightCapturer, RequestInterceptor, capture_api_request


class RequestCapturer(Protocol):
    """Anything able to produce the API request template for a search term."""

    def capture(self, search_term: str) -> Optional[CapturedRequest]:
        ...


__all__ = [
    "PlaywrightCapturer",
    "RequestCapturer",
    "RequestInterceptor",
    "capture_api_request",
]
