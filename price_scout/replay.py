"""Replay the captured search API call outside the browser."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import requests

from .config import ScrapeSettings
from .errors import ReplayParseError, ReplayTransportError
from .models import CapturedRequest

LOGGER = logging.getLogger(__name__)


def build_replay_url(captured: CapturedRequest, latitude: float, longitude: float, term: str) -> str:
    """Return the captured URL with ``lat``, ``lng`` and ``str`` replaced.

    Every other query parameter keeps its value and position. Overrides
    missing from the captured query are appended.
    """

    overrides = {"lat": str(latitude), "lng": str(longitude), "str": term}
    parts = urlsplit(captured.url)
    pairs = []
    applied = set()
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if key in overrides:
            if key in applied:
                continue
            value = overrides[key]
            applied.add(key)
        pairs.append((key, value))
    for key, value in overrides.items():
        if key not in applied:
            pairs.append((key, value))
    return urlunsplit(parts._replace(query=urlencode(pairs)))


def build_replay_headers(captured: CapturedRequest, user_agent: str) -> Dict[str, str]:
    # HTTP/2 pseudo headers (":authority" and friends) cannot be sent by requests.
    headers = {
        key: value
        for key, value in captured.headers.items()
        if not key.startswith(":") and key.lower() != "user-agent"
    }
    headers["User-Agent"] = user_agent
    return headers


def replay_request(
    captured: CapturedRequest,
    latitude: float,
    longitude: float,
    term: str,
    settings: Optional[ScrapeSettings] = None,
    session: Optional[requests.Session] = None,
) -> Any:
    """Issue the rewritten GET and return the decoded JSON body."""

    settings = settings or ScrapeSettings()
    owns_session = session is None
    http = session or requests.Session()
    url = build_replay_url(captured, latitude, longitude, term)
    headers = build_replay_headers(captured, settings.user_agent)

    LOGGER.debug("Replaying API request %s", url)
    try:
        response = http.get(url, headers=headers, timeout=settings.replay_timeout)
        response.raise_for_status()
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else None
        raise ReplayTransportError(
            f"API replay returned HTTP {status}", url=url, status_code=status
        ) from exc
    except requests.RequestException as exc:
        raise ReplayTransportError(f"API replay failed: {exc}", url=url) from exc
    finally:
        if owns_session:
            http.close()

    try:
        return response.json()
    except ValueError as exc:
        raise ReplayParseError(f"Failed to parse API response: {exc}", url=url) from exc
