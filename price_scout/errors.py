"""Exception hierarchy for fatal scrape failures."""
from __future__ import annotations

from typing import Any, Dict, Optional


class ScrapeError(Exception):
    """Base class for failures that abort a scrape invocation.

    ``reason`` is a short machine readable token so callers can tell a
    navigation problem from a transport or parse problem without string
    matching on the description.
    """

    reason = "scrape_failed"
    http_code = 500

    def __init__(self, description: str, *, is_operational: bool = True) -> None:
        super().__init__(description)
        self.description = description
        self.is_operational = is_operational

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "httpCode": self.http_code,
            "isOperational": self.is_operational,
            "description": self.description,
            "reason": self.reason,
        }


class InvalidQueryError(ScrapeError):
    """Raised when the inbound query cannot be turned into a request."""

    reason = "invalid_query"
    http_code = 400


class BrowserLaunchError(ScrapeError):
    """The headless browser could not be started or opened a page.

    Usually a missing or broken browser install, so it is reported as not
    operational: retrying the same request will not help.
    """

    reason = "browser_unavailable"
    http_code = 503

    def __init__(self, description: str) -> None:
        super().__init__(description, is_operational=False)


class NavigationError(ScrapeError):
    """The headless browser could not load the search page in time."""

    reason = "navigation_failed"
    http_code = 504


class ReplayTransportError(ScrapeError):
    """The replayed API call failed at the HTTP level."""

    reason = "transport_failure"
    http_code = 502

    def __init__(self, description: str, *, url: str, status_code: Optional[int] = None) -> None:
        super().__init__(description)
        self.url = url
        self.status_code = status_code


class ReplayParseError(ScrapeError):
    """The replayed API call returned a body that is not JSON."""

    reason = "parse_failure"
    http_code = 502

    def __init__(self, description: str, *, url: str) -> None:
        super().__init__(description)
        self.url = url
