"""Configuration helpers for the price scraping pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any, Dict, List, Mapping, Optional

from .errors import InvalidQueryError

DEFAULT_ITEM = "Biryani"
DEFAULT_LATITUDE = 28.65420
DEFAULT_LONGITUDE = 77.23730

DEFAULT_SEARCH_URL_TEMPLATE = "https://www.swiggy.com/search?query={query}"
DEFAULT_API_MARKER = "v3?"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36"
)
DEFAULT_CDN_IMAGE_TEMPLATE = (
    "https://media-assets.swiggy.com/swiggy/image/upload/"
    "fl_lossy,f_auto,q_auto,w_208,h_208,c_fit/{image_id}"
)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ScrapeRequest:
    """A single benchmarking query: which dish, and where."""

    item: str = DEFAULT_ITEM
    latitude: float = DEFAULT_LATITUDE
    longitude: float = DEFAULT_LONGITUDE

    def to_dict(self) -> Dict[str, Any]:
        return {"item": self.item, "lat": self.latitude, "long": self.longitude}


@dataclass
class ScrapeSettings:
    """Knobs for the browser, the replay call and the presentation of results."""

    search_url_template: str = DEFAULT_SEARCH_URL_TEMPLATE
    api_marker: str = DEFAULT_API_MARKER
    user_agent: str = DEFAULT_USER_AGENT
    navigation_timeout_ms: int = 60000
    wait_until: str = "networkidle"
    headless: bool = True
    browser_args: List[str] = field(
        default_factory=lambda: ["--no-sandbox", "--disable-setuid-sandbox"]
    )
    replay_timeout: float = 30.0
    cdn_image_template: str = DEFAULT_CDN_IMAGE_TEMPLATE
    top_n: int = 5


def _parse_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    cleaned = str(value).strip()
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


def _coordinate(query: Mapping[str, Any], keys: tuple[str, ...], default: float) -> float:
    for key in keys:
        raw = query.get(key)
        if raw is None or str(raw).strip() == "":
            continue
        value = _parse_float(raw)
        if value is None:
            raise InvalidQueryError(f"'{key}' must be numeric, got {raw!r}")
        return value
    return default


def create_request_from_query(query: Mapping[str, Any]) -> ScrapeRequest:
    """Build a :class:`ScrapeRequest` from HTTP query parameters.

    Missing or blank values fall back to the defaults, which mirrors what
    the web frontend expects when it omits a parameter.
    """

    item = str(query.get("item") or "").strip() or DEFAULT_ITEM
    latitude = _coordinate(query, ("lat",), DEFAULT_LATITUDE)
    longitude = _coordinate(query, ("long", "lng"), DEFAULT_LONGITUDE)
    return ScrapeRequest(item=item, latitude=latitude, longitude=longitude)


def settings_from_env(environ: Mapping[str, str] | None = None) -> ScrapeSettings:
    """Read ``PRICE_SCOUT_*`` overrides from the environment."""

    env = os.environ if environ is None else environ
    settings = ScrapeSettings()

    settings.search_url_template = env.get("PRICE_SCOUT_SEARCH_URL", settings.search_url_template)
    settings.api_marker = env.get("PRICE_SCOUT_API_MARKER", settings.api_marker)
    settings.user_agent = env.get("PRICE_SCOUT_USER_AGENT", settings.user_agent)
    settings.cdn_image_template = env.get("PRICE_SCOUT_CDN_TEMPLATE", settings.cdn_image_template)
    settings.headless = _parse_bool(env.get("PRICE_SCOUT_HEADLESS"), settings.headless)

    timeout_ms = _parse_float(env.get("PRICE_SCOUT_NAVIGATION_TIMEOUT_MS"))
    if timeout_ms is not None and timeout_ms > 0:
        settings.navigation_timeout_ms = int(timeout_ms)

    replay_timeout = _parse_float(env.get("PRICE_SCOUT_REPLAY_TIMEOUT"))
    if replay_timeout is not None and replay_timeout > 0:
        settings.replay_timeout = replay_timeout

    top_n = _parse_float(env.get("PRICE_SCOUT_TOP_N"))
    if top_n is not None and top_n > 0:
        settings.top_n = int(top_n)

    return settings
