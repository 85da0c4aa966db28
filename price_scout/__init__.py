"""Competitor dish price benchmarking pipeline."""
from .config import ScrapeRequest, ScrapeSettings, create_request_from_query, settings_from_env
from .errors import ScrapeError
from .models import ScrapeOutcome
from .workflow import run_price_scrape

__all__ = [
    "ScrapeError",
    "ScrapeOutcome",
    "ScrapeRequest",
    "ScrapeSettings",
    "create_request_from_query",
    "run_price_scrape",
    "settings_from_env",
]
