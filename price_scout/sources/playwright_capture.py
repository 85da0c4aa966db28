"""Headless browser capture of the search page's internal API call."""
from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional
from urllib.parse import quote_plus

from playwright.async_api import Browser, Error as PlaywrightError, Page, async_playwright

from price_scout.config import ScrapeSettings
from price_scout.errors import BrowserLaunchError, NavigationError
from price_scout.models import CapturedRequest

LOGGER = logging.getLogger(__name__)


class RequestInterceptor:
    """Passively watches page requests and remembers the API call.

    Requests are never routed or held back, so the page loads exactly as
    it would without us. When the marker matches more than once the last
    request observed wins.
    """

    def __init__(self, marker: str) -> None:
        self.marker = marker
        self.captured: Optional[CapturedRequest] = None
        self.matches = 0

    def observe(self, request: Any) -> None:
        url = request.url
        if self.marker not in url:
            return
        self.matches += 1
        self.captured = CapturedRequest.from_parts(url, request.method, request.headers)
        LOGGER.debug("Captured API request #%d: %s", self.matches, url)


def build_search_url(settings: ScrapeSettings, search_term: str) -> str:
    return settings.search_url_template.format(query=quote_plus(search_term))


async def _close_browser(browser: Browser) -> None:
    try:
        await browser.close()
    except Exception as exc:
        LOGGER.warning("Failed to close headless browser: %s", exc)


async def _navigate(page: Page, url: str, settings: ScrapeSettings) -> None:
    try:
        await page.goto(
            url,
            wait_until=settings.wait_until,
            timeout=settings.navigation_timeout_ms,
        )
    except PlaywrightError as exc:
        raise NavigationError(f"Navigation to {url} failed: {exc}") from exc


async def _launch_browser(p: Any, settings: ScrapeSettings) -> Browser:
    try:
        return await p.chromium.launch(headless=settings.headless, args=list(settings.browser_args))
    except PlaywrightError as exc:
        raise BrowserLaunchError(f"Could not launch headless browser: {exc}") from exc


async def _open_page(browser: Browser) -> Page:
    try:
        context = await browser.new_context()
        return await context.new_page()
    except PlaywrightError as exc:
        raise BrowserLaunchError(f"Could not open a browser page: {exc}") from exc


async def capture_api_request(
    search_term: str, settings: Optional[ScrapeSettings] = None
) -> Optional[CapturedRequest]:
    """Load the search page for ``search_term`` and return the captured API call.

    ``None`` means the page settled without issuing a matching request.
    Any browser that started is closed before this coroutine returns or raises.
    """

    settings = settings or ScrapeSettings()
    interceptor = RequestInterceptor(settings.api_marker)
    search_url = build_search_url(settings, search_term)

    async with async_playwright() as p:
        browser = await _launch_browser(p, settings)
        try:
            page = await _open_page(browser)
            page.on("request", interceptor.observe)
            LOGGER.info("Loading %s", search_url)
            await _navigate(page, search_url, settings)
        finally:
            await _close_browser(browser)

    if interceptor.captured is None:
        LOGGER.info("No request matching %r observed on %s", settings.api_marker, search_url)
    return interceptor.captured


def _in_running_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class PlaywrightCapturer:
    """Synchronous facade over :func:`capture_api_request`.

    Each call launches its own browser; nothing is reused between calls.
    Called from a thread that already runs an event loop, the capture runs
    on a worker thread with its own loop.
    """

    def __init__(self, settings: Optional[ScrapeSettings] = None) -> None:
        self.settings = settings or ScrapeSettings()

    def capture(self, search_term: str) -> Optional[CapturedRequest]:
        def run() -> Optional[CapturedRequest]:
            return asyncio.run(capture_api_request(search_term, self.settings))

        if not _in_running_loop():
            return run()
        with ThreadPoolExecutor(max_workers=1) as executor:
            return executor.submit(run).result()
