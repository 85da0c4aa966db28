"""Flask based HTTP backend for the price benchmarking pipeline."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from flask import Flask, jsonify, request

from price_scout import (
    ScrapeError,
    ScrapeOutcome,
    ScrapeRequest,
    ScrapeSettings,
    create_request_from_query,
    run_price_scrape,
    settings_from_env,
)

LOGGER = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

ScrapeRunner = Callable[[ScrapeRequest, ScrapeSettings], ScrapeOutcome]


def api_response(status_code: int, data: Any, message: str):
    body: Dict[str, Any] = {
        "statusCode": status_code,
        "data": data,
        "message": message,
        "success": status_code < 400,
    }
    return jsonify(body), status_code


def _default_runner(scrape_request: ScrapeRequest, settings: ScrapeSettings) -> ScrapeOutcome:
    return run_price_scrape(scrape_request, settings=settings)


def create_app(
    settings: Optional[ScrapeSettings] = None, runner: Optional[ScrapeRunner] = None
) -> Flask:
    app = Flask(__name__)
    app.config["SCRAPE_SETTINGS"] = settings or settings_from_env()
    app.config["SCRAPE_RUNNER"] = runner or _default_runner

    @app.errorhandler(ScrapeError)
    def handle_scrape_error(exc: ScrapeError):
        if exc.http_code >= 500:
            LOGGER.error("Scrape failed (%s): %s", exc.reason, exc.description)
        else:
            LOGGER.info("Rejected scrape request (%s): %s", exc.reason, exc.description)
        return jsonify(exc.to_dict()), exc.http_code

    @app.route("/api/v1/healthcheck")
    def healthcheck():
        return api_response(200, "OK", "Service is healthy")

    @app.route("/api/v1/scrape")
    def scrape():
        scrape_request = create_request_from_query(request.args)
        outcome = app.config["SCRAPE_RUNNER"](scrape_request, app.config["SCRAPE_SETTINGS"])
        return api_response(200, outcome.to_dict(), outcome.message)

    return app


app = create_app()


if __name__ == "__main__":
    app.run(debug=True)
