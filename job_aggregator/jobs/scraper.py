"""Apify actor runner: one synchronous run per search, returning dataset items."""

import logging
from typing import Any, Optional

import requests

from job_aggregator.errors import UpstreamAuthError, UpstreamFailure, UpstreamTimeout
from job_aggregator.utils.http_client import create_session, describe_response

logger = logging.getLogger("job_aggregator.jobs.scraper")

APIFY_API_BASE = "https://api.apify.com/v2"

# Slack on top of the actor's own timeout for the HTTP round trip
REQUEST_GRACE_SECONDS = 15


class ApifyScraper:
    """Runs an Apify actor and returns its default dataset items.

    Uses the run-sync-get-dataset-items endpoint, so a single POST both starts the
    run and waits for its results.
    """

    def __init__(self, token: str, session: Optional[requests.Session] = None, base_url: str = APIFY_API_BASE):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.session = session or create_session()

    def run(self, actor_id: str, run_input: dict[str, Any], timeout: int) -> list[dict[str, Any]]:
        if not self.token:
            raise UpstreamAuthError("APIFY_API_TOKEN not configured")

        url = f"{self.base_url}/acts/{actor_id.replace('/', '~')}/run-sync-get-dataset-items"
        logger.debug("Running actor %s with input %s", actor_id, run_input)

        try:
            response = self.session.post(
                url,
                params={"timeout": timeout, "clean": "true"},
                json=run_input,
                headers={"Authorization": f"Bearer {self.token}"},
                timeout=timeout + REQUEST_GRACE_SECONDS,
            )
        except requests.Timeout as e:
            raise UpstreamTimeout(f"Actor {actor_id} did not finish within {timeout}s") from e
        except requests.RequestException as e:
            raise UpstreamFailure(f"Actor {actor_id} request failed: {e}") from e

        if response.status_code in (401, 403):
            raise UpstreamAuthError(f"Apify rejected the API token ({describe_response(response)})")
        if response.status_code == 408:
            raise UpstreamTimeout(f"Actor {actor_id} did not finish within {timeout}s")
        if response.status_code >= 400:
            raise UpstreamFailure(f"Actor {actor_id} failed: {describe_response(response)}")

        try:
            items = response.json()
        except ValueError as e:
            raise UpstreamFailure(f"Actor {actor_id} returned a non-JSON body") from e

        if not isinstance(items, list):
            raise UpstreamFailure(f"Actor {actor_id} returned {type(items).__name__}, expected a list")

        logger.info("Actor %s returned %d items", actor_id, len(items))
        return [item for item in items if isinstance(item, dict)]
