"""Shared requests session with retry logic for JSON APIs."""

import logging

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger("job_aggregator.http")

USER_AGENT = "job-aggregator/0.1 (+https://github.com/job-aggregator)"


def create_session(
    max_retries: int = 2,
    backoff_factor: float = 1.0,
    allowed_methods: tuple[str, ...] = ("GET",),
) -> requests.Session:
    """Create a requests session that retries transient server errors.

    429 is not retried; callers surface it as a rate-limit error.
    """
    session = requests.Session()

    retry_strategy = Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=list(allowed_methods),
        raise_on_status=False,
    )

    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update({
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    })

    return session


def describe_response(response: requests.Response) -> str:
    """Short human-readable description of an error response for logs and messages."""
    body = (response.text or "").strip().replace("\n", " ")
    if len(body) > 200:
        body = body[:200] + "..."
    return f"HTTP {response.status_code}: {body}" if body else f"HTTP {response.status_code}"
