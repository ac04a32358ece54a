"""LinkedIn profile import through the EnrichLayer people profile API."""

import logging
import re
from typing import Any, Optional

import requests

from job_aggregator.errors import (
    InputError,
    ProfileNotFound,
    ProfileRateLimited,
    ProfileUnauthorized,
    UpstreamAuthError,
    UpstreamFailure,
)
from job_aggregator.profile.models import Profile
from job_aggregator.profile.normalizer import linkedin_to_profile
from job_aggregator.utils.http_client import create_session, describe_response

logger = logging.getLogger("job_aggregator.profile.linkedin")

ENRICHLAYER_PROFILE_URL = "https://enrichlayer.com/api/v2/profile"
REQUEST_TIMEOUT = 60

_PROFILE_URL = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/in/([a-zA-Z0-9_-]+)/?", re.IGNORECASE)


def normalize_linkedin_url(url: Optional[str]) -> str:
    """Canonical https://www.linkedin.com/in/<id>/ form of a profile URL."""
    if not url or not url.strip():
        raise InputError("LinkedIn URL is required")

    match = _PROFILE_URL.search(url.strip())
    if not match:
        raise InputError("Invalid LinkedIn URL. Expected format: linkedin.com/in/username")
    return f"https://www.linkedin.com/in/{match.group(1)}/"


def fetch_linkedin_profile(
    url: str,
    api_key: str,
    session: Optional[requests.Session] = None,
) -> dict[str, Any]:
    """Fetch the raw EnrichLayer record for a LinkedIn profile URL."""
    profile_url = normalize_linkedin_url(url)
    if not api_key:
        raise UpstreamAuthError("ENRICHLAYER_API_KEY not configured")

    session = session or create_session()
    logger.info("Fetching LinkedIn profile from EnrichLayer: %s", profile_url)

    try:
        response = session.get(
            ENRICHLAYER_PROFILE_URL,
            params={
                "profile_url": profile_url,
                "skills": "include",
                "extra": "include",
                "use_cache": "if-present",
                "fallback_to_cache": "on-error",
            },
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        raise UpstreamFailure(f"EnrichLayer request failed: {e}") from e

    if response.status_code == 404:
        raise ProfileNotFound()
    if response.status_code in (401, 403):
        raise ProfileUnauthorized("Invalid or expired API key")
    if response.status_code == 429:
        raise ProfileRateLimited()
    if response.status_code >= 400:
        raise UpstreamFailure(f"EnrichLayer API error: {describe_response(response)}")

    try:
        record = response.json()
    except ValueError as e:
        raise UpstreamFailure("EnrichLayer returned a non-JSON body") from e

    if not isinstance(record, dict) or not (
        record.get("first_name") or record.get("last_name") or record.get("full_name")
    ):
        raise ProfileNotFound("Could not retrieve profile data. The profile may be private or unavailable.")

    logger.info(
        "EnrichLayer profile fetched for %s (credit cost %s)",
        record.get("full_name") or profile_url,
        response.headers.get("X-EnrichLayer-Credit-Cost", "1"),
    )
    return record


def load_linkedin_profile(url: str, api_key: str, session: Optional[requests.Session] = None) -> Profile:
    return linkedin_to_profile(fetch_linkedin_profile(url, api_key, session))
