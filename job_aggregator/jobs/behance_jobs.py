"""Behance job search via the Behance jobs scraper actor."""

import logging
from typing import Any, Optional

from job_aggregator.jobs.models import DisplayRecord
from job_aggregator.utils.text_processing import sanitize_description, text_or

logger = logging.getLogger("job_aggregator.jobs.behance")

PLATFORM = "behance"
ACTOR_ID = "scrapestorm/behance-jobs-search-scraper-fast-and-cheap"

# A single keyword leaves nothing to relax
RELAXABLE_FIELDS: tuple[str, ...] = ()

ACTIVE_STATUS = "ACTIVE"

JOB_TYPES = {
    "FULLTIME": "Full-time",
    "FREELANCE": "Freelance",
    "PARTTIME": "Part-time",
    "CONTRACT": "Contract",
    "INTERNSHIP": "Internship",
}


def identity_key(item: dict[str, Any]) -> Optional[Any]:
    return item.get("job_id")


def is_active(item: dict[str, Any]) -> bool:
    return text_or(item.get("job_status"), ACTIVE_STATUS) == ACTIVE_STATUS


def build_run_input(params: dict[str, Any]) -> dict[str, Any]:
    return {"keyword": params.get("keyword"), "maxitems": params.get("maxitems")}


def format_job_type(job_type: Any) -> str:
    job_type = text_or(job_type)
    return JOB_TYPES.get(job_type.upper(), job_type)


def transform(job: dict[str, Any]) -> DisplayRecord:
    url = text_or(job.get("job_url"))
    return DisplayRecord(
        id=str(job.get("job_id") or ""),
        source=PLATFORM,
        title=text_or(job.get("title"), "Untitled Position"),
        url=url,
        company=text_or(job.get("company_name"), "Unknown Company"),
        company_url=text_or(job.get("company_url"), None),
        location=text_or(job.get("location"), "Anywhere"),
        employment_type=format_job_type(job.get("job_type")),
        description=sanitize_description(job.get("short_description")),
        extra={
            "application_url": text_or(job.get("application_url"), url),
            "job_status": text_or(job.get("job_status"), ACTIVE_STATUS),
            "creator": {
                "name": job.get("creator_name") or "",
                "url": job.get("creator_url") or "",
                "image": job.get("creator_image") or "",
            },
        },
    )
