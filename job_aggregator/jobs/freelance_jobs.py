"""Freelancer.com project search via the freelancer jobs scraper actor."""

import logging
import uuid
from typing import Any, Optional

from job_aggregator.jobs.models import DisplayRecord
from job_aggregator.utils.text_processing import (
    is_hourly_budget,
    parse_budget,
    sanitize_description,
    string_items,
    text_or,
)

logger = logging.getLogger("job_aggregator.jobs.freelance")

PLATFORM = "freelance"
ACTOR_ID = "getdataforme/freelancer-jobs-scraper"

RELAXABLE_FIELDS: tuple[str, ...] = ()


def identity_key(item: dict[str, Any]) -> Optional[Any]:
    """The same project can match several query terms."""
    return item.get("project_id")


def build_run_input(params: dict[str, Any]) -> dict[str, Any]:
    return dict(params)


def transform(job: dict[str, Any]) -> DisplayRecord:
    project_id = job.get("project_id")
    budget_range = text_or(job.get("budget_range"))
    return DisplayRecord(
        id=str(project_id) if project_id is not None else uuid.uuid4().hex[:12],
        source=PLATFORM,
        title=text_or(job.get("title"), "Untitled Project"),
        url=text_or(job.get("url")),
        is_remote=True,
        employment_type="Full-time" if job.get("fulltime") else None,
        salary=budget_range or None,
        description=sanitize_description(job.get("description")),
        skills=string_items(job.get("skills")),
        extra={
            "budget_range": budget_range,
            "min_budget": parse_budget(job.get("minbudget")),
            "max_budget": parse_budget(job.get("maxbudget")),
            "is_hourly": is_hourly_budget(budget_range),
            "bid_average": parse_budget(job.get("bid_avg")),
            "bid_count": job.get("bid_count") or 0,
            "time_left": text_or(job.get("time_left")),
            "payment_verified": bool(job.get("payment_verified")),
            "is_contest": bool(job.get("is_contest")),
            "featured": bool(job.get("featured")),
            "urgent": bool(job.get("urgent")),
            "fulltime": bool(job.get("fulltime")),
            "matched_query": text_or(job.get("query")),
        },
    )
