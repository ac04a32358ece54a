"""Indeed job search via the Indeed job search actor."""

import logging
import re
import uuid
from typing import Any, Optional

from job_aggregator.jobs.models import DisplayRecord
from job_aggregator.utils.text_processing import format_salary, sanitize_description, string_items, text_or

logger = logging.getLogger("job_aggregator.jobs.indeed")

PLATFORM = "indeed"
ACTOR_ID = "cheapget/indeed-job-search"

RELAXABLE_FIELDS: tuple[str, ...] = ()

_JOB_KEY = re.compile(r"jk=([a-zA-Z0-9]+)")


def identity_key(item: dict[str, Any]) -> Optional[str]:
    return item.get("platform_url") or None


def build_run_input(params: dict[str, Any]) -> dict[str, Any]:
    """Actor input; location is only sent for city/region searches."""
    run_input = {
        "search_terms": params.get("search_terms", []),
        "country": params.get("country"),
        "posted_since": params.get("posted_since"),
        "max_results": params.get("max_results"),
    }
    if params.get("location"):
        run_input["location"] = params["location"]
    return run_input


def extract_job_id(url: Any) -> str:
    match = _JOB_KEY.search(text_or(url))
    return match.group(1) if match else uuid.uuid4().hex[:12]


def transform(job: dict[str, Any]) -> DisplayRecord:
    """Map one Indeed actor result onto a DisplayRecord."""
    url = text_or(job.get("platform_url"))
    return DisplayRecord(
        id=extract_job_id(url),
        source=PLATFORM,
        title=text_or(job.get("title"), "Untitled Position"),
        url=url,
        company=text_or(job.get("company_name"), "Unknown Company"),
        company_url=job.get("company_url"),
        company_logo=job.get("company_logo"),
        location=text_or(job.get("location"), "Location not specified"),
        is_remote=bool(job.get("is_remote")),
        employment_type=text_or(job.get("job_type"), None),
        salary=format_salary(
            job.get("salary_currency"),
            minimum=job.get("salary_minimum"),
            maximum=job.get("salary_maximum"),
            value=job.get("salary_minimum") or job.get("salary_maximum"),
            unit=job.get("salary_period"),
        ),
        description=sanitize_description(job.get("description")),
        skills=string_items(job.get("skills")),
        posted_at=text_or(job.get("posted_date")),
        extra={
            "official_url": job.get("official_url"),
            "work_from_home": job.get("work_from_home"),
            "job_level": job.get("job_level"),
            "job_function": job.get("job_function"),
            "listing_type": job.get("listing_type"),
            "vacancy_count": job.get("vacancy_count"),
            "experience_range": job.get("experience_range"),
            "salary_min": job.get("salary_minimum"),
            "salary_max": job.get("salary_maximum"),
            "salary_currency": job.get("salary_currency"),
            "salary_period": job.get("salary_period"),
            "company": {
                "industry": job.get("company_industry"),
                "website": job.get("company_website"),
                "addresses": job.get("company_addresses"),
                "revenue": job.get("company_revenue"),
                "description": job.get("company_description"),
                "rating": job.get("company_rating"),
                "employee_count": job.get("employee_count"),
                "review_count": job.get("review_count"),
            },
            "emails": job.get("emails"),
        },
    )
