"""Upwork job search via the Upwork job scraper actor."""

import logging
from typing import Any, Optional

from job_aggregator.jobs.models import DisplayRecord
from job_aggregator.utils.text_processing import format_number, sanitize_description, string_items, text_or, to_number

logger = logging.getLogger("job_aggregator.jobs.upwork")

PLATFORM = "upwork"
ACTOR_ID = "fasty_dev/upwork-job-scraper"

# Budget goes last: it is the most meaningful constraint
RELAXABLE_FIELDS = (
    "numbers_of_proposals",
    "project_length",
    "hours_per_week",
    "contract_to_hire_role",
    "experience_level",
    "budget",
)

identity_key = None

RECENT_REVIEWS = 5


def build_run_input(params: dict[str, Any]) -> dict[str, Any]:
    return dict(params)


def _dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _score(feedback) -> float:
    return to_number(_dict(feedback).get("score")) or 0.0


def client_review_summary(job_history: Any) -> dict[str, Any]:
    """Average feedback scores in both directions plus the most recent reviews.

    Only positive scores count toward an average; no scores gives 0.
    """
    history = [j for j in job_history if isinstance(j, dict)] if isinstance(job_history, list) else []
    given = [_score(j.get("feedback_to_worker")) for j in history]
    received = [_score(j.get("feedback_to_client")) for j in history]
    given = [s for s in given if s > 0]
    received = [s for s in received if s > 0]

    recent = []
    for j in history[:RECENT_REVIEWS]:
        to_worker = _dict(j.get("feedback_to_worker"))
        to_client = _dict(j.get("feedback_to_client"))
        recent.append({
            "job_title": text_or(j.get("title")),
            "freelancer_name": text_or(_dict(j.get("contractor")).get("name"), "Unknown"),
            "score_given": _score(to_worker),
            "score_received": _score(to_client),
            "comment_given": to_worker.get("comment") or "",
            "comment_received": to_client.get("comment") or "",
        })

    return {
        "avg_rating_given": sum(given) / len(given) if given else 0,
        "avg_rating_received": sum(received) / len(received) if received else 0,
        "recent_reviews": recent,
    }


def format_budget(budget: dict[str, Any]) -> Optional[str]:
    """Budget display string such as "$500 fixed" or "$25 - $40 / hour"."""
    kind = budget.get("type")
    if kind == "FIXED":
        amount = to_number(budget.get("fixed_amount"))
        return f"${format_number(amount)} fixed" if amount else None
    if kind == "HOURLY":
        low = to_number(budget.get("min_hourly_rate"))
        high = to_number(budget.get("max_hourly_rate"))
        if low and high:
            return f"${format_number(low)} - ${format_number(high)} / hour"
        if low or high:
            return f"${format_number(low or high)} / hour"
    return None


def transform(job: dict[str, Any]) -> DisplayRecord:
    """Map one Upwork actor result onto a DisplayRecord."""
    budget = _dict(job.get("budget"))
    activity = _dict(job.get("activity"))
    client = _dict(job.get("client"))
    stats = _dict(client.get("stats"))
    client_location = _dict(client.get("location"))
    qualifications = _dict(job.get("qualifications"))
    reviews = client_review_summary(client.get("job_history"))
    budget_type = budget.get("type")

    return DisplayRecord(
        id=str(job.get("id") or ""),
        source=PLATFORM,
        title=text_or(job.get("title"), "Untitled Project"),
        url=text_or(job.get("link")),
        company=text_or(client.get("name")),
        location=", ".join(p for p in (text_or(client_location.get(k)) for k in ("city", "country")) if p),
        is_remote=True,
        employment_type=text_or(job.get("workload"), None),
        salary=format_budget(budget),
        description=sanitize_description(job.get("description")),
        skills=string_items(job.get("skills")),
        posted_at=job.get("published_at"),
        extra={
            "budget_type": budget_type,
            "budget_amount": budget.get("fixed_amount") if budget_type == "FIXED" else None,
            "hourly_rate_min": budget.get("min_hourly_rate") if budget_type == "HOURLY" else None,
            "hourly_rate_max": budget.get("max_hourly_rate") if budget_type == "HOURLY" else None,
            "category": job.get("category"),
            "category_group": job.get("category_group"),
            "experience_level": job.get("contractor_tier"),
            "duration": job.get("duration"),
            "workload": job.get("workload"),
            "questions": job.get("questions") or [],
            "total_applicants": activity.get("total_applicants") or 0,
            "connects_required": job.get("connect_required"),
            "client_last_viewed": activity.get("client_last_viewed"),
            "interviewing": activity.get("interviewing") or 0,
            "client": {
                "id": client.get("id") or "",
                "name": client.get("name") or "",
                "industry": client.get("industry") or "",
                "company_size": client.get("size") or 0,
                "payment_verified": bool(client.get("payment_verified")),
                "location": {
                    "city": client_location.get("city") or "",
                    "country": client_location.get("country") or "",
                },
                "rating": stats.get("score") or 0,
                "feedback_count": stats.get("feedback_count") or 0,
                "total_spent": stats.get("total_spent") or 0,
                "avg_hourly_rate": stats.get("avg_hourly_rate") or 0,
                "total_jobs_posted": stats.get("total_job_posted") or 0,
                "hire_rate": stats.get("hire_rate") or 0,
                **reviews,
            },
            "required_countries": qualifications.get("countries") or [],
            "required_languages": qualifications.get("languages") or [],
            "min_job_success_score": qualifications.get("min_job_success_score") or 0,
            "preferred_english_skill": qualifications.get("pref_english_skill") or "ANY",
            "rising_talent_only": bool(qualifications.get("rising_talent")),
            "contract_to_hire": False,
            "person_to_hire": job.get("person_to_hire"),
            "attachments": job.get("attachments") or [],
        },
    )
