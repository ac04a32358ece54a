"""LinkedIn job search via the advanced LinkedIn job search actor."""

import logging
from typing import Any, Optional

from job_aggregator.jobs.models import DisplayRecord
from job_aggregator.utils.text_processing import format_salary, sanitize_description, string_items, text_or

logger = logging.getLogger("job_aggregator.jobs.linkedin")

PLATFORM = "linkedin"
ACTOR_ID = "fantastic-jobs/advanced-linkedin-job-search-api"

# Most restrictive first
RELAXABLE_FIELDS = (
    "descriptionSearch",
    "organizationSearch",
    "organizationDescriptionSearch",
    "organizationDescriptionExclusionSearch",
    "seniorityFilter",
    "industryFilter",
    "organizationEmployeesLte",
    "organizationEmployeesGte",
    "EmploymentTypeFilter",
    "aiVisaSponsorshipFilter",
)

# LinkedIn results are not deduplicated
identity_key = None


def build_run_input(params: dict[str, Any]) -> dict[str, Any]:
    return dict(params)


def _first(value) -> Optional[Any]:
    if isinstance(value, list) and value:
        return value[0]
    return None


def _location_text(value) -> Optional[str]:
    """Derived locations arrive either as strings or as {city, admin, country} objects."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        parts = [text_or(value.get(k)) for k in ("city", "admin", "country")]
        return ", ".join(p for p in parts if p) or None
    return None


def format_linkedin_salary(job: dict[str, Any]) -> Optional[str]:
    """Prefer the AI-extracted salary, then the raw scraped salary."""
    currency = job.get("ai_salary_currency")
    if currency and (job.get("ai_salary_value") or job.get("ai_salary_minvalue")):
        salary = format_salary(
            currency,
            minimum=job.get("ai_salary_minvalue"),
            maximum=job.get("ai_salary_maxvalue"),
            value=job.get("ai_salary_value"),
            unit=job.get("ai_salary_unittext"),
        )
        if salary:
            return salary

    raw = job.get("salary_raw")
    if isinstance(raw, dict):
        return format_salary(
            raw.get("currency") or "",
            minimum=raw.get("minValue"),
            maximum=raw.get("maxValue"),
            value=raw.get("value"),
            unit=raw.get("unitText"),
        )
    return None


def transform(job: dict[str, Any]) -> DisplayRecord:
    """Map one LinkedIn actor result onto a DisplayRecord."""
    arrangement = text_or(job.get("ai_work_arrangement"))
    location = (
        _location_text(_first(job.get("locations_derived")))
        or _location_text(_first(job.get("cities_derived")))
        or "Location not specified"
    )

    return DisplayRecord(
        id=str(job.get("id") or ""),
        source=PLATFORM,
        title=text_or(job.get("title"), "Untitled Position"),
        url=text_or(job.get("url")),
        company=text_or(job.get("organization"), "Unknown Company"),
        company_url=job.get("organization_url"),
        company_logo=job.get("organization_logo"),
        location=location,
        is_remote=bool(job.get("remote_derived") or "Remote" in arrangement),
        employment_type=text_or(_first(job.get("employment_type")), "FULL_TIME"),
        salary=format_linkedin_salary(job),
        description=sanitize_description(job.get("description_text")),
        skills=string_items(job.get("ai_key_skills")),
        posted_at=job.get("date_posted"),
        extra={
            "external_apply_url": job.get("external_apply_url"),
            "work_arrangement": job.get("ai_work_arrangement"),
            "date_valid_through": job.get("date_validthrough"),
            "seniority": job.get("seniority"),
            "experience_level": job.get("ai_experience_level"),
            "core_responsibilities": job.get("ai_core_responsibilities"),
            "requirements_summary": job.get("ai_requirements_summary"),
            "benefits": job.get("ai_benefits"),
            "visa_sponsorship": job.get("ai_visa_sponsorship"),
            "taxonomies": job.get("ai_taxonomies_a"),
            "company_info": {
                "industry": job.get("linkedin_org_industry"),
                "size": job.get("linkedin_org_size"),
                "employees": job.get("linkedin_org_employees"),
                "headquarters": job.get("linkedin_org_headquarters"),
                "description": text_or(job.get("linkedin_org_description"))[:300] or None,
                "specialties": job.get("linkedin_org_specialties"),
            },
            "is_direct_apply": job.get("directapply"),
            "is_agency": job.get("linkedin_org_recruitment_agency_derived"),
        },
    )
