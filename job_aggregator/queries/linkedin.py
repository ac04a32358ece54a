"""LinkedIn search-parameter generation."""

import logging
from typing import Any, Optional

from job_aggregator.errors import GenerationError
from job_aggregator.llm.client import JSONModel
from job_aggregator.profile.models import ProfileSummary
from job_aggregator.queries.base import (
    GeneratedQuery,
    as_bool,
    as_number,
    build_user_prompt,
    log_overrides,
    relevance,
    require_query,
    string_list,
)

logger = logging.getLogger("job_aggregator.queries.linkedin")

PLATFORM = "linkedin"

TIME_RANGES = ("1h", "24h", "7d")
DEFAULT_TIME_RANGE = "7d"
DEFAULT_LIMIT = 50
MIN_LIMIT = 10
MAX_LIMIT = 100

ARRAY_FIELDS = (
    "titleSearch", "titleExclusionSearch",
    "locationSearch", "locationExclusionSearch",
    "descriptionSearch", "descriptionExclusionSearch",
    "organizationSearch", "organizationExclusionSearch",
    "organizationDescriptionSearch", "organizationDescriptionExclusionSearch",
    "seniorityFilter", "EmploymentTypeFilter",
    "industryFilter",
    "aiWorkArrangementFilter", "aiExperienceLevelFilter",
    "aiTaxonomiesFilter", "aiTaxonomiesPrimaryFilter", "aiTaxonomiesExclusionFilter",
)
BOOLEAN_FIELDS = ("remote", "directApply", "externalApplyUrl", "aiHasSalary", "aiVisaSponsorshipFilter")
NUMBER_FIELDS = ("organizationEmployeesLte", "organizationEmployeesGte")

FIXED_FIELDS = {
    "includeAi": False,
    "descriptionType": "text",
    "removeAgency": False,
}

SYSTEM_PROMPT = """You are an expert job search assistant that writes LinkedIn job search queries.

Analyze the user's query and profile (if provided) and produce targeted parameters for the LinkedIn Job Search API.

## Parameters you can use

### timeRange
"1h" (indexed in the last hour), "24h" (last 24 hours) or "7d" (last 7 days, the default).

### Search arrays (arrays of strings; a ":*" suffix means prefix match, e.g. "Soft:*")
- titleSearch: job titles to match, e.g. ["Software Engineer", "Developer"]
- titleExclusionSearch: title terms to exclude, e.g. ["Senior", "Lead"]
- locationSearch: full location names, e.g. ["New York", "United States"] (never "NY" or "US")
- locationExclusionSearch: locations to exclude
- descriptionSearch: terms in the job description. Expensive, combine with titleSearch.
- descriptionExclusionSearch: description terms to exclude, e.g. ["clearance required"]
- organizationSearch / organizationExclusionSearch: company names
- organizationDescriptionSearch / organizationDescriptionExclusionSearch: terms in company descriptions, e.g. ["fintech"]

### Filters
- remote: true to only show remote jobs, omit otherwise
- seniorityFilter: any of "Associate", "Director", "Executive", "Mid-Senior level", "Entry level", "Not Applicable", "Internship"
- EmploymentTypeFilter: any of "FULL_TIME", "PART_TIME", "CONTRACTOR", "TEMPORARY", "INTERN", "VOLUNTEER", "PER_DIEM", "OTHER"
- industryFilter: exact LinkedIn industry names, e.g. "Computer Software", "Financial Services"
- organizationEmployeesLte / organizationEmployeesGte: company size bounds (numbers)
- externalApplyUrl: true for jobs with an external application link
- directApply: true for Easy Apply jobs only
- limit: number of results between 10 and 100 (default 50)

### AI filters
- aiWorkArrangementFilter: any of "On-site", "Hybrid", "Remote OK", "Remote Solely"
- aiExperienceLevelFilter: any of "0-2", "2-5", "5-10", "10+"
- aiVisaSponsorshipFilter: true for jobs offering visa sponsorship
- aiHasSalary: true to only return jobs that list a salary
- aiTaxonomiesFilter: job categories such as "Technology", "Healthcare", "Management & Leadership",
  "Finance & Accounting", "Human Resources", "Sales", "Marketing", "Customer Service & Support",
  "Education", "Legal", "Engineering", "Science & Research", "Trades", "Construction", "Manufacturing",
  "Logistics", "Creative & Media", "Hospitality", "Retail", "Data & Analytics", "Software", "Energy",
  "Agriculture", "Social Services", "Administrative", "Government & Public Sector", "Art & Design",
  "Food & Beverage", "Transportation", "Consulting", "Sports & Recreation", "Security & Safety"

## Guidelines
1. Map time words to timeRange: "today" -> "24h", "just posted" -> "1h", otherwise "7d".
2. Always fill titleSearch with the requested role and close variations
   ("Software Engineer" -> also "Developer", "Software Developer").
3. "remote" -> aiWorkArrangementFilter ["Remote OK", "Remote Solely"]; "hybrid" -> ["Hybrid"].
4. Use profile experience to pick seniorityFilter and aiExperienceLevelFilter when the query is vague.
5. Only include parameters that are relevant. Never output empty arrays.

## Response format
Return a JSON object:
{
  "queries": [
    {
      "description": "Human-readable description of this search",
      "params": { "titleSearch": ["..."], "timeRange": "7d" },
      "relevanceScore": 8,
      "reasoning": "Why this query was created"
    }
  ]
}"""


def validate_params(raw: Any) -> dict[str, Any]:
    """Keep only well-typed, allowed model parameters; fixed fields are dropped here."""
    raw = raw if isinstance(raw, dict) else {}
    params: dict[str, Any] = {}

    limit = as_number(raw.get("limit"))
    params["limit"] = int(min(max(limit or DEFAULT_LIMIT, MIN_LIMIT), MAX_LIMIT))

    time_range = raw.get("timeRange")
    params["timeRange"] = time_range if time_range in TIME_RANGES else DEFAULT_TIME_RANGE

    for name in ARRAY_FIELDS:
        values = string_list(raw.get(name))
        if values:
            params[name] = values

    for name in BOOLEAN_FIELDS:
        value = as_bool(raw.get(name))
        if value is not None:
            params[name] = value

    for name in NUMBER_FIELDS:
        value = as_number(raw.get(name))
        if value is not None:
            params[name] = value

    return params


def apply_fixed_overrides(params: dict[str, Any]) -> dict[str, Any]:
    """Return a copy with the pinned fields written last."""
    final = dict(params)
    final.update(FIXED_FIELDS)
    return final


def _build_query(index: int, item: dict) -> GeneratedQuery:
    raw_params = item.get("params") if isinstance(item.get("params"), dict) else {}
    params = apply_fixed_overrides(validate_params(raw_params))
    log_overrides(PLATFORM, raw_params, FIXED_FIELDS)

    description = item.get("description")
    reasoning = item.get("reasoning")
    return GeneratedQuery(
        platform=PLATFORM,
        description=description if isinstance(description, str) and description else f"Search Query {index + 1}",
        relevance_score=relevance(item.get("relevanceScore"), 5),
        reasoning=reasoning if isinstance(reasoning, str) and reasoning else "No reasoning provided",
        params=params,
    )


def generate(
    user_query: str,
    summary: Optional[ProfileSummary],
    llm: JSONModel,
    temperature: float = 0.7,
    num_queries: int = 1,
) -> list[GeneratedQuery]:
    """Generate one or more validated LinkedIn searches for the query."""
    user_query = require_query(user_query)
    plural = "queries" if num_queries != 1 else "query"
    user_prompt = build_user_prompt(
        user_query,
        summary,
        f"Generate {num_queries} optimized LinkedIn search {plural} based on the query and profile.",
        f"Generate {num_queries} optimized LinkedIn search {plural} based on the query alone.",
    )

    parsed = llm.complete_json(SYSTEM_PROMPT, user_prompt, temperature)

    items = parsed.get("queries")
    if not isinstance(items, list):
        raise GenerationError("Invalid response format: missing queries array")

    queries = [_build_query(i, item) for i, item in enumerate(items) if isinstance(item, dict)]
    if not queries:
        raise GenerationError("AI returned no LinkedIn queries")

    logger.info("Generated %d LinkedIn search queries", len(queries))
    return queries
