"""Indeed search-parameter generation."""

import logging
from typing import Any, Optional

from job_aggregator.llm.client import JSONModel
from job_aggregator.profile.models import ProfileSummary
from job_aggregator.queries.base import (
    GeneratedQuery,
    as_text,
    build_user_prompt,
    log_overrides,
    relevance,
    require_query,
    string_list,
)
from job_aggregator.utils.text_processing import dedupe_preserving_order, query_words

logger = logging.getLogger("job_aggregator.queries.indeed")

PLATFORM = "indeed"

MAX_SEARCH_TERMS = 3
DEFAULT_COUNTRY = "United States"
DEFAULT_POSTED_SINCE = "7 days"
POSTED_SINCE = ("1 day", "3 days", "7 days", "14 days", "1 month", "3 months", "1 year")

COUNTRIES = (
    "Argentina", "Australia", "Austria", "Bahrain", "Bangladesh", "Belgium", "Bulgaria", "Brazil",
    "Canada", "Chile", "China", "Colombia", "Costa Rica", "Croatia", "Cyprus", "Czech Republic",
    "Denmark", "Ecuador", "Egypt", "Estonia", "Finland", "France", "Germany", "Greece", "Hong Kong",
    "Hungary", "India", "Indonesia", "Ireland", "Israel", "Italy", "Japan", "Kuwait", "Latvia",
    "Lithuania", "Luxembourg", "Malaysia", "Malta", "Mexico", "Morocco", "Netherlands", "New Zealand",
    "Nigeria", "Norway", "Oman", "Pakistan", "Panama", "Peru", "Philippines", "Poland", "Portugal",
    "Qatar", "Romania", "Saudi Arabia", "Singapore", "Slovakia", "Slovenia", "South Africa",
    "South Korea", "Spain", "Sweden", "Switzerland", "Taiwan", "Thailand", "Turkey", "Ukraine",
    "United Arab Emirates", "United Kingdom", "United States", "Uruguay", "Venezuela", "Vietnam",
)
_COUNTRY_LOOKUP = {c.lower(): c for c in COUNTRIES}

FIXED_FIELDS = {
    "max_results": 30,
}

SYSTEM_PROMPT = """You are an expert job search assistant that writes Indeed job searches.

Analyze the user's query and profile (if provided) and produce search parameters for Indeed.

## Parameters you must provide

### search_terms (array of strings, required)
2-3 job titles or skills, e.g. ["Software Engineer", "Python Developer"] or ["Marketing Manager"].

### country (string, required)
Full country name, e.g. "United States", "United Kingdom", "Canada", "Germany",
"United Arab Emirates", "India", "Singapore". Infer it from any city mentioned
("Dubai" -> "United Arab Emirates", "London" -> "United Kingdom"). Default "United States".

### location (string, optional)
City or region inside the country, e.g. "New York" or "San Francisco Bay Area".
Use an empty string for a nationwide search.

### posted_since (string, required)
One of "1 day", "3 days", "7 days", "14 days", "1 month", "3 months", "1 year".
"recent" or "new" -> "3 days", "last week" -> "7 days", "last month" -> "1 month".
Default "7 days".

## Guidelines
1. Take titles and skills from the query and the profile.
2. Keep search_terms focused: never more than 3.
3. For broad queries ("find me a job") use titles from the profile.

## Response format
Return a JSON object:
{
  "description": "Brief description of this search",
  "search_terms": ["term1", "term2"],
  "country": "Country Name",
  "location": "City or empty string",
  "posted_since": "7 days",
  "relevanceScore": 8,
  "reasoning": "Why these parameters were chosen"
}"""


def normalize_country(value: Any) -> str:
    """Canonical supported country name, or the default for anything unrecognized."""
    if not isinstance(value, str):
        return DEFAULT_COUNTRY
    return _COUNTRY_LOOKUP.get(value.strip().lower(), DEFAULT_COUNTRY)


def validate_params(raw: Any, user_query: str) -> dict[str, Any]:
    """Validate the flat Indeed model output; fixed fields are dropped here."""
    raw = raw if isinstance(raw, dict) else {}

    terms = string_list(raw.get("search_terms"))
    if not terms:
        terms = query_words(user_query, limit=MAX_SEARCH_TERMS)
    terms = dedupe_preserving_order(t.strip() for t in terms if t.strip())[:MAX_SEARCH_TERMS]

    posted_since = raw.get("posted_since")
    return {
        "search_terms": terms,
        "country": normalize_country(raw.get("country")),
        "location": as_text(raw.get("location")),
        "posted_since": posted_since if posted_since in POSTED_SINCE else DEFAULT_POSTED_SINCE,
    }


def apply_fixed_overrides(params: dict[str, Any]) -> dict[str, Any]:
    final = dict(params)
    final.update(FIXED_FIELDS)
    return final


def generate(
    user_query: str,
    summary: Optional[ProfileSummary],
    llm: JSONModel,
    temperature: float = 0.7,
) -> GeneratedQuery:
    """Generate a single validated Indeed search."""
    user_query = require_query(user_query)
    user_prompt = build_user_prompt(
        user_query,
        summary,
        "Generate Indeed search parameters based on the query and profile.",
        "Generate Indeed search parameters based on the query alone.",
    )

    parsed = llm.complete_json(SYSTEM_PROMPT, user_prompt, temperature)

    params = apply_fixed_overrides(validate_params(parsed, user_query))
    log_overrides(PLATFORM, parsed, FIXED_FIELDS)

    description = parsed.get("description")
    reasoning = parsed.get("reasoning")
    query = GeneratedQuery(
        platform=PLATFORM,
        description=(
            description if isinstance(description, str) and description
            else f"Search for {', '.join(params['search_terms'])} jobs"
        ),
        relevance_score=relevance(parsed.get("relevanceScore"), 7),
        reasoning=reasoning if isinstance(reasoning, str) and reasoning else "Generated from user query and profile",
        params=params,
    )
    logger.info(
        "Generated Indeed search: %s in %s (%s)",
        params["search_terms"], params["country"], params["posted_since"],
    )
    return query
