"""Freelancer.com search-term generation."""

import logging
from typing import Any, Optional

from job_aggregator.llm.client import JSONModel
from job_aggregator.profile.models import ProfileSummary
from job_aggregator.queries.base import (
    GeneratedQuery,
    build_user_prompt,
    log_overrides,
    relevance,
    require_query,
    string_list,
)
from job_aggregator.utils.text_processing import dedupe_preserving_order, query_words

logger = logging.getLogger("job_aggregator.queries.freelance")

PLATFORM = "freelance"

MAX_TERMS = 3
MAX_TERM_LENGTH = 50

FIXED_FIELDS = {
    "item_limit": 10,
    "proxyConfiguration": {"useApifyProxy": True, "apifyProxyGroups": ["RESIDENTIAL"]},
}

SYSTEM_PROMPT = """You are an expert job search assistant that writes search terms for Freelancer.com.

Analyze the user's query and profile (if provided) and produce search terms for Freelancer.com projects.

## Your only output: queries (array of strings)
Exactly 3 search terms. Each one is a skill ("Python", "WordPress"), a technology
("Node.js", "PostgreSQL") or a role ("Data Analyst", "Web Developer"), 1-3 words long.

## Guidelines
1. Take skills and technologies from the query and from the profile
   (job titles, certifications, education fields, industry).
2. Prefer terms commonly used on freelance marketplaces and in demand.

## Examples
User: "Find me Python jobs", profile with ML certifications at a fintech
Output: ["Python", "Machine Learning", "FinTech"]
User: "Web development work", profile with React and WordPress
Output: ["React", "WordPress", "JavaScript"]

## Response format
Return a JSON object:
{
  "description": "Brief description of what these search terms target",
  "queries": ["term1", "term2", "term3"],
  "relevanceScore": 8,
  "reasoning": "Why these terms were chosen"
}"""


def validate_params(raw: Any, user_query: str) -> dict[str, Any]:
    raw = raw if isinstance(raw, dict) else {}
    terms = string_list(raw.get("queries"))
    if not terms:
        terms = query_words(user_query, limit=MAX_TERMS)
    terms = [t.strip() for t in terms if 0 < len(t.strip()) <= MAX_TERM_LENGTH]
    return {"queries": dedupe_preserving_order(terms)[:MAX_TERMS]}


def apply_fixed_overrides(params: dict[str, Any]) -> dict[str, Any]:
    final = dict(params)
    final["item_limit"] = FIXED_FIELDS["item_limit"]
    proxy = FIXED_FIELDS["proxyConfiguration"]
    final["proxyConfiguration"] = {
        "useApifyProxy": proxy["useApifyProxy"],
        "apifyProxyGroups": list(proxy["apifyProxyGroups"]),
    }
    return final


def generate(
    user_query: str,
    summary: Optional[ProfileSummary],
    llm: JSONModel,
    temperature: float = 0.7,
) -> GeneratedQuery:
    """Generate up to three deduplicated Freelancer.com search terms."""
    user_query = require_query(user_query)
    user_prompt = build_user_prompt(
        user_query,
        summary,
        "Generate search terms based on the query and profile.",
        "Generate search terms based on the query alone.",
    )

    parsed = llm.complete_json(SYSTEM_PROMPT, user_prompt, temperature)

    params = apply_fixed_overrides(validate_params(parsed, user_query))
    log_overrides(PLATFORM, parsed, FIXED_FIELDS)

    description = parsed.get("description")
    reasoning = parsed.get("reasoning")
    logger.info("Generated Freelance search terms: %s", params["queries"])
    return GeneratedQuery(
        platform=PLATFORM,
        description=(
            description if isinstance(description, str) and description
            else f"Search for: {', '.join(params['queries'])}"
        ),
        relevance_score=relevance(parsed.get("relevanceScore"), 7),
        reasoning=reasoning if isinstance(reasoning, str) and reasoning else "Generated from user query and profile",
        params=params,
    )
