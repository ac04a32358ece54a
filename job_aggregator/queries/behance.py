"""Behance keyword generation."""

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
)

logger = logging.getLogger("job_aggregator.queries.behance")

PLATFORM = "behance"

DEFAULT_KEYWORD = "graphic designer"

FIXED_FIELDS = {
    "maxitems": 30,
}

SYSTEM_PROMPT = """You are an expert job search assistant that picks search keywords for Behance Jobs.

Behance lists CREATIVE roles: graphic, UI/UX, brand, web and motion designers, illustrators,
art and creative directors, video editors, 3D artists, animators and photographers.

## Your task
Produce ONE focused keyword of 1-3 words for Behance Jobs.

## Guidelines
1. Use common Behance job titles ("graphic designer", "UI designer", "motion designer").
2. If the query is not creative, choose the closest creative equivalent.
3. Lean on the user's creative background when a profile is provided.

## Examples
"I want a design job" -> "graphic designer"
"Looking for UX work" -> "UX designer"
"Video editing jobs" -> "video editor"
"I'm a frontend developer" -> "web designer"
"Animation work" -> "motion designer"

## Response format
Return a JSON object:
{
  "description": "Brief description of this search",
  "keyword": "the search keyword",
  "relevanceScore": 8,
  "reasoning": "Why this keyword was chosen"
}"""


def validate_params(raw: Any) -> dict[str, Any]:
    raw = raw if isinstance(raw, dict) else {}
    keyword = as_text(raw.get("keyword")).lower()
    return {"keyword": keyword or DEFAULT_KEYWORD}


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
    """Generate a single Behance keyword search."""
    user_query = require_query(user_query)
    user_prompt = build_user_prompt(
        user_query,
        summary,
        "Generate the best Behance search keyword based on the query and profile. Focus on creative/design roles.",
        "Generate the best Behance search keyword based on the query alone. Focus on creative/design roles.",
    )

    parsed = llm.complete_json(SYSTEM_PROMPT, user_prompt, temperature)

    params = apply_fixed_overrides(validate_params(parsed))
    log_overrides(PLATFORM, parsed, FIXED_FIELDS)

    description = parsed.get("description")
    reasoning = parsed.get("reasoning")
    logger.info("Generated Behance keyword: %s", params["keyword"])
    return GeneratedQuery(
        platform=PLATFORM,
        description=(
            description if isinstance(description, str) and description
            else f"Search for {params['keyword']} jobs on Behance"
        ),
        relevance_score=relevance(parsed.get("relevanceScore"), 7),
        reasoning=reasoning if isinstance(reasoning, str) and reasoning else "Generated from user query and profile",
        params=params,
    )
