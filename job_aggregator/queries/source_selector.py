"""Model-driven choice of which platforms to search."""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Optional

from job_aggregator.llm.client import JSONModel
from job_aggregator.profile.models import ProfileSummary
from job_aggregator.queries.base import build_user_prompt, require_query

logger = logging.getLogger("job_aggregator.queries.sources")

PLATFORMS = ("linkedin", "behance", "indeed", "freelance", "upwork")

# Platforms assumed relevant when the model omits them
DEFAULT_SELECTION = {
    "linkedin": True,
    "behance": False,
    "indeed": True,
    "freelance": False,
    "upwork": False,
}
FALLBACK_PLATFORMS = ("linkedin", "indeed")
DEFAULT_REASONING = "AI-selected platforms based on query"
FALLBACK_NOTE = " (Fallback: enabled LinkedIn and Indeed as no platforms were selected)"

SYSTEM_PROMPT = """You are an expert job search assistant that decides which job platforms fit a search.

## Available platforms

1. linkedin: corporate and professional jobs at every level, executive roles (CEO, CFO, VP,
   Director), full-time employment, enterprise companies, management and leadership.
2. indeed: broad listings from entry level to senior, full-time and part-time, local and
   hourly work, healthcare, retail, hospitality, manufacturing.
3. behance: creative and design roles ONLY (graphic, UI/UX, motion, brand and web designers,
   illustrators, art directors, video editors, 3D artists, animators).
4. upwork: freelance and contract projects, short-term and remote gig work, technical
   freelancing. Not for traditional full-time employment or executive roles.
5. freelance: Freelancer.com projects, similar to upwork, including contests and
   budget-conscious clients. Not for traditional employment or senior roles.

## Decision rules
- Executive roles (C-suite, VP, Director): linkedin and indeed only.
- Traditional full-time employment: linkedin and indeed, no freelance platforms.
- Creative roles: include behance.
- Freelance or contract explicitly mentioned: include upwork and freelance.
- Tech/development: linkedin and indeed, plus upwork if freelance is mentioned.
- "remote" or "flexible": consider the freelance platforms too.
- Broad queries: select more platforms. Platform-specific queries: be selective.

## Response format
Return a JSON object:
{
  "linkedin": true,
  "behance": false,
  "indeed": true,
  "freelance": false,
  "upwork": false,
  "reasoning": "Brief explanation of why these platforms were selected"
}
At least one platform must be true."""


@dataclass
class SourceSelection:
    linkedin: bool = True
    behance: bool = False
    indeed: bool = True
    freelance: bool = False
    upwork: bool = False
    reasoning: str = DEFAULT_REASONING

    @property
    def selected(self) -> list[str]:
        return [p for p in PLATFORMS if getattr(self, p)]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def validate_selection(parsed: dict[str, Any]) -> SourceSelection:
    """Apply per-platform defaults, then force the fallback pair if nothing is selected."""
    flags = {}
    for platform in PLATFORMS:
        value = parsed.get(platform)
        flags[platform] = DEFAULT_SELECTION[platform] if value is None else bool(value)

    reasoning = parsed.get("reasoning")
    selection = SourceSelection(
        **flags,
        reasoning=reasoning if isinstance(reasoning, str) and reasoning else DEFAULT_REASONING,
    )

    if not selection.selected:
        for platform in FALLBACK_PLATFORMS:
            setattr(selection, platform, True)
        selection.reasoning += FALLBACK_NOTE
        logger.warning("Source selector chose no platforms, falling back to %s", ", ".join(FALLBACK_PLATFORMS))

    return selection


def select_sources(
    user_query: str,
    summary: Optional[ProfileSummary],
    llm: JSONModel,
    temperature: float = 0.3,
) -> SourceSelection:
    """Ask the model which platforms suit the query; never returns an empty selection."""
    user_query = require_query(user_query)
    user_prompt = build_user_prompt(
        user_query,
        summary,
        "Based on the query and profile, which platforms should we search?",
        "Based on the query alone, which platforms should we search?",
    )

    parsed = llm.complete_json(SYSTEM_PROMPT, user_prompt, temperature)
    selection = validate_selection(parsed)

    logger.info("Selected platforms: %s (%s)", ", ".join(selection.selected), selection.reasoning)
    return selection
