"""Upwork search-parameter generation and keyword augmentation."""

import logging
import re
from typing import Any, Optional

from job_aggregator.config import KeywordInference, SearchConfig
from job_aggregator.llm.client import JSONModel
from job_aggregator.profile.models import ProfileSummary
from job_aggregator.queries.base import (
    GeneratedQuery,
    allowed_values,
    as_bool,
    as_number,
    as_text,
    build_user_prompt,
    log_overrides,
    relevance,
    require_query,
)

logger = logging.getLogger("job_aggregator.queries.upwork")

PLATFORM = "upwork"

MAX_KEYWORDS = 18
MIN_TOKEN_LENGTH = 3

STOPWORDS = {
    "a", "an", "and", "or", "the", "to", "for", "with", "my", "me", "find", "job", "jobs",
    "work", "role", "position", "month", "months", "less", "than", "more", "need",
    "looking", "search", "freelance", "freelancer",
}

EXPERIENCE_LEVELS = ("entry_level", "intermediate", "expert")
PROPOSAL_BUCKETS = ("less_than_5", "5_to_10", "10_to_15", "15_to_20", "20_to_50")
PROJECT_LENGTHS = ("less_than_1_month", "1_to_3_months", "3_to_6_months", "more_than_6_months")
HOURS_PER_WEEK = ("less_than_30", "more_than_30")

FIXED_FIELDS = {
    "limit": 50,
    "sortby": "relevance",
    "client_payment_verified": True,
    "client_history": ["1_to_9_hires", "10_plus_hires"],
}

_SEPARATORS = re.compile(r"[,/|]+")
_TOKEN_JUNK = re.compile(r"[^\w\-+.#]|_")

SYSTEM_PROMPT = """You are an expert job search assistant that writes Upwork job search queries.

Analyze the user's query and profile (if provided) and produce parameters for the Upwork Job Search API.

## Parameters you can use

### keywords (string, required)
ONE string of 10-18 distinct keywords separated by spaces (not commas).
Mix job roles, tools/technologies and domain terms. When a profile is provided, pull extra
keywords from it: titles, industries, certifications, education.
Avoid filler such as "job", "freelance" or "remote" unless explicitly requested.
Examples:
- "Technical Support Engineer SRE Observability Prometheus Grafana Payments FinTech API Incident Management"
- "Data Analyst Python Pandas SQL Machine Learning Statistics Risk Management Finance ETL Dashboards"

### experience_level (array, optional)
"entry_level", "intermediate", "expert". Map profile experience: 0-2 years -> entry_level,
2-5 years -> intermediate, 5+ years -> expert.

### budget (object, optional, only when the user mentions rates)
- hourly (boolean), min_budget_hourly (number), max_budget_hourly (number)
- fixed_price (boolean), min_budget_fixed_price (number), max_budget_fixed_price (number)

### numbers_of_proposals (array, optional)
"less_than_5", "5_to_10", "10_to_15", "15_to_20", "20_to_50"

### project_length (array, optional)
"less_than_1_month", "1_to_3_months", "3_to_6_months", "more_than_6_months"

### hours_per_week (array, optional)
"less_than_30" (part-time), "more_than_30" (full-time)

### contract_to_hire_role (boolean, optional)
true only if the user wants long-term employment potential.

## Guidelines
1. Build keywords from the query intent plus profile-derived skills and domain terms.
2. "$50/hr" or "at least $40" -> set the matching budget filters.
3. Only include filters that are explicitly mentioned or clearly implied.

## Response format
Return a JSON object:
{
  "queries": [
    {
      "description": "Human-readable description of this search",
      "params": { "keywords": "..." },
      "relevanceScore": 8,
      "reasoning": "Why this query was created"
    }
  ]
}
Never output empty arrays or unnecessary filters."""


def _tokenize(text: str) -> list[str]:
    return [t for t in _SEPARATORS.sub(" ", text or "").split() if t]


def _add_tokens(tokens: list[str], out: dict[str, None]) -> None:
    for token in tokens:
        cleaned = _TOKEN_JUNK.sub("", token)
        if not cleaned:
            continue
        lowered = cleaned.lower()
        if lowered in STOPWORDS or len(lowered) < MIN_TOKEN_LENGTH:
            continue
        out.setdefault(cleaned, None)


def _inferred_terms(tokens: list[str], rules: list[KeywordInference]) -> list[str]:
    joined = " ".join(tokens).lower()
    inferred = []
    for rule in rules:
        if all(term in joined for term in rule.when):
            inferred.extend(rule.add)
    return inferred


def augment_keywords(
    user_query: str,
    summary: Optional[ProfileSummary],
    model_keywords: Any,
    rules: Optional[list[KeywordInference]] = None,
) -> str:
    """Build the final keyword string from model output, the query and the profile.

    Tokens are collected in order (model keywords, query, profile titles, companies,
    certifications, education degree/field, industry), deduplicated, stripped of
    stopwords and short tokens, extended by the inference rules and cut to 18.
    """
    if rules is None:
        rules = SearchConfig().upwork_keyword_inferences

    out: dict[str, None] = {}
    _add_tokens(_tokenize(model_keywords if isinstance(model_keywords, str) else ""), out)
    _add_tokens(_tokenize(user_query), out)

    if summary is not None:
        titles = [w.get("title") for w in summary.work_experience if w.get("title")]
        companies = [w.get("company") for w in summary.work_experience if w.get("company")]
        education = []
        for edu in summary.education:
            education.extend(v for v in (edu.get("degree"), edu.get("field_of_study")) if v)
        industry = [summary.industry] if summary.industry else []

        for group in (titles, companies, [c for c in summary.certifications if c], education, industry):
            _add_tokens(_tokenize(" ".join(group)), out)

    _add_tokens(_inferred_terms(list(out), rules), out)

    return " ".join(list(out)[:MAX_KEYWORDS])


def _validate_budget(raw: Any) -> dict[str, Any]:
    if not isinstance(raw, dict):
        return {}
    budget: dict[str, Any] = {}
    if raw.get("hourly") is True:
        budget["hourly"] = True
        for key in ("min_budget_hourly", "max_budget_hourly"):
            if as_number(raw.get(key)) is not None:
                budget[key] = raw[key]
    if raw.get("fixed_price") is True:
        budget["fixed_price"] = True
        for key in ("min_budget_fixed_price", "max_budget_fixed_price"):
            if as_number(raw.get(key)) is not None:
                budget[key] = raw[key]
    return budget


def validate_params(raw: Any) -> dict[str, Any]:
    """Keep only well-typed, allowed model parameters; fixed fields are dropped here."""
    raw = raw if isinstance(raw, dict) else {}
    params: dict[str, Any] = {}

    keywords = as_text(raw.get("keywords"))
    if keywords:
        params["keywords"] = keywords

    for name, allowed in (
        ("experience_level", EXPERIENCE_LEVELS),
        ("numbers_of_proposals", PROPOSAL_BUCKETS),
        ("project_length", PROJECT_LENGTHS),
        ("hours_per_week", HOURS_PER_WEEK),
    ):
        values = allowed_values(raw.get(name), allowed)
        if values:
            params[name] = values

    budget = _validate_budget(raw.get("budget"))
    if budget:
        params["budget"] = budget

    contract_to_hire = as_bool(raw.get("contract_to_hire_role"))
    if contract_to_hire is not None:
        params["contract_to_hire_role"] = contract_to_hire

    return params


def apply_fixed_overrides(params: dict[str, Any]) -> dict[str, Any]:
    """Return a copy with the pinned fields written last."""
    final = dict(params)
    for key, value in FIXED_FIELDS.items():
        final[key] = list(value) if isinstance(value, list) else value
    return final


def generate(
    user_query: str,
    summary: Optional[ProfileSummary],
    llm: JSONModel,
    temperature: float = 0.7,
    rules: Optional[list[KeywordInference]] = None,
) -> list[GeneratedQuery]:
    """Generate validated Upwork searches; keywords always come from augmentation."""
    user_query = require_query(user_query)
    user_prompt = build_user_prompt(
        user_query,
        summary,
        "Generate 1 optimized Upwork search query based on the query and profile.",
        "Generate 1 optimized Upwork search query based on the query alone.",
    )

    parsed = llm.complete_json(SYSTEM_PROMPT, user_prompt, temperature)

    raw_items = parsed.get("queries")
    items = [item for item in raw_items if isinstance(item, dict)] if isinstance(raw_items, list) else []
    if not items:
        logger.warning("AI returned no Upwork queries, building one from the user query")
        items = [{}]

    queries = []
    for index, item in enumerate(items):
        raw_params = item.get("params") if isinstance(item.get("params"), dict) else {}
        augmented = dict(raw_params)
        augmented["keywords"] = augment_keywords(user_query, summary, raw_params.get("keywords"), rules)
        if augmented["keywords"] != raw_params.get("keywords"):
            logger.debug("Upwork keywords augmented: %r -> %r", raw_params.get("keywords"), augmented["keywords"])

        params = apply_fixed_overrides(validate_params(augmented))
        log_overrides(PLATFORM, raw_params, FIXED_FIELDS)

        description = item.get("description")
        reasoning = item.get("reasoning")
        queries.append(GeneratedQuery(
            platform=PLATFORM,
            description=description if isinstance(description, str) and description else f"Upwork Search {index + 1}",
            relevance_score=relevance(item.get("relevanceScore"), 5),
            reasoning=reasoning if isinstance(reasoning, str) and reasoning else "No reasoning provided",
            params=params,
        ))

    logger.info("Generated %d Upwork search queries", len(queries))
    return queries
