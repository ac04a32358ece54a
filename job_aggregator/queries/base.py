"""Shared pieces for the per-platform query generators."""

import json
import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from job_aggregator.errors import InputError
from job_aggregator.profile.models import ProfileSummary

logger = logging.getLogger("job_aggregator.queries")


@dataclass
class GeneratedQuery:
    """One validated search for a platform, with fixed fields already injected."""

    platform: str
    description: str
    relevance_score: float
    reasoning: str
    params: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def require_query(user_query: Optional[str]) -> str:
    """Reject empty query text before any model call."""
    if not isinstance(user_query, str) or not user_query.strip():
        raise InputError("Query is required")
    return user_query.strip()


def build_user_prompt(user_query: str, summary: Optional[ProfileSummary], with_profile: str, without_profile: str) -> str:
    """Embed the query and (when present) the JSON profile summary in the user message."""
    if summary is not None:
        return (
            f'User Query: "{user_query}"\n\n'
            "User Profile Summary:\n"
            f"{json.dumps(summary.to_prompt_dict(), indent=2)}\n\n"
            f"{with_profile}"
        )
    return f'User Query: "{user_query}"\n\nNo user profile available. {without_profile}'


def as_bool(value: Any) -> Optional[bool]:
    """Only real booleans are accepted; anything else is treated as absent."""
    return value if isinstance(value, bool) else None


def as_number(value: Any) -> Optional[float]:
    """Real, finite numbers only; JSON NaN and Infinity count as absent."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def as_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def string_list(value: Any) -> list[str]:
    """Non-blank strings from a list, trimmed; anything else yields []."""
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def allowed_values(value: Any, allowed: tuple[str, ...]) -> list[str]:
    """Members of value that appear in the closed enumeration, order kept."""
    return [item for item in string_list(value) if item in allowed]


def relevance(value: Any, default: float) -> float:
    number = as_number(value)
    return number if number is not None else default


def log_overrides(platform: str, before: dict, after: dict) -> None:
    """Record any model-supplied value that a fixed field replaced."""
    for key, value in after.items():
        if key in before and before[key] != value:
            logger.info("%s: fixed field %s overrode model value %r -> %r", platform, key, before[key], value)
