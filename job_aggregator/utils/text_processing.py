"""Query tokenizing, description sanitizing, and number/budget formatting helpers."""

import json
import math
import re
from typing import Any, Iterable, Optional

from bs4 import BeautifulSoup

DESCRIPTION_CHARS = 500

_MARKDOWN_HEADER = re.compile(r"^#{1,6}\s+", re.MULTILINE)
_BUDGET_NUMBER = re.compile(r"\$?([\d,]+(?:\.\d+)?)")


def query_words(text: str, min_length: int = 3, limit: int | None = None) -> list[str]:
    """Whitespace-split words of at least min_length characters, in order."""
    words = [w for w in (text or "").split() if len(w) >= min_length]
    return words[:limit] if limit is not None else words


def dedupe_preserving_order(items: Iterable[str]) -> list[str]:
    """Exact-match dedup, first occurrence wins."""
    seen = set()
    unique = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def strip_html(text: str) -> str:
    """Remove HTML tags, keeping the text content."""
    if not text or "<" not in text:
        return text or ""
    return BeautifulSoup(text, "lxml").get_text()


def strip_markdown(text: str) -> str:
    """Remove markdown headers and emphasis markers, unescape "\\-"."""
    if not text:
        return ""
    text = _MARKDOWN_HEADER.sub("", text)
    text = text.replace("**", "").replace("*", "")
    return text.replace("\\-", "-")


def sanitize_description(value: Any, limit: int = DESCRIPTION_CHARS) -> str:
    """Markdown- and HTML-free description capped at limit characters.

    Scrapers occasionally return a structured description; it is serialized as JSON.
    """
    if not value:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)[:limit]
    text = strip_html(strip_markdown(str(value)))
    return text.strip()[:limit]


def format_number(value: float) -> str:
    """Abbreviate large numbers: 1500000 -> "1.5M", 85000 -> "85K"."""
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.0f}K"
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def parse_budget(text: Any) -> Optional[float]:
    """First money amount in a budget string: "$1,500 USD" -> 1500.0."""
    if text is None or text == "":
        return None
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return to_number(text)
    match = _BUDGET_NUMBER.search(str(text))
    if not match:
        return None
    try:
        return float(match.group(1).replace(",", ""))
    except ValueError:
        return None


def is_hourly_budget(budget_range: Any) -> bool:
    lowered = text_or(budget_range).lower()
    return "/ hr" in lowered or "/hr" in lowered


def split_csv(text: Optional[str]) -> list[str]:
    """Split a comma-separated string into trimmed non-empty parts."""
    if not text:
        return []
    return [part.strip() for part in str(text).split(",") if part.strip()]


def text_or(value: Any, default: Optional[str] = "") -> Optional[str]:
    """value if it is a non-empty string, else default."""
    return value if isinstance(value, str) and value else default


def string_items(value: Any) -> list[str]:
    """Trimmed strings from a list or a comma-separated string; anything else is []."""
    if isinstance(value, str):
        return split_csv(value)
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def to_number(value: Any) -> Optional[float]:
    """Numeric value of an int, float or numeric string; None otherwise."""
    if isinstance(value, bool) or value is None:
        return None
    if not isinstance(value, (int, float)):
        value = str(value).replace(",", "").strip()
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def format_salary(
    currency: Optional[str],
    minimum: Any = None,
    maximum: Any = None,
    value: Any = None,
    unit: Optional[str] = None,
) -> Optional[str]:
    """Salary display string: "USD 90K - 120K / year", "EUR 60K / year", or None.

    Zero and missing amounts count as absent. A range needs both bounds.
    """
    low, high, single = to_number(minimum), to_number(maximum), to_number(value)
    unit = text_or(unit, "year").lower()
    currency = text_or(currency)
    prefix = f"{currency} " if currency else ""

    if low and high:
        return f"{prefix}{format_number(low)} - {format_number(high)} / {unit}"
    if single:
        return f"{prefix}{format_number(single)} / {unit}"
    return None
