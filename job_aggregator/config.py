"""YAML config loading and validation."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_TIMEOUTS = {
    "linkedin": 120,
    "upwork": 120,
    "indeed": 120,
    "behance": 70,
    "freelance": 120,
}

# Domain term(s) found in the lower-cased keyword text -> extra discovery terms
DEFAULT_KEYWORD_INFERENCES = [
    {"when": ["adyen"], "add": ["Payments", "FinTech"]},
    {"when": ["monitoring"], "add": ["Observability", "SRE"]},
    {"when": ["data", "science"], "add": ["Python", "MachineLearning"]},
    {"when": ["smart", "contract"], "add": ["Solidity", "Blockchain", "Web3"]},
]


@dataclass
class ApiKeys:
    openai_api_key: str = ""
    apify_api_token: str = ""
    enrichlayer_api_key: str = ""


@dataclass
class LLMConfig:
    model: str = "gpt-4o-mini"
    query_temperature: float = 0.7
    selector_temperature: float = 0.3
    cv_temperature: float = 0.1


@dataclass
class KeywordInference:
    when: list[str]
    add: list[str]


@dataclass
class SearchConfig:
    linkedin_queries: int = 1
    timeouts: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_TIMEOUTS))
    upwork_keyword_inferences: list[KeywordInference] = field(
        default_factory=lambda: [KeywordInference(**rule) for rule in DEFAULT_KEYWORD_INFERENCES]
    )
    max_workers: int = 5

    def timeout_for(self, platform: str) -> int:
        return self.timeouts.get(platform, DEFAULT_TIMEOUTS.get(platform, 120))


@dataclass
class AppConfig:
    api_keys: ApiKeys = field(default_factory=ApiKeys)
    llm: LLMConfig = field(default_factory=LLMConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    log_dir: str = "logs"
    log_level: str = "INFO"


def _parse_inferences(raw_rules) -> list[KeywordInference]:
    rules = []
    for rule in raw_rules or []:
        if not isinstance(rule, dict):
            continue
        when = [str(w).lower() for w in rule.get("when", []) if str(w).strip()]
        add = [str(a) for a in rule.get("add", []) if str(a).strip()]
        if when and add:
            rules.append(KeywordInference(when=when, add=add))
    return rules


def load_config(config_path: Optional[str] = "config.yaml") -> AppConfig:
    """Load configuration from a YAML file, with environment variables taking precedence.

    Passing None skips the file and builds defaults plus environment overrides.
    """
    raw = {}
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                "Copy config.example.yaml to config.yaml and fill in your settings."
            )
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

    config = AppConfig()

    # API keys (env vars take precedence)
    keys_raw = raw.get("api_keys", {}) or {}
    config.api_keys = ApiKeys(
        openai_api_key=os.environ.get("OPENAI_API_KEY", keys_raw.get("openai_api_key", "")),
        apify_api_token=os.environ.get("APIFY_API_TOKEN", keys_raw.get("apify_api_token", "")),
        enrichlayer_api_key=os.environ.get("ENRICHLAYER_API_KEY", keys_raw.get("enrichlayer_api_key", "")),
    )

    # LLM
    llm_raw = raw.get("llm", {}) or {}
    config.llm = LLMConfig(
        model=llm_raw.get("model", "gpt-4o-mini"),
        query_temperature=float(llm_raw.get("query_temperature", 0.7)),
        selector_temperature=float(llm_raw.get("selector_temperature", 0.3)),
        cv_temperature=float(llm_raw.get("cv_temperature", 0.1)),
    )

    # Search
    search_raw = raw.get("search", {}) or {}
    timeouts = dict(DEFAULT_TIMEOUTS)
    timeouts.update({k: int(v) for k, v in (search_raw.get("timeouts") or {}).items()})
    config.search = SearchConfig(
        linkedin_queries=int(search_raw.get("linkedin_queries", 1)),
        timeouts=timeouts,
        max_workers=int(search_raw.get("max_workers", 5)),
    )
    if "upwork_keyword_inferences" in search_raw:
        config.search.upwork_keyword_inferences = _parse_inferences(search_raw["upwork_keyword_inferences"])

    config.log_dir = raw.get("log_dir", "logs")
    config.log_level = str(raw.get("log_level", "INFO"))

    return config


def validate_config(config: AppConfig) -> list[str]:
    """Return list of validation warnings (empty = OK)."""
    warnings = []

    if not config.api_keys.openai_api_key:
        warnings.append("No OpenAI API key configured - query generation and CV parsing will fail")

    if not config.api_keys.apify_api_token:
        warnings.append("No Apify API token configured - job searches will fail")

    if not config.api_keys.enrichlayer_api_key:
        warnings.append("No EnrichLayer API key configured - LinkedIn profile import is unavailable")

    if config.search.linkedin_queries < 1:
        warnings.append("search.linkedin_queries must be at least 1")

    for platform, seconds in config.search.timeouts.items():
        if seconds <= 0:
            warnings.append(f"Timeout for {platform} must be positive (got {seconds})")

    return warnings
