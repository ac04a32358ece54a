"""Orchestrator: query generation, search and transformation per platform, fanned out concurrently."""

import logging
import threading
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, Callable, Iterable, Optional

from job_aggregator.config import AppConfig
from job_aggregator.errors import InputError, JobAggregatorError
from job_aggregator.jobs import behance_jobs, freelance_jobs, indeed_jobs, linkedin_jobs, upwork_jobs
from job_aggregator.jobs import executor
from job_aggregator.jobs.models import DisplayRecord
from job_aggregator.jobs.scraper import ApifyScraper
from job_aggregator.llm.client import JSONModel, LLMClient
from job_aggregator.profile.models import Profile, ProfileSummary
from job_aggregator.profile.summarizer import summarize_profile
from job_aggregator.queries import behance, freelance, indeed, linkedin, source_selector, upwork
from job_aggregator.queries.base import GeneratedQuery, require_query

logger = logging.getLogger("job_aggregator.pipeline")


@dataclass(frozen=True)
class Platform:
    name: str
    queries: ModuleType
    jobs: ModuleType


PLATFORMS = {
    "linkedin": Platform("linkedin", linkedin, linkedin_jobs),
    "upwork": Platform("upwork", upwork, upwork_jobs),
    "indeed": Platform("indeed", indeed, indeed_jobs),
    "behance": Platform("behance", behance, behance_jobs),
    "freelance": Platform("freelance", freelance, freelance_jobs),
}


def get_platform(name: str) -> Platform:
    platform = PLATFORMS.get((name or "").lower())
    if platform is None:
        raise InputError(f"Unknown platform: {name} (supported: {', '.join(PLATFORMS)})")
    return platform


def generate_query(
    platform: str,
    query: str,
    summary: Optional[ProfileSummary],
    llm: JSONModel,
    config: AppConfig,
) -> list[GeneratedQuery]:
    """Generate validated searches for one platform.

    LinkedIn and Upwork may return several searches; the others always return one.
    """
    entry = get_platform(platform)
    temperature = config.llm.query_temperature

    if entry.name == "linkedin":
        return linkedin.generate(query, summary, llm, temperature, num_queries=config.search.linkedin_queries)
    if entry.name == "upwork":
        return upwork.generate(query, summary, llm, temperature, rules=config.search.upwork_keyword_inferences)
    return [entry.queries.generate(query, summary, llm, temperature)]


def select_sources(
    query: str,
    summary: Optional[ProfileSummary],
    llm: JSONModel,
    config: AppConfig,
) -> source_selector.SourceSelection:
    return source_selector.select_sources(query, summary, llm, config.llm.selector_temperature)


def search_with_retry(
    platform: str,
    params: dict[str, Any],
    scraper: ApifyScraper,
    config: AppConfig,
) -> list[dict[str, Any]]:
    """Run one platform search, relaxing optional filters while it comes back empty."""
    entry = get_platform(platform)
    timeout = config.search.timeout_for(entry.name)

    def run_search(current: dict[str, Any]) -> list[dict[str, Any]]:
        return scraper.run(entry.jobs.ACTOR_ID, entry.jobs.build_run_input(current), timeout)

    return executor.search_with_retry(
        params,
        entry.jobs.RELAXABLE_FIELDS,
        run_search,
        protected=entry.queries.FIXED_FIELDS,
        label=f"{entry.name} search",
    )


def transform_results(platform: str, raw: Iterable[dict[str, Any]]) -> list[DisplayRecord]:
    """Dedup on the platform identity key, drop inactive Behance listings, map to DisplayRecords."""
    entry = get_platform(platform)
    items = [item for item in raw if isinstance(item, dict)]

    if entry.jobs.identity_key is not None:
        before = len(items)
        items = executor.dedupe_by_key(items, entry.jobs.identity_key)
        if len(items) != before:
            logger.info("%s: %d duplicates removed", entry.name, before - len(items))

    if entry.name == "behance":
        items = [item for item in items if behance_jobs.is_active(item)]

    return [entry.jobs.transform(item) for item in items]


def run_platform(
    platform: str,
    query: str,
    summary: Optional[ProfileSummary],
    llm: JSONModel,
    scraper: ApifyScraper,
    config: AppConfig,
) -> list[DisplayRecord]:
    """Generate, search every generated query, then transform the combined raw results."""
    entry = get_platform(platform)
    generated = generate_query(entry.name, query, summary, llm, config)

    raw: list[dict[str, Any]] = []
    for search in generated:
        logger.info("%s: running '%s' (relevance %s)", entry.name, search.description, search.relevance_score)
        raw.extend(search_with_retry(entry.name, search.params, scraper, config))

    records = transform_results(entry.name, raw)
    logger.info("%s: %d results", entry.name, len(records))
    return records


@dataclass
class SearchOutcome:
    generation: int
    results: list[DisplayRecord] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    selection: Optional[source_selector.SourceSelection] = None
    stale: bool = False

    def by_source(self) -> dict[str, list[DisplayRecord]]:
        grouped: dict[str, list[DisplayRecord]] = {}
        for record in self.results:
            grouped.setdefault(record.source, []).append(record)
        return grouped

    def to_dict(self) -> dict[str, Any]:
        return {
            "generation": self.generation,
            "results": [r.to_dict() for r in self.results],
            "totalResults": len(self.results),
            "errors": dict(self.errors),
            "selection": self.selection.to_dict() if self.selection else None,
            "stale": self.stale,
        }


class SearchSession:
    """Runs aggregated searches; a newer search makes older in-flight ones stale.

    Each call to search() takes the next generation number. Platform results are
    merged only while their generation is still the latest, so a slow search that
    finishes after a newer one started contributes nothing.
    """

    def __init__(self, config: AppConfig, llm: JSONModel, scraper: ApifyScraper):
        self.config = config
        self.llm = llm
        self.scraper = scraper
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def generation(self) -> int:
        return self._generation

    def _next_generation(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def _choose_platforms(
        self,
        query: str,
        summary: Optional[ProfileSummary],
        platforms: Optional[Iterable[str]],
        auto_select: bool,
    ) -> tuple[list[str], Optional[source_selector.SourceSelection]]:
        if platforms is not None:
            chosen = [get_platform(p).name for p in platforms]
            return list(dict.fromkeys(chosen)), None

        if not auto_select:
            return list(PLATFORMS), None

        try:
            selection = select_sources(query, summary, self.llm, self.config)
        except JobAggregatorError as e:
            logger.error("Source selection failed, searching all platforms: %s", e)
            return list(PLATFORMS), None
        return selection.selected, selection

    def search(
        self,
        query: str,
        profile: Optional[Profile] = None,
        platforms: Optional[Iterable[str]] = None,
        auto_select: bool = False,
        on_results: Optional[Callable[[str, list[DisplayRecord]], None]] = None,
    ) -> SearchOutcome:
        query = require_query(query)
        generation = self._next_generation()
        summary = summarize_profile(profile)
        chosen, selection = self._choose_platforms(query, summary, platforms, auto_select)
        outcome = SearchOutcome(generation=generation, selection=selection)

        if not chosen:
            return outcome

        logger.info("Search #%d for '%s' on %s", generation, query, ", ".join(chosen))
        workers = max(1, min(self.config.search.max_workers, len(chosen)))

        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(run_platform, name, query, summary, self.llm, self.scraper, self.config): name
                for name in chosen
            }
            for future in as_completed(futures):
                name = futures[future]
                try:
                    records = future.result()
                except JobAggregatorError as e:
                    logger.error("%s failed: %s", name, e)
                    outcome.errors[name] = e.message
                    continue
                except Exception as e:
                    logger.exception("%s failed unexpectedly", name)
                    outcome.errors[name] = str(e) or type(e).__name__
                    continue

                if not self.is_current(generation):
                    logger.info("Search #%d is stale, discarding %d %s results", generation, len(records), name)
                    continue

                outcome.results.extend(records)
                if on_results is not None:
                    on_results(name, records)

        if not self.is_current(generation):
            outcome.stale = True
            outcome.results = []

        logger.info(
            "Search #%d complete: %d results, %d platform errors%s",
            generation, len(outcome.results), len(outcome.errors), " (stale)" if outcome.stale else "",
        )
        return outcome


class SearchSessions:
    """SearchSession per client key, so a client's newer search only supersedes its own.

    Requests without a key get a fresh session and are never made stale. The least
    recently used keys are dropped past max_clients.
    """

    def __init__(self, config: AppConfig, llm: JSONModel, scraper: ApifyScraper, max_clients: int = 1024):
        self.config = config
        self.llm = llm
        self.scraper = scraper
        self.max_clients = max_clients
        self._sessions: OrderedDict[str, SearchSession] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def for_client(self, client_id: Optional[str]) -> SearchSession:
        if not client_id:
            return SearchSession(self.config, self.llm, self.scraper)

        with self._lock:
            session = self._sessions.get(client_id)
            if session is not None:
                self._sessions.move_to_end(client_id)
                return session

            session = SearchSession(self.config, self.llm, self.scraper)
            self._sessions[client_id] = session
            if len(self._sessions) > self.max_clients:
                evicted, _ = self._sessions.popitem(last=False)
                logger.debug("Dropped search session for client %s", evicted)
            return session


def build_session(config: AppConfig, llm: Optional[JSONModel] = None, scraper: Optional[ApifyScraper] = None) -> SearchSession:
    """SearchSession wired to the configured OpenAI and Apify credentials."""
    llm = llm or LLMClient(config.api_keys.openai_api_key, model=config.llm.model)
    scraper = scraper or ApifyScraper(config.api_keys.apify_api_token)
    return SearchSession(config, llm, scraper)
