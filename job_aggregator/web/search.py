"""Search routes: source selection, query generation, per-platform and aggregated search."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from job_aggregator import pipeline
from job_aggregator.config import AppConfig
from job_aggregator.errors import InputError
from job_aggregator.jobs.scraper import ApifyScraper
from job_aggregator.llm.client import JSONModel
from job_aggregator.profile.models import Profile
from job_aggregator.profile.summarizer import summarize_profile
from job_aggregator.queries.base import require_query

from .dependencies import get_config, get_llm, get_scraper, get_search_sessions

logger = logging.getLogger("job_aggregator.web.search")

router = APIRouter(prefix="/api")


class QueryRequest(BaseModel):
    query: str = ""
    profile: Optional[dict[str, Any]] = None


class SearchRequest(QueryRequest):
    platforms: Optional[list[str]] = None
    auto_select: bool = False
    # Searches supersede earlier in-flight ones from the same client only
    client_id: Optional[str] = None


def _profile(data: Optional[dict[str, Any]]) -> Optional[Profile]:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise InputError("profile must be an object")
    return Profile.from_dict(data)


@router.post("/select-sources")
def select_sources(
    body: QueryRequest,
    config: AppConfig = Depends(get_config),
    llm: JSONModel = Depends(get_llm),
):
    query = require_query(body.query)
    selection = pipeline.select_sources(query, summarize_profile(_profile(body.profile)), llm, config)
    return {
        "success": True,
        "sources": selection.to_dict(),
        "selected": selection.selected,
        "originalQuery": query,
    }


@router.post("/create-search-query/{platform}")
def create_search_query(
    platform: str,
    body: QueryRequest,
    config: AppConfig = Depends(get_config),
    llm: JSONModel = Depends(get_llm),
):
    entry = pipeline.get_platform(platform)
    query = require_query(body.query)
    generated = pipeline.generate_query(entry.name, query, summarize_profile(_profile(body.profile)), llm, config)
    return {
        "success": True,
        "generatedQueries": [q.to_dict() for q in generated],
        "originalQuery": query,
    }


@router.post("/job-search/{platform}")
def job_search(
    platform: str,
    body: QueryRequest,
    config: AppConfig = Depends(get_config),
    llm: JSONModel = Depends(get_llm),
    scraper: ApifyScraper = Depends(get_scraper),
):
    entry = pipeline.get_platform(platform)
    query = require_query(body.query)
    summary = summarize_profile(_profile(body.profile))

    generated = pipeline.generate_query(entry.name, query, summary, llm, config)
    raw = []
    for search in generated:
        raw.extend(pipeline.search_with_retry(entry.name, search.params, scraper, config))
    results = pipeline.transform_results(entry.name, raw)

    logger.info("%s search for '%s': %d results", entry.name, query, len(results))
    return {
        "results": [r.to_dict() for r in results],
        "totalResults": len(results),
        "searchQueries": [q.to_dict() for q in generated],
    }


@router.post("/search")
def search(body: SearchRequest, sessions: pipeline.SearchSessions = Depends(get_search_sessions)):
    outcome = sessions.for_client(body.client_id).search(
        body.query,
        profile=_profile(body.profile),
        platforms=body.platforms,
        auto_select=body.auto_select,
    )
    return outcome.to_dict()
