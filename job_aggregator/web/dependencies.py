"""Shared FastAPI dependencies: configuration and lazily built service clients."""

from fastapi import Request

from job_aggregator.config import AppConfig
from job_aggregator.jobs.scraper import ApifyScraper
from job_aggregator.llm.client import JSONModel, LLMClient
from job_aggregator.pipeline import SearchSessions


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_llm(request: Request) -> JSONModel:
    """The app's model client, created on first use so a missing key only fails model-backed routes."""
    state = request.app.state
    if state.llm is None:
        state.llm = LLMClient(state.config.api_keys.openai_api_key, model=state.config.llm.model)
    return state.llm


def get_scraper(request: Request) -> ApifyScraper:
    state = request.app.state
    if state.scraper is None:
        state.scraper = ApifyScraper(state.config.api_keys.apify_api_token)
    return state.scraper


def get_search_sessions(request: Request) -> SearchSessions:
    """Per-client search sessions, shared by every /api/search call on this app."""
    state = request.app.state
    if state.search_sessions is None:
        state.search_sessions = SearchSessions(state.config, get_llm(request), get_scraper(request))
    return state.search_sessions
