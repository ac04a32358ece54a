"""FastAPI application factory."""

import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from job_aggregator.config import AppConfig, load_config
from job_aggregator.errors import (
    DocumentError,
    InputError,
    JobAggregatorError,
    ProfileNotFound,
    ProfileRateLimited,
    ProfileUnauthorized,
)
from job_aggregator.jobs.scraper import ApifyScraper
from job_aggregator.llm.client import JSONModel

from .profile import router as profile_router
from .search import router as search_router

logger = logging.getLogger("job_aggregator.web")

ERROR_STATUS = (
    (InputError, 400),
    (DocumentError, 400),
    (ProfileNotFound, 404),
    (ProfileUnauthorized, 401),
    (ProfileRateLimited, 429),
)


def status_for(error: JobAggregatorError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 500


def create_app(
    config: Optional[AppConfig] = None,
    llm: Optional[JSONModel] = None,
    scraper: Optional[ApifyScraper] = None,
) -> FastAPI:
    app = FastAPI(title="Job Aggregator")

    app.state.config = config or load_config(os.environ.get("JOB_AGGREGATOR_CONFIG"))
    app.state.llm = llm
    app.state.scraper = scraper
    app.state.search_sessions = None

    @app.exception_handler(JobAggregatorError)
    async def handle_aggregator_error(request: Request, exc: JobAggregatorError):
        status = status_for(exc)
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse({"error": exc.message}, status_code=status)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("%s %s failed unexpectedly", request.method, request.url.path)
        return JSONResponse({"error": str(exc) or "Internal server error"}, status_code=500)

    app.include_router(search_router)
    app.include_router(profile_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
