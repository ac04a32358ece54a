"""Profile routes: CV upload parsing and LinkedIn import."""

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from job_aggregator.config import AppConfig
from job_aggregator.llm.client import JSONModel
from job_aggregator.profile.linkedin_profile import fetch_linkedin_profile
from job_aggregator.profile.normalizer import cv_to_profile, linkedin_to_profile
from job_aggregator.profile.resume_parser import MAX_FILE_SIZE, extract_document_text, parse_cv

from .dependencies import get_config, get_llm

logger = logging.getLogger("job_aggregator.web.profile")

router = APIRouter(prefix="/api")


class LinkedInRequest(BaseModel):
    linkedinUrl: str = ""


@router.post("/parse-cv")
async def upload_cv(
    file: UploadFile = File(...),
    config: AppConfig = Depends(get_config),
    llm: JSONModel = Depends(get_llm),
):
    # One byte past the limit is enough to reject the upload
    data = await file.read(MAX_FILE_SIZE + 1)
    logger.info("Processing CV upload %s (%d bytes)", file.filename, len(data))

    text = await run_in_threadpool(extract_document_text, file.filename or "", data)
    cv = await run_in_threadpool(parse_cv, text, llm, config.llm.cv_temperature)
    return {"data": cv, "profile": cv_to_profile(cv).to_dict()}


@router.post("/linkedin-profile")
def linkedin_profile(body: LinkedInRequest, config: AppConfig = Depends(get_config)):
    record = fetch_linkedin_profile(body.linkedinUrl, config.api_keys.enrichlayer_api_key)
    return {
        "success": True,
        "data": linkedin_to_profile(record).to_dict(),
        "raw": record,
    }
