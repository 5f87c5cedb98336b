from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, File, Form, Request, UploadFile

from app.api.v1.uploads import flatten_form_list, raise_assessment_error, resume_text_from_request
from app.assessment.catalog import get_company_catalog
from app.assessment.errors import AssessmentError
from app.core.rate_limit import rate_limit
from app.schemas.assessment import (
    CompaniesResponse,
    GenerateClaimTestResponse,
    StartInterviewRequest,
    StartInterviewResponse,
    SubmitClaimTestRequest,
    SubmitClaimTestResponse,
    SubmitInterviewRequest,
    SubmitInterviewResponse,
)
from app.services.assessment_service import get_claim_test_service, get_interview_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/assessment/companies", response_model=CompaniesResponse)
async def list_companies():
    return CompaniesResponse(companies=get_company_catalog().summaries())


@router.post("/generate-claim-test", response_model=GenerateClaimTestResponse)
@rate_limit()
async def generate_claim_test(
    request: Request,
    resume: UploadFile | None = File(default=None),
    resume_text: str | None = Form(default=None, alias="resumeText"),
    company_ids: list[str] | None = Form(default=None, alias="companyIds"),
):
    _ = request
    try:
        text = await resume_text_from_request(resume, resume_text)
        test = await asyncio.to_thread(
            get_claim_test_service().create_claim_test,
            text,
            flatten_form_list(company_ids),
        )
    except AssessmentError as exc:
        logger.warning("claim_test_generation_failed: %s", exc)
        raise_assessment_error(exc)

    return GenerateClaimTestResponse(
        message="Resume-based claim verification test generated successfully.",
        available_companies=get_company_catalog().summaries(),
        **test.model_dump(),
    )


@router.post("/submit-claim-test", response_model=SubmitClaimTestResponse)
@rate_limit()
async def submit_claim_test(request: Request, payload: SubmitClaimTestRequest):
    _ = request
    try:
        result = await asyncio.to_thread(
            get_claim_test_service().evaluate_claim_test,
            payload.test_id,
            payload.answers,
            payload.company_ids,
        )
    except AssessmentError as exc:
        logger.warning("claim_test_submission_failed: %s", exc)
        raise_assessment_error(exc)

    return SubmitClaimTestResponse(
        message="Claim verification completed. Company shortlist generated.",
        **result.model_dump(),
    )


@router.post("/start-interview-sim", response_model=StartInterviewResponse)
@rate_limit()
async def start_interview_simulation(request: Request, payload: StartInterviewRequest):
    _ = request
    simulation = await asyncio.to_thread(
        get_interview_service().create_interview_simulation,
        payload.company_id,
        payload.resume_skills,
    )
    return StartInterviewResponse(
        message="Interview simulation started.",
        available_companies=get_company_catalog().summaries(),
        **simulation.model_dump(),
    )


@router.post("/submit-interview-sim", response_model=SubmitInterviewResponse)
@rate_limit()
async def submit_interview_simulation(request: Request, payload: SubmitInterviewRequest):
    _ = request
    try:
        result = await asyncio.to_thread(
            get_interview_service().evaluate_interview_simulation,
            payload.session_id,
            payload.answers,
        )
    except AssessmentError as exc:
        logger.warning("interview_submission_failed: %s", exc)
        raise_assessment_error(exc)

    return SubmitInterviewResponse(message="Interview simulation evaluated successfully.", **result.model_dump())
