from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, File, Form, Request, UploadFile

from app.api.v1.uploads import flatten_form_list, raise_assessment_error, resume_text_from_request
from app.assessment.errors import AssessmentError
from app.core.rate_limit import rate_limit
from app.schemas.resume import AnalyzeResumeResponse, ProjectPlanRequest, ProjectPlanResponse
from app.services.project_plan import DEFAULT_ROLE, generate_project_blueprint
from app.services.resume_analysis import analyze_resume

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/analyze-resume", response_model=AnalyzeResumeResponse)
@rate_limit()
async def analyze_resume_upload(
    request: Request,
    resume: UploadFile | None = File(default=None),
    resume_text: str | None = Form(default=None, alias="resumeText"),
    required_skills: list[str] | None = Form(default=None, alias="requiredSkills"),
):
    _ = request
    try:
        text = await resume_text_from_request(resume, resume_text)
        analysis = await asyncio.to_thread(analyze_resume, text, flatten_form_list(required_skills))
    except AssessmentError as exc:
        logger.warning("resume_analysis_failed: %s", exc)
        raise_assessment_error(exc)
    return AnalyzeResumeResponse(**analysis.model_dump())


@router.post("/generate-project-plan", response_model=ProjectPlanResponse)
@rate_limit()
async def generate_project_plan(request: Request, payload: ProjectPlanRequest):
    _ = request
    role = payload.role or DEFAULT_ROLE
    blueprint = await asyncio.to_thread(
        generate_project_blueprint,
        role,
        payload.missing_skills,
        payload.extracted_skills,
    )
    return ProjectPlanResponse(message="Project blueprint generated successfully.", role=role, blueprint=blueprint)
