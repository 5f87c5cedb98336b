from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from app.schemas.assessment import AssessmentModel
from app.schemas.fields import coerce_string_list


class ResumeAnalysis(AssessmentModel):
    score: int = Field(ge=0, le=100)
    extracted_skills: list[str] = Field(default_factory=list)
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    suggestions: str = ""


class Milestone(AssessmentModel):
    week: int = Field(ge=1)
    title: str
    goal: str


class ProjectBlueprint(AssessmentModel):
    title: str
    summary: str
    milestones: list[Milestone] = Field(default_factory=list, max_length=6)
    deliverables: list[str] = Field(default_factory=list, max_length=8)
    resume_bullets: list[str] = Field(default_factory=list, max_length=6)


class ProjectPlanRequest(AssessmentModel):
    role: str = ""
    missing_skills: list[str] = Field(default_factory=list)
    extracted_skills: list[str] = Field(default_factory=list)

    @field_validator("role", mode="before")
    @classmethod
    def _strip_role(cls, value: Any) -> str:
        return str(value or "").strip()

    @field_validator("missing_skills", "extracted_skills", mode="before")
    @classmethod
    def _coerce_skills(cls, value: Any) -> list[str]:
        return coerce_string_list(value)


class ProjectPlanResponse(AssessmentModel):
    message: str
    role: str
    blueprint: ProjectBlueprint


class AnalyzeResumeResponse(ResumeAnalysis):
    pass
