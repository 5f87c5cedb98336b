from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.schemas.fields import coerce_string_list

QuestionType = Literal["mcq", "scenario", "debug"]


class AssessmentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenAssessmentModel(AssessmentModel):
    model_config = ConfigDict(frozen=True)


class ClaimStatus(str, Enum):
    PENDING = "pending"
    NOT_ATTEMPTED = "not_attempted"
    WEAKLY_VERIFIED = "weakly_verified"
    PARTIALLY_VERIFIED = "partially_verified"
    STRONGLY_VERIFIED = "strongly_verified"


class RequiredSkill(FrozenAssessmentModel):
    skill: str = Field(min_length=1)
    weight: int = Field(gt=0)


class CompanyTemplate(FrozenAssessmentModel):
    company_id: str = Field(min_length=1)
    company_name: str = Field(min_length=1)
    role: str = ""
    required_skills: tuple[RequiredSkill, ...] = Field(min_length=1)

    @field_validator("company_id")
    @classmethod
    def _normalize_company_id(cls, value: str) -> str:
        return value.strip().lower()


class CompanySummary(FrozenAssessmentModel):
    company_id: str
    company_name: str
    role: str


class PublicQuestion(FrozenAssessmentModel):
    id: str
    skill: str
    type: QuestionType
    prompt: str
    options: tuple[str, ...] = Field(min_length=2)
    weight: int = Field(gt=0)


class Question(PublicQuestion):
    correct_answer: int = Field(ge=0)

    @model_validator(mode="after")
    def _validate_answer_index(self):
        if self.correct_answer >= len(self.options):
            raise ValueError("correct_answer must index into options")
        return self


class Round(FrozenAssessmentModel):
    round_id: str
    title: str
    questions: tuple[Question, ...] = Field(default_factory=tuple)


class PublicRound(FrozenAssessmentModel):
    round_id: str
    title: str
    questions: tuple[PublicQuestion, ...] = Field(default_factory=tuple)


class ClaimTest(FrozenAssessmentModel):
    test_id: str
    created_at: datetime
    claimed_skills: tuple[str, ...] = Field(max_length=8)
    questions: tuple[Question, ...]
    requested_companies: tuple[str, ...] = Field(default_factory=tuple)


class InterviewSession(FrozenAssessmentModel):
    session_id: str
    company: CompanyTemplate
    resume_skills: tuple[str, ...] = Field(default_factory=tuple)
    rounds: tuple[Round, ...]
    created_at: datetime


class AnswerSubmission(AssessmentModel):
    question_id: str = ""
    selected_option: Any = None

    @field_validator("question_id", mode="before")
    @classmethod
    def _coerce_question_id(cls, value: Any) -> str:
        return str(value or "")


class SkillScore(AssessmentModel):
    skill: str
    score: int


class CompanyFit(AssessmentModel):
    company_id: str
    company_name: str
    role: str
    fit_score: int
    test_score: int
    claim_coverage: int


class CandidateAssessment(FrozenAssessmentModel):
    """Per-test outcome record: pending on creation, graded on submission."""

    test_id: str
    claimed_skills: tuple[str, ...] = Field(default_factory=tuple)
    claim_status: ClaimStatus = ClaimStatus.PENDING
    authenticity_score: int | None = None
    shortlist: tuple[CompanyFit, ...] = Field(default_factory=tuple)
    updated_at: datetime


class ClaimTestCreated(AssessmentModel):
    test_id: str
    claimed_skills: list[str]
    question_count: int
    questions: list[PublicQuestion]


class ClaimResult(AssessmentModel):
    test_id: str
    claim_status: ClaimStatus
    authenticity_score: int = Field(ge=0, le=100)
    skill_breakdown: list[SkillScore] = Field(default_factory=list)
    shortlist: list[CompanyFit] = Field(default_factory=list)


class InterviewSimulationCreated(AssessmentModel):
    session_id: str
    company: CompanySummary
    rounds: list[PublicRound]
    total_questions: int
    estimated_minutes: int


class RoundBreakdown(AssessmentModel):
    round_id: str
    title: str
    answered: int
    score: int


class InterviewResult(AssessmentModel):
    session_id: str
    company: CompanySummary
    overall_score: int
    answered_count: int
    total_questions: int
    round_breakdown: list[RoundBreakdown] = Field(default_factory=list)
    recommendation: str


class CompaniesResponse(AssessmentModel):
    companies: list[CompanySummary]


class GenerateClaimTestResponse(ClaimTestCreated):
    message: str
    available_companies: list[CompanySummary]


class SubmitClaimTestRequest(AssessmentModel):
    test_id: str = ""
    answers: list[AnswerSubmission] = Field(default_factory=list)
    company_ids: list[str] = Field(default_factory=list)

    @field_validator("test_id", mode="before")
    @classmethod
    def _strip_test_id(cls, value: Any) -> str:
        return str(value or "").strip()

    @field_validator("answers", mode="before")
    @classmethod
    def _coerce_answers(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []

    @field_validator("company_ids", mode="before")
    @classmethod
    def _coerce_company_ids(cls, value: Any) -> list[str]:
        return coerce_string_list(value)


class SubmitClaimTestResponse(ClaimResult):
    message: str


class StartInterviewRequest(AssessmentModel):
    company_id: str = ""
    resume_skills: list[str] = Field(default_factory=list)

    @field_validator("company_id", mode="before")
    @classmethod
    def _normalize_company_id(cls, value: Any) -> str:
        return str(value or "").strip().lower()

    @field_validator("resume_skills", mode="before")
    @classmethod
    def _coerce_resume_skills(cls, value: Any) -> list[str]:
        return coerce_string_list(value)


class StartInterviewResponse(InterviewSimulationCreated):
    message: str
    available_companies: list[CompanySummary]


class SubmitInterviewRequest(AssessmentModel):
    session_id: str = ""
    answers: list[AnswerSubmission] = Field(default_factory=list)

    @field_validator("session_id", mode="before")
    @classmethod
    def _strip_session_id(cls, value: Any) -> str:
        return str(value or "").strip()

    @field_validator("answers", mode="before")
    @classmethod
    def _coerce_answers(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []


class SubmitInterviewResponse(InterviewResult):
    message: str
