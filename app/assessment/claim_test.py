from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Sequence

from app.assessment.answers import answer_map
from app.assessment.catalog import CompanyCatalog
from app.assessment.errors import NotFoundError, ValidationError
from app.assessment.question_bank import new_id, questions_for_skill, strip_answer_key
from app.assessment.shortlist import build_shortlist
from app.assessment.skills import dedupe_skills, normalize_skill, round_half_up
from app.assessment.store import AssessmentStore
from app.schemas.assessment import (
    AnswerSubmission,
    CandidateAssessment,
    ClaimResult,
    ClaimStatus,
    ClaimTest,
    ClaimTestCreated,
    SkillScore,
)
from app.services.skill_extraction import SkillExtractor

logger = logging.getLogger(__name__)

MAX_CLAIMED_SKILLS = 8
DEFAULT_TEST_SKILLS = ("JavaScript", "Node", "React", "SQL", "Git")
STRONG_THRESHOLD = 75
PARTIAL_THRESHOLD = 50


@dataclass(slots=True)
class _SkillBucket:
    skill: str
    score: int = 0
    total_weight: int = 0


def claim_status_for(authenticity_score: int) -> ClaimStatus:
    if authenticity_score >= STRONG_THRESHOLD:
        return ClaimStatus.STRONGLY_VERIFIED
    if authenticity_score >= PARTIAL_THRESHOLD:
        return ClaimStatus.PARTIALLY_VERIFIED
    return ClaimStatus.WEAKLY_VERIFIED


class ClaimTestService:
    """Creates resume-claim verification tests and grades submissions against them."""

    def __init__(
        self,
        *,
        store: AssessmentStore[ClaimTest],
        extractor: SkillExtractor,
        catalog: CompanyCatalog,
        assessments: AssessmentStore[CandidateAssessment] | None = None,
    ) -> None:
        self._store = store
        self._extractor = extractor
        self._catalog = catalog
        self._assessments = assessments

    @property
    def store(self) -> AssessmentStore[ClaimTest]:
        return self._store

    @property
    def assessments(self) -> AssessmentStore[CandidateAssessment] | None:
        return self._assessments

    def _claimed_skills(self, extracted: Sequence[str], requested_companies: Sequence[str]) -> list[str]:
        claimed = dedupe_skills(extracted)
        if not claimed:
            companies = self._catalog.resolve_companies(requested_companies)
            claimed = dedupe_skills(item.skill for company in companies for item in company.required_skills)
        if not claimed:
            claimed = list(DEFAULT_TEST_SKILLS)
        return claimed[:MAX_CLAIMED_SKILLS]

    def _record_assessment(self, test: ClaimTest, result: ClaimResult | None = None) -> None:
        if self._assessments is None:
            return
        record = self._assessments.get(test.test_id) or CandidateAssessment(
            test_id=test.test_id,
            claimed_skills=test.claimed_skills,
            updated_at=datetime.now(timezone.utc),
        )
        if result is not None:
            record = record.model_copy(
                update={
                    "claim_status": result.claim_status,
                    "authenticity_score": result.authenticity_score,
                    "shortlist": tuple(result.shortlist),
                    "updated_at": datetime.now(timezone.utc),
                }
            )
        self._assessments.put(test.test_id, record)

    def get_candidate_assessment(self, test_id: str) -> CandidateAssessment | None:
        if self._assessments is None:
            return None
        return self._assessments.get(test_id.strip())

    def create_claim_test(self, resume_text: str, requested_companies: Sequence[str] | None = None) -> ClaimTestCreated:
        requested = list(requested_companies or [])
        extraction = self._extractor(resume_text, [])
        claimed_skills = self._claimed_skills(extraction.extracted_skills, requested)
        questions = [question for skill in claimed_skills for question in questions_for_skill(skill)]

        test = ClaimTest(
            test_id=new_id("test"),
            created_at=datetime.now(timezone.utc),
            claimed_skills=tuple(claimed_skills),
            questions=tuple(questions),
            requested_companies=tuple(requested),
        )
        self._store.put(test.test_id, test)
        self._record_assessment(test)
        logger.info(
            "claim_test_created test_id=%s skills=%s questions=%s used_llm=%s",
            test.test_id,
            len(claimed_skills),
            len(questions),
            extraction.used_llm,
        )

        return ClaimTestCreated(
            test_id=test.test_id,
            claimed_skills=claimed_skills,
            question_count=len(questions),
            questions=[strip_answer_key(question) for question in questions],
        )

    def get_claim_test(self, test_id: str) -> ClaimTest:
        if not test_id or not test_id.strip():
            raise ValidationError("testId is required.")
        test = self._store.get(test_id.strip())
        if test is None:
            raise NotFoundError("Invalid testId or test expired. Please generate a new test.")
        return test

    def evaluate_claim_test(
        self,
        test_id: str,
        answers: Iterable[AnswerSubmission] | None = None,
        requested_companies: Sequence[str] | None = None,
    ) -> ClaimResult:
        test = self.get_claim_test(test_id)
        selections = answer_map(answers)

        buckets: dict[str, _SkillBucket] = {}
        answered_count = 0
        for question in test.questions:
            token = normalize_skill(question.skill)
            bucket = buckets.setdefault(token, _SkillBucket(skill=question.skill))
            selected = selections.get(question.id)
            if selected is None:
                continue
            answered_count += 1
            bucket.total_weight += question.weight
            if selected == question.correct_answer:
                bucket.score += question.weight

        if answered_count == 0:
            logger.info("claim_test_not_attempted test_id=%s", test.test_id)
            result = ClaimResult(
                test_id=test.test_id,
                claim_status=ClaimStatus.NOT_ATTEMPTED,
                authenticity_score=0,
            )
            self._record_assessment(test, result)
            return result

        skill_scores = {
            token: round_half_up(100 * bucket.score / bucket.total_weight)
            for token, bucket in buckets.items()
            if bucket.total_weight > 0
        }
        claimed_tokens = [normalize_skill(skill) for skill in test.claimed_skills]
        authenticity_score = (
            round_half_up(sum(skill_scores.get(token, 0) for token in claimed_tokens) / len(claimed_tokens))
            if claimed_tokens
            else 0
        )
        skill_breakdown = [
            SkillScore(skill=buckets[token].skill, score=score) for token, score in skill_scores.items()
        ]

        company_ids = list(requested_companies or []) or list(test.requested_companies)
        shortlist = build_shortlist(
            skill_scores=skill_scores,
            claimed_skills=test.claimed_skills,
            companies=self._catalog.resolve_companies(company_ids),
        )
        claim_status = claim_status_for(authenticity_score)
        logger.info(
            "claim_test_evaluated test_id=%s answered=%s authenticity=%s status=%s shortlisted=%s",
            test.test_id,
            answered_count,
            authenticity_score,
            claim_status.value,
            len(shortlist),
        )

        result = ClaimResult(
            test_id=test.test_id,
            claim_status=claim_status,
            authenticity_score=authenticity_score,
            skill_breakdown=skill_breakdown,
            shortlist=shortlist,
        )
        self._record_assessment(test, result)
        return result
