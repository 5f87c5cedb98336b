from __future__ import annotations

import logging
from functools import lru_cache

from app.assessment.catalog import get_company_catalog
from app.assessment.claim_test import ClaimTestService
from app.assessment.interview import InterviewSimulationService
from app.assessment.store import build_store
from app.schemas.assessment import CandidateAssessment, ClaimTest, InterviewSession
from app.services.skill_extraction import extract_skills

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_claim_test_service() -> ClaimTestService:
    return ClaimTestService(
        store=build_store("claim_tests", ClaimTest),
        extractor=extract_skills,
        catalog=get_company_catalog(),
        assessments=build_store("candidate_assessments", CandidateAssessment, expires=False),
    )


@lru_cache(maxsize=1)
def get_interview_service() -> InterviewSimulationService:
    return InterviewSimulationService(
        store=build_store("interview_sessions", InterviewSession),
        catalog=get_company_catalog(),
    )


def purge_expired_assessments() -> dict[str, int]:
    deleted = {
        "claim_tests": get_claim_test_service().store.purge_expired(),
        "interview_sessions": get_interview_service().store.purge_expired(),
    }
    if any(deleted.values()):
        logger.info("assessment_store_purge deleted=%s", deleted)
    return deleted
