from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Sequence

from app.assessment.answers import answer_map
from app.assessment.catalog import CompanyCatalog, company_summary
from app.assessment.errors import NotFoundError, ValidationError
from app.assessment.question_bank import interview_rounds_for_company, new_id, strip_round
from app.assessment.skills import dedupe_skills, round_half_up
from app.assessment.store import AssessmentStore
from app.schemas.assessment import (
    AnswerSubmission,
    InterviewResult,
    InterviewSession,
    InterviewSimulationCreated,
    RoundBreakdown,
)

logger = logging.getLogger(__name__)

MIN_ESTIMATED_MINUTES = 10
MINUTES_PER_QUESTION = 2


def recommendation_for(overall_score: int) -> str:
    if overall_score >= 75:
        return "Strongly interview-ready for this company baseline."
    if overall_score >= 50:
        return "Partially ready. Improve weak round areas before applying."
    return "Needs focused preparation before shortlist-level interviews."


class InterviewSimulationService:
    def __init__(self, *, store: AssessmentStore[InterviewSession], catalog: CompanyCatalog) -> None:
        self._store = store
        self._catalog = catalog

    @property
    def store(self) -> AssessmentStore[InterviewSession]:
        return self._store

    def create_interview_simulation(
        self,
        company_id: str | None = None,
        resume_skills: Sequence[str] | None = None,
    ) -> InterviewSimulationCreated:
        company = self._catalog.find_company(company_id)
        rounds = interview_rounds_for_company(company)
        total_questions = sum(len(round_.questions) for round_ in rounds)

        session = InterviewSession(
            session_id=new_id("interview"),
            company=company,
            resume_skills=tuple(dedupe_skills(resume_skills)),
            rounds=tuple(rounds),
            created_at=datetime.now(timezone.utc),
        )
        self._store.put(session.session_id, session)
        logger.info(
            "interview_session_created session_id=%s company=%s questions=%s",
            session.session_id,
            company.company_id,
            total_questions,
        )

        return InterviewSimulationCreated(
            session_id=session.session_id,
            company=company_summary(company),
            rounds=[strip_round(round_) for round_ in rounds],
            total_questions=total_questions,
            estimated_minutes=max(MIN_ESTIMATED_MINUTES, total_questions * MINUTES_PER_QUESTION),
        )

    def get_session(self, session_id: str) -> InterviewSession:
        if not session_id or not session_id.strip():
            raise ValidationError("sessionId is required.")
        session = self._store.get(session_id.strip())
        if session is None:
            raise NotFoundError("Invalid interview session. Please start a new simulation.")
        return session

    def evaluate_interview_simulation(
        self,
        session_id: str,
        answers: Iterable[AnswerSubmission] | None = None,
    ) -> InterviewResult:
        session = self.get_session(session_id)
        selections = answer_map(answers)

        breakdown: list[RoundBreakdown] = []
        for round_ in session.rounds:
            answered = 0
            correct = 0
            for question in round_.questions:
                selected = selections.get(question.id)
                if selected is None:
                    continue
                answered += 1
                if selected == question.correct_answer:
                    correct += 1
            score = round_half_up(100 * correct / answered) if answered > 0 else 0
            breakdown.append(RoundBreakdown(round_id=round_.round_id, title=round_.title, answered=answered, score=score))

        # Every round counts equally regardless of its question count.
        overall_score = round_half_up(sum(item.score for item in breakdown) / len(breakdown)) if breakdown else 0
        answered_count = sum(item.answered for item in breakdown)
        total_questions = sum(len(round_.questions) for round_ in session.rounds)
        logger.info(
            "interview_session_evaluated session_id=%s answered=%s overall=%s",
            session.session_id,
            answered_count,
            overall_score,
        )

        return InterviewResult(
            session_id=session.session_id,
            company=company_summary(session.company),
            overall_score=overall_score,
            answered_count=answered_count,
            total_questions=total_questions,
            round_breakdown=breakdown,
            recommendation=recommendation_for(overall_score),
        )
