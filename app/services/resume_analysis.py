from __future__ import annotations

import logging
from typing import Sequence

from app.assessment.skills import dedupe_skills, normalize_skill, round_half_up
from app.schemas.resume import ResumeAnalysis
from app.services.skill_extraction import SkillExtractor, extract_skills

logger = logging.getLogger(__name__)


def compute_skill_match(resume_skills: Sequence[str], required_skills: Sequence[str]) -> tuple[list[str], list[str], list[str]]:
    """Return (required, matched, missing) display names compared by normalized token."""
    required = dedupe_skills(required_skills)
    resume_tokens = {normalize_skill(skill) for skill in resume_skills}
    matched = [skill for skill in required if normalize_skill(skill) in resume_tokens]
    missing = [skill for skill in required if normalize_skill(skill) not in resume_tokens]
    return required, matched, missing


def match_score(matched_count: int, required_count: int) -> int:
    if required_count <= 0:
        return 0
    return round_half_up(100 * matched_count / required_count)


def analyze_resume(
    resume_text: str,
    required_skills: Sequence[str] | None = None,
    *,
    extractor: SkillExtractor = extract_skills,
) -> ResumeAnalysis:
    extraction = extractor(resume_text, list(required_skills or []))
    required, matched, missing = compute_skill_match(extraction.extracted_skills, required_skills or [])
    score = match_score(len(matched), len(required))
    logger.info(
        "resume_analyzed extracted=%s required=%s matched=%s score=%s",
        len(extraction.extracted_skills),
        len(required),
        len(matched),
        score,
    )
    return ResumeAnalysis(
        score=score,
        extracted_skills=extraction.extracted_skills,
        matched_skills=matched,
        missing_skills=missing,
        suggestions=extraction.improvement_suggestions,
    )
