from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from app.assessment.errors import ExtractionError
from app.services.llm_client import CompletionStatus, LLMUnavailableError, request_completion_with_policy

logger = logging.getLogger(__name__)

FALLBACK_SKILLS = (
    "JavaScript",
    "TypeScript",
    "React",
    "Node",
    "Express",
    "MongoDB",
    "SQL",
    "Python",
    "Java",
    "C++",
    "AWS",
    "Docker",
    "Kubernetes",
    "System Design",
    "DSA",
    "REST API",
    "Git",
)

_OFFLINE_SUGGESTION = (
    "Add measurable project impact, highlight missing core backend/database skills, "
    "and tailor summary to the target role."
)
_UNPARSEABLE_SUGGESTION = "Improve role-specific keywords and include missing technical skills from job requirements."
_PROVIDER_FAILURE_SUGGESTION = "Auto-fallback mode: improve missing required skills and add quantified project outcomes."
_DEFAULT_SUGGESTION = "Improve resume clarity and add missing job-relevant skills."

_FAILURE_SUGGESTIONS = {
    CompletionStatus.NOT_CONFIGURED: _OFFLINE_SUGGESTION,
    CompletionStatus.PROVIDER_ERROR: _PROVIDER_FAILURE_SUGGESTION,
    CompletionStatus.EMPTY_RESPONSE: _UNPARSEABLE_SUGGESTION,
    CompletionStatus.INVALID_JSON: _UNPARSEABLE_SUGGESTION,
}

_SYSTEM_PROMPT = (
    "You are a resume analyzer. Return strict JSON with keys: "
    "extractedSkills (string[]), improvementSuggestions (string)."
)


@dataclass(slots=True)
class SkillExtraction:
    extracted_skills: list[str] = field(default_factory=list)
    improvement_suggestions: str = ""
    used_llm: bool = False


class SkillExtractor(Protocol):
    def __call__(self, text: str, required_skills: Sequence[str] | None = None) -> SkillExtraction: ...


def extract_skills_fallback(text: str) -> list[str]:
    """Vocabulary skills that appear as substrings of the text, in vocabulary order."""
    lowered = text.lower()
    return [skill for skill in FALLBACK_SKILLS if skill.lower() in lowered]


def extract_skills(text: str, required_skills: Sequence[str] | None = None) -> SkillExtraction:
    if not text or not text.strip():
        raise ExtractionError("resume_text is required for AI analysis.")

    required = [skill for skill in required_skills or [] if skill]
    user_prompt = (
        f"Required skills (if provided): {json.dumps(required)}\n\n"
        f"Resume text:\n{text}"
    )
    try:
        completion = request_completion_with_policy(
            system_prompt=_SYSTEM_PROMPT,
            user_prompt=user_prompt,
            feature="skill-extraction",
        )
    except LLMUnavailableError as exc:
        raise ExtractionError(str(exc), status_code=502) from exc

    if completion.status in _FAILURE_SUGGESTIONS:
        return SkillExtraction(
            extracted_skills=extract_skills_fallback(text),
            improvement_suggestions=_FAILURE_SUGGESTIONS[completion.status],
        )

    # Non-object JSON carries no usable fields.
    payload = completion.payload or {}
    raw_skills = payload.get("extractedSkills")
    if isinstance(raw_skills, list):
        extracted = [str(skill) for skill in raw_skills if skill]
    else:
        logger.warning("skill_extraction_missing_skills status=%s keys=%s", completion.status.value, sorted(payload))
        extracted = extract_skills_fallback(text)

    suggestions = payload.get("improvementSuggestions")
    if not isinstance(suggestions, str):
        suggestions = _DEFAULT_SUGGESTION

    return SkillExtraction(extracted_skills=extracted, improvement_suggestions=suggestions, used_llm=True)
