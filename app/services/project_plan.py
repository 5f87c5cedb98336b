from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from pydantic import ValidationError as SchemaValidationError

from app.schemas.resume import Milestone, ProjectBlueprint
from app.services.llm_client import request_json

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "Backend Developer"

_SYSTEM_PROMPT = (
    "You are a career coach and engineering mentor.\n"
    "Return strict JSON only with keys:\n"
    "title (string),\n"
    "summary (string),\n"
    "milestones (array of {week:number,title:string,goal:string}),\n"
    "deliverables (string[]),\n"
    "resumeBullets (string[])."
)


def _clean_skills(skills: Sequence[str] | None) -> list[str]:
    return [str(skill).strip() for skill in skills or [] if skill and str(skill).strip()]


def fallback_blueprint(role: str, missing_skills: Sequence[str], extracted_skills: Sequence[str]) -> ProjectBlueprint:
    focus_skills = list(missing_skills or extracted_skills)[:3]
    skill_label = ", ".join(focus_skills) or "core role skills"
    return ProjectBlueprint(
        title=f"{role} Gap-Closing Project",
        summary=f"Build one production-style project focused on {skill_label} with measurable outcomes.",
        milestones=[
            Milestone(week=1, title="Scope and Architecture", goal="Define features, architecture, and acceptance criteria."),
            Milestone(week=2, title="Core Implementation", goal="Implement core modules and validate with tests."),
            Milestone(week=3, title="Polish and Deploy", goal="Deploy, add metrics, and complete documentation."),
        ],
        deliverables=[
            "Public Git repository with README",
            "Demo link or deployed environment",
            "Test report and architecture notes",
        ],
        resume_bullets=[
            "Built and deployed a project aligned to target role requirements.",
            "Implemented measurable improvements with tests and documentation.",
        ],
    )


def _string_list(value: Any, limit: int) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item and str(item).strip()][:limit]


def _milestones(value: Any) -> list[Milestone]:
    if not isinstance(value, list):
        return []
    milestones: list[Milestone] = []
    for item in value[:6]:
        try:
            milestones.append(Milestone.model_validate(item))
        except SchemaValidationError:
            continue
    return milestones


def generate_project_blueprint(
    role: str | None = None,
    missing_skills: Sequence[str] | None = None,
    extracted_skills: Sequence[str] | None = None,
) -> ProjectBlueprint:
    safe_role = str(role or "").strip() or DEFAULT_ROLE
    missing = _clean_skills(missing_skills)
    extracted = _clean_skills(extracted_skills)
    fallback = fallback_blueprint(safe_role, missing, extracted)

    user_prompt = (
        f"Target role: {safe_role}\n"
        f"Missing skills: {json.dumps(missing)}\n"
        f"Existing strengths: {json.dumps(extracted)}\n\n"
        "Make the plan practical, measurable, and portfolio-friendly."
    )
    payload = request_json(
        system_prompt=_SYSTEM_PROMPT,
        user_prompt=user_prompt,
        temperature=0.3,
        max_output_tokens=1200,
        feature="project-plan",
    )
    if payload is None:
        return fallback

    return ProjectBlueprint(
        title=str(payload.get("title") or "").strip() or fallback.title,
        summary=str(payload.get("summary") or "").strip() or "Build a practical project to close top role gaps.",
        milestones=_milestones(payload.get("milestones")) or fallback.milestones,
        deliverables=_string_list(payload.get("deliverables"), 8),
        resume_bullets=_string_list(payload.get("resumeBullets"), 6),
    )
