from __future__ import annotations

import secrets
import threading
from enum import Enum
from typing import Any

from app.assessment.skills import display_name, normalize_skill
from app.schemas.assessment import CompanyTemplate, PublicQuestion, PublicRound, Question, Round

SKILL_QUESTION_WEIGHT = 50
INTERVIEW_QUESTION_WEIGHT = 100
MAX_INTERVIEW_SKILLS = 5

_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_issued_ids: set[str] = set()
_issued_ids_lock = threading.Lock()


def new_id(prefix: str) -> str:
    """Typed identifier with an 8 char base36 suffix, unique within the process."""
    with _issued_ids_lock:
        while True:
            candidate = f"{prefix}_{''.join(secrets.choice(_ID_ALPHABET) for _ in range(8))}"
            if candidate not in _issued_ids:
                _issued_ids.add(candidate)
                return candidate


def _generic_questions(skill: str) -> list[dict[str, Any]]:
    return [
        {
            "type": "mcq",
            "prompt": f"Which statement best explains a real-world use of {skill}?",
            "options": (
                f"Applying {skill} to solve production-level problems with measurable outcomes",
                f"{skill} is only for writing comments and documentation",
                f"{skill} cannot be used in team projects",
                f"{skill} is unrelated to software/product delivery",
            ),
            "correct_answer": 0,
        },
        {
            "type": "mcq",
            "prompt": f"You claimed {skill} in your resume. Which behavior shows practical proficiency?",
            "options": (
                "Can explain tradeoffs, debug issues, and deliver small features independently",
                "Has heard the name but never used it",
                "Only copied examples without understanding",
                f"Avoids tasks involving {skill}",
            ),
            "correct_answer": 0,
        },
    ]


# Factual replacements for the first generic question, keyed by normalized skill.
SKILL_SPECIFIC_QUESTIONS: dict[str, dict[str, Any]] = {
    "sql": {
        "type": "mcq",
        "prompt": "Which SQL query returns employees with salary > 50000 sorted descending?",
        "options": (
            "SELECT * FROM employees WHERE salary > 50000 ORDER BY salary DESC;",
            "SELECT employees salary > 50000 SORT DESC;",
            "FETCH employees BY salary DESC IF salary > 50000;",
            "ORDER employees DESC WHERE salary > 50000;",
        ),
        "correct_answer": 0,
    },
    "react": {
        "type": "mcq",
        "prompt": "In React, which hook is typically used for local component state?",
        "options": ("useState", "useContextProvider", "setInterval", "useRoute"),
        "correct_answer": 0,
    },
    "node": {
        "type": "mcq",
        "prompt": "What is Node.js primarily used for?",
        "options": (
            "Running JavaScript on the server/runtime environment",
            "Styling HTML pages",
            "Designing logos",
            "Creating spreadsheet formulas",
        ),
        "correct_answer": 0,
    },
}


def questions_for_skill(skill: str) -> list[Question]:
    """Two verification questions for a claimed skill."""
    pretty_skill = display_name(skill)
    templates = _generic_questions(pretty_skill)
    override = SKILL_SPECIFIC_QUESTIONS.get(normalize_skill(skill))
    if override is not None:
        templates[0] = override
    return [
        Question(id=new_id("q"), skill=pretty_skill, weight=SKILL_QUESTION_WEIGHT, **template)
        for template in templates
    ]


def strip_answer_key(question: Question) -> PublicQuestion:
    return PublicQuestion.model_validate(question.model_dump(exclude={"correct_answer"}))


def strip_round(round_: Round) -> PublicRound:
    return PublicRound(
        round_id=round_.round_id,
        title=round_.title,
        questions=tuple(strip_answer_key(question) for question in round_.questions),
    )


class RoleCategory(str, Enum):
    FRONTEND = "frontend"
    DATA = "data"
    GENERIC = "generic"


def role_category(role: str | None) -> RoleCategory:
    lowered = str(role or "").lower()
    if "frontend" in lowered:
        return RoleCategory.FRONTEND
    if "data" in lowered:
        return RoleCategory.DATA
    return RoleCategory.GENERIC


ROLE_SCENARIO_QUESTIONS: dict[RoleCategory, dict[str, Any]] = {
    RoleCategory.FRONTEND: {
        "prompt": "Your page has become slow after shipping a new component tree. What should you do first?",
        "options": (
            "Profile render paths, identify expensive updates, and optimize re-render behavior",
            "Increase font size to improve perceived speed",
            "Remove error boundaries from the app",
            "Disable caching for all static assets",
        ),
    },
    RoleCategory.DATA: {
        "prompt": "A dashboard metric dropped 20% overnight. What is the best first response?",
        "options": (
            "Validate data pipeline freshness, compare source integrity, and segment the drop by cohort",
            "Immediately change the chart type",
            "Delete yesterday's records and rerun manually",
            "Assume seasonality without checking",
        ),
    },
    RoleCategory.GENERIC: {
        "prompt": "API latency doubled after a release. What should be your first step?",
        "options": (
            "Check release diff, inspect traces, and isolate the slow path before rollback/patch",
            "Add more random retries without investigation",
            "Ignore unless errors increase",
            "Disable all monitoring alerts",
        ),
    },
}

ROLE_DEBUG_QUESTIONS: dict[RoleCategory, dict[str, Any]] = {
    RoleCategory.FRONTEND: {
        "prompt": "A React form loses input state when switching tabs. Most likely cause?",
        "options": (
            "Component remounting due to unstable keys or route-level unmounting",
            "Using semantic HTML labels",
            "Using CSS modules",
            "Running Prettier on save",
        ),
    },
    RoleCategory.DATA: {
        "prompt": "SQL totals are inflated after a JOIN. Most common root cause?",
        "options": (
            "One-to-many join duplication without proper grouping/deduplication",
            "Using uppercase SQL keywords",
            "Adding ORDER BY",
            "Using aliases in SELECT",
        ),
    },
    RoleCategory.GENERIC: {
        "prompt": "User data endpoint returns stale values after update. Most likely issue?",
        "options": (
            "Cache invalidation/TTL path is missing after write",
            "TLS certificate was renewed",
            "Console logs are disabled",
            "Response JSON is pretty-printed",
        ),
    },
}


def _interview_question(*, skill: str, type_: str, prompt: str, options: tuple[str, ...]) -> Question:
    return Question(
        id=new_id("q"),
        skill=display_name(skill),
        type=type_,
        prompt=prompt,
        options=options,
        correct_answer=0,
        weight=INTERVIEW_QUESTION_WEIGHT,
    )


def _ownership_question(skill: str) -> Question:
    pretty_skill = display_name(skill)
    return _interview_question(
        skill=pretty_skill,
        type_="scenario",
        prompt=f"In production, what best demonstrates strong {pretty_skill} ownership?",
        options=(
            "Can explain tradeoffs, deliver measurable outcomes, and handle failures",
            "Only discusses theory and avoids implementation",
            "Copies snippets without context",
            "Avoids code reviews and incident follow-up",
        ),
    )


def interview_rounds_for_company(company: CompanyTemplate) -> list[Round]:
    skills = [item.skill for item in company.required_skills][:MAX_INTERVIEW_SKILLS]
    category = role_category(company.role)
    scenario_skill = skills[0] if skills else "System Design"
    debug_skill = skills[1] if len(skills) > 1 else "APIs"

    basics = [
        questions_for_skill(skill)[0].model_copy(update={"weight": INTERVIEW_QUESTION_WEIGHT})
        for skill in skills[:3]
    ]
    scenarios = [
        _interview_question(skill=scenario_skill, type_="scenario", **ROLE_SCENARIO_QUESTIONS[category]),
        *(_ownership_question(skill) for skill in skills[1:2]),
    ]
    debug = [_interview_question(skill=debug_skill, type_="debug", **ROLE_DEBUG_QUESTIONS[category])]

    return [
        Round(round_id=new_id("round"), title="Technical Basics", questions=tuple(basics)),
        Round(round_id=new_id("round"), title="Applied Scenarios", questions=tuple(scenarios)),
        Round(round_id=new_id("round"), title="Debug & Decision", questions=tuple(debug)),
    ]
