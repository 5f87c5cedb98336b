from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

_NON_TOKEN_RE = re.compile(r"[^a-z0-9+#\s]")
_WHITESPACE_RE = re.compile(r"\s+")

SKILL_DISPLAY_OVERRIDES: dict[str, str] = {
    "sql": "SQL",
    "mongodb": "MongoDB",
    "api": "API",
    "dsa": "DSA",
    "aws": "AWS",
    "css": "CSS",
}


def normalize_skill(raw: str | None) -> str:
    """Canonical comparison key for a free-text skill; never raises."""
    lowered = str(raw or "").lower()
    return _WHITESPACE_RE.sub(" ", _NON_TOKEN_RE.sub(" ", lowered)).strip()


def display_name(raw: str | None) -> str:
    words = str(raw or "").strip().lower().split()
    return " ".join(SKILL_DISPLAY_OVERRIDES.get(word) or word[:1].upper() + word[1:] for word in words)


def dedupe_skills(raw_skills: Iterable[str | None] | None) -> list[str]:
    """Display names for the first occurrence of each distinct skill, in input order."""
    seen: set[str] = set()
    output: list[str] = []
    for raw in raw_skills or []:
        token = normalize_skill(raw)
        if not token or token in seen:
            continue
        seen.add(token)
        output.append(display_name(raw))
    return output


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
