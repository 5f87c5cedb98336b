from __future__ import annotations

import math
from typing import Any, Iterable

from app.schemas.assessment import AnswerSubmission


def selected_index(value: Any) -> int | None:
    """Option index for a submitted selection, or None when it does not count as answered."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = float(value)
        except ValueError:
            return None
    if isinstance(value, int):
        index = value
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        index = int(value)
    else:
        return None
    return index if index >= 0 else None


def answer_map(answers: Iterable[AnswerSubmission] | None) -> dict[str, int | None]:
    # Later submissions for the same question replace earlier ones.
    return {answer.question_id: selected_index(answer.selected_option) for answer in answers or []}
