from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any

from openai import OpenAI

from app.core.config import settings

logger = logging.getLogger(__name__)

_PLACEHOLDER_PREFIXES = ("your_", "replace_")


class LLMUnavailableError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_unavailable"):
        super().__init__(message)
        self.code = code


class CompletionStatus(str, Enum):
    OK = "ok"
    NOT_CONFIGURED = "not_configured"
    PROVIDER_ERROR = "provider_error"
    EMPTY_RESPONSE = "empty_response"
    INVALID_JSON = "invalid_json"
    INVALID_SCHEMA = "invalid_schema"


@dataclass(frozen=True, slots=True)
class JSONCompletion:
    status: CompletionStatus
    payload: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.status is CompletionStatus.OK


def llm_configured() -> bool:
    """True when the OpenAI provider is enabled and has a usable API key."""
    if not settings.llm_enabled or settings.ai_provider != "openai":
        return False
    key = (settings.openai_api_key or "").strip().lower()
    if not key or key.startswith(_PLACEHOLDER_PREFIXES) or key in {"changeme", "todo"}:
        return False
    return True


@lru_cache(maxsize=1)
def _client() -> OpenAI:
    return OpenAI(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout=settings.llm_timeout_s,
        max_retries=settings.openai_max_retries,
    )


def request_completion(
    *,
    system_prompt: str,
    user_prompt: str,
    feature: str,
    temperature: float = 0.2,
    max_output_tokens: int = 900,
) -> JSONCompletion:
    """One JSON-mode chat completion, with the reason when no usable object came back."""
    if not llm_configured():
        logger.debug("llm_request_skipped feature=%s reason=not_configured", feature)
        return JSONCompletion(CompletionStatus.NOT_CONFIGURED)

    started = time.perf_counter()
    try:
        response = _client().chat.completions.create(
            model=settings.llm_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            response_format={"type": "json_object"},
            max_tokens=max_output_tokens,
        )
    except Exception as exc:  # noqa: BLE001 - callers fall back to deterministic output
        logger.warning("llm_request_failed feature=%s model=%s: %s", feature, settings.llm_model, exc)
        return JSONCompletion(CompletionStatus.PROVIDER_ERROR)

    latency_ms = int((time.perf_counter() - started) * 1000)
    content = response.choices[0].message.content if response.choices else ""
    if not content:
        logger.warning("llm_empty_response feature=%s latency_ms=%s", feature, latency_ms)
        return JSONCompletion(CompletionStatus.EMPTY_RESPONSE)
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError:
        logger.warning("llm_invalid_json feature=%s latency_ms=%s", feature, latency_ms)
        return JSONCompletion(CompletionStatus.INVALID_JSON)
    if not isinstance(parsed, dict):
        logger.warning("llm_invalid_schema feature=%s latency_ms=%s", feature, latency_ms)
        return JSONCompletion(CompletionStatus.INVALID_SCHEMA)
    logger.info("llm_request_ok feature=%s model=%s latency_ms=%s", feature, settings.llm_model, latency_ms)
    return JSONCompletion(CompletionStatus.OK, parsed)


def request_json(**kwargs: Any) -> dict[str, Any] | None:
    return request_completion(**kwargs).payload


def request_completion_strict(**kwargs: Any) -> JSONCompletion:
    if not llm_configured():
        raise LLMUnavailableError("AI quality mode is enabled but OpenAI is not configured.", code="llm_disabled")
    completion = request_completion(**kwargs)
    if not completion.ok:
        raise LLMUnavailableError("AI quality mode could not produce a valid response. Try again.", code="llm_invalid")
    return completion


def request_completion_with_policy(**kwargs: Any) -> JSONCompletion:
    """Strict mode raises LLMUnavailableError instead of returning a failed completion."""
    if settings.llm_strict:
        return request_completion_strict(**kwargs)
    return request_completion(**kwargs)
