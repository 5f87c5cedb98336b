from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    assessment_store_backend: str
    assessment_db_path: str
    assessment_ttl_hours: int
    assessment_purge_interval_s: int
    company_catalog_path: str | None
    max_upload_bytes: int
    llm_enabled: bool
    llm_strict: bool
    ai_provider: str
    openai_api_key: str | None
    openai_base_url: str | None
    llm_model: str
    llm_timeout_s: float
    openai_max_retries: int


settings = Settings(
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    assessment_store_backend=(_get_env("ASSESSMENT_STORE_BACKEND", "memory") or "memory").strip().lower(),
    assessment_db_path=_get_env("ASSESSMENT_DB_PATH", "data/assessments.db") or "data/assessments.db",
    assessment_ttl_hours=max(0, _get_env_int("ASSESSMENT_TTL_HOURS", 0)),
    assessment_purge_interval_s=max(60, _get_env_int("ASSESSMENT_PURGE_INTERVAL_S", 3600)),
    company_catalog_path=_get_env("COMPANY_CATALOG_PATH"),
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
    llm_enabled=_get_env_bool("TOOLS_LLM_ENABLED", True),
    llm_strict=_get_env_bool("TOOLS_STRICT_LLM", False),
    ai_provider=(_get_env("AI_PROVIDER", "openai") or "openai").strip().lower(),
    openai_api_key=_get_env("OPENAI_API_KEY"),
    openai_base_url=_get_env("OPENAI_BASE_URL"),
    llm_model=(_get_env("AI_MODEL") or _get_env("OPENAI_MODEL") or "gpt-4o-mini").strip(),
    llm_timeout_s=_get_env_float("TOOLS_LLM_TIMEOUT_S", 20.0),
    openai_max_retries=_get_env_int("OPENAI_MAX_RETRIES", 2),
)

if settings.assessment_store_backend not in {"memory", "sqlite"}:
    raise RuntimeError("ASSESSMENT_STORE_BACKEND must be either 'memory' or 'sqlite'.")
