from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Iterable

import yaml
from pydantic import ValidationError as SchemaValidationError

from app.core.config import settings
from app.schemas.assessment import CompanySummary, CompanyTemplate

_DEFAULT_CATALOG_PATH = Path(__file__).with_name("companies.yaml")


class CompanyCatalog:
    """Immutable, ordered collection of company templates."""

    def __init__(self, companies: Iterable[CompanyTemplate]) -> None:
        self._companies: tuple[CompanyTemplate, ...] = tuple(companies)
        if not self._companies:
            raise RuntimeError("Company catalog must contain at least one company.")
        self._by_id: dict[str, CompanyTemplate] = {}
        for company in self._companies:
            if company.company_id in self._by_id:
                raise RuntimeError(f"Duplicate company_id '{company.company_id}' in company catalog.")
            self._by_id[company.company_id] = company

    @property
    def companies(self) -> tuple[CompanyTemplate, ...]:
        return self._companies

    def __len__(self) -> int:
        return len(self._companies)

    def __iter__(self):
        return iter(self._companies)

    def get(self, company_id: str | None) -> CompanyTemplate | None:
        return self._by_id.get(str(company_id or "").strip().lower())

    def find_company(self, company_id: str | None) -> CompanyTemplate:
        """Case-insensitive lookup that falls back to the first catalog entry."""
        return self.get(company_id) or self._companies[0]

    def resolve_companies(self, company_ids: Iterable[str | None] | None) -> list[CompanyTemplate]:
        """Companies matching the given ids in catalog order; the whole catalog when none match."""
        wanted = {str(item or "").strip().lower() for item in company_ids or []}
        wanted.discard("")
        if not wanted:
            return list(self._companies)
        matched = [company for company in self._companies if company.company_id in wanted]
        return matched or list(self._companies)

    def summaries(self) -> list[CompanySummary]:
        return [company_summary(company) for company in self._companies]


def company_summary(company: CompanyTemplate) -> CompanySummary:
    return CompanySummary(
        company_id=company.company_id,
        company_name=company.company_name,
        role=company.role,
    )


def load_company_catalog(path: str | Path | None = None) -> CompanyCatalog:
    catalog_path = Path(path) if path else _DEFAULT_CATALOG_PATH
    try:
        raw = catalog_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read company catalog '{catalog_path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in company catalog '{catalog_path}': {exc}") from exc

    if not isinstance(parsed, dict) or not isinstance(parsed.get("companies"), list):
        raise RuntimeError(f"Invalid company catalog '{catalog_path}': expected a top-level 'companies' list.")

    try:
        companies = [CompanyTemplate.model_validate(item) for item in parsed["companies"]]
    except SchemaValidationError as exc:
        raise RuntimeError(f"Invalid company entry in '{catalog_path}': {exc}") from exc
    return CompanyCatalog(companies)


@lru_cache(maxsize=1)
def get_company_catalog() -> CompanyCatalog:
    return load_company_catalog(settings.company_catalog_path)
