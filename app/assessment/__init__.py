from .catalog import CompanyCatalog, get_company_catalog, load_company_catalog
from .errors import AssessmentError, ExtractionError, NotFoundError, ValidationError
from .shortlist import build_shortlist
from .skills import dedupe_skills, display_name, normalize_skill

__all__ = [
    "AssessmentError",
    "CompanyCatalog",
    "ExtractionError",
    "NotFoundError",
    "ValidationError",
    "build_shortlist",
    "dedupe_skills",
    "display_name",
    "get_company_catalog",
    "load_company_catalog",
    "normalize_skill",
]
