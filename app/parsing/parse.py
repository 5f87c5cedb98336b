from __future__ import annotations

import hashlib
import logging
from io import BytesIO
from pathlib import PurePath

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from app.assessment.errors import ValidationError

from .models import ParsedBlock, ParsedDoc

logger = logging.getLogger(__name__)

_PDF_MAGIC = b"%PDF"


def _compute_doc_id(text: str, filename: str) -> str:
    seed = text if text.strip() else filename
    digest = hashlib.sha256(seed.encode("utf-8", errors="ignore")).hexdigest()
    return digest[:16]


def _parse_txt(content: bytes) -> tuple[str, list[ParsedBlock], list[str]]:
    return content.decode("utf-8", errors="replace"), [], []


def _parse_pdf(content: bytes) -> tuple[str, list[ParsedBlock], list[str]]:
    warnings: list[str] = []
    blocks: list[ParsedBlock] = []
    try:
        reader = PdfReader(BytesIO(content))
        text_parts: list[str] = []
        for index, page in enumerate(reader.pages, start=1):
            page_text = (page.extract_text() or "").strip()
            if page_text:
                text_parts.append(page_text)
                blocks.append(ParsedBlock(page=index, text=page_text))
    except (PyPdfError, ValueError, OSError) as exc:
        logger.warning("pdf_parse_failed: %s", exc)
        raise ValidationError("Unable to read the uploaded PDF.") from exc
    if not text_parts:
        warnings.append("No extractable text found in PDF.")
    return "\n".join(text_parts), blocks, warnings


def parse_upload(content: bytes, filename: str = "") -> ParsedDoc:
    """Extract plain text from an uploaded resume (PDF or plain text)."""
    if not content:
        raise ValidationError("Resume file is empty.")

    extension = PurePath(filename or "").suffix.lower()
    if extension == ".pdf" or content.startswith(_PDF_MAGIC):
        source_type = "pdf"
        text, blocks, warnings = _parse_pdf(content)
    elif extension in {".txt", ".md", ""}:
        source_type = "txt"
        text, blocks, warnings = _parse_txt(content)
    else:
        raise ValidationError(f"Unsupported file type '{extension}'. Supported types: .pdf, .txt")

    return ParsedDoc(
        doc_id=_compute_doc_id(text=text, filename=filename),
        source_type=source_type,
        filename=filename,
        text=text,
        blocks=blocks,
        parsing_warnings=warnings,
    )
