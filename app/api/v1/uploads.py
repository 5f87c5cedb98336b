from __future__ import annotations

from fastapi import HTTPException, UploadFile, status

from app.assessment.errors import AssessmentError, ValidationError
from app.core.config import settings
from app.parsing.parse import parse_upload
from app.schemas.fields import coerce_string_list


def raise_assessment_error(exc: AssessmentError) -> None:
    raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


def flatten_form_list(values: list[str] | None) -> list[str]:
    """Repeated form fields and comma separated values both end up as one list."""
    return [item for value in values or [] for item in coerce_string_list(value)]


async def read_upload(file: UploadFile) -> bytes:
    max_bytes = settings.max_upload_bytes
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {max_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


async def resume_text_from_request(resume: UploadFile | None, resume_text: str | None) -> str:
    """Text of the uploaded resume, or the inline text when no file was sent."""
    if resume is not None:
        content = await read_upload(resume)
        return parse_upload(content, resume.filename or "resume.pdf").text
    if resume_text and resume_text.strip():
        return resume_text
    raise ValidationError("Resume PDF file is required.")
