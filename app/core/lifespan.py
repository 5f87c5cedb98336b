import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from app.assessment.catalog import get_company_catalog
from app.core.config import settings
from app.services.assessment_service import (
    get_claim_test_service,
    get_interview_service,
    purge_expired_assessments,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    catalog = get_company_catalog()
    get_claim_test_service()
    get_interview_service()
    logger.info(
        "assessment_ready companies=%s store=%s ttl_hours=%s",
        len(catalog),
        settings.assessment_store_backend,
        settings.assessment_ttl_hours,
    )

    if settings.assessment_ttl_hours <= 0:
        yield
        return

    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                purge_expired_assessments()
            except Exception as exc:  # pragma: no cover
                logger.warning("assessment_store_purge_failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=settings.assessment_purge_interval_s)
            except asyncio.TimeoutError:
                continue

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
