from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from .engine import WebsiteDesignerEngine
from .errors import GenerationFailure
from .models.bundle import WebsiteBundle
from .models.business import BusinessDataContext
from .models.job import JobOutputs, JobRecord, JobStatus, status_for_bundle
from .models.request import GenerationRequest
from .progress import GenerationProgress, ProgressCallback

logger = logging.getLogger(__name__)

INTERNAL_ERROR_REASON = "internal_error"


class JobUpdater(Protocol):
    def update_job(
        self,
        job_id: str,
        *,
        status: JobStatus | None = None,
        progress: float | None = None,
        outputs: JobOutputs | None = None,
        errors: list[str] | None = None,
    ) -> JobRecord: ...


def progress_recorder(job_store: JobUpdater, job_id: str) -> ProgressCallback:
    """Return an ``on_progress`` callback that stores overall completion on the job."""

    def record(update: GenerationProgress) -> None:
        job_store.update_job(job_id, progress=update.fraction)
        logger.debug(
            update.message,
            extra={
                "job_id": job_id,
                "stage": update.stage.value,
                "pages_complete": update.pages_complete,
                "pages_total": update.pages_total,
            },
        )

    return record


async def run_generation_job(
    engine: WebsiteDesignerEngine,
    job_store: JobUpdater,
    job_id: str,
    request: GenerationRequest,
    *,
    business_context: BusinessDataContext | None = None,
    cancel_event: asyncio.Event | None = None,
) -> tuple[JobStatus, WebsiteBundle | None]:
    """Run one generation and leave the job in a terminal state.

    Every outcome is written to the store, including unexpected errors, so a
    job never stays ``IN_PROGRESS`` after this returns.
    """
    job_store.update_job(job_id, status=JobStatus.in_progress, progress=0.0)
    try:
        bundle = await engine.generate_website(
            request,
            business_context=business_context,
            cancel_event=cancel_event,
            on_progress=progress_recorder(job_store, job_id),
        )
    except GenerationFailure as exc:
        status = JobStatus.cancelled if exc.reason == "cancelled" else JobStatus.failed
        logger.error("Website generation failed", extra={"job_id": job_id, "reason": exc.reason, "error": str(exc)})
        job_store.update_job(
            job_id, status=status, progress=1.0, outputs=JobOutputs(failure_reason=exc.reason), errors=[str(exc)]
        )
        return status, None
    except Exception as exc:
        logger.error("Website generation job crashed", exc_info=True, extra={"job_id": job_id, "error": str(exc)})
        job_store.update_job(
            job_id,
            status=JobStatus.failed,
            progress=1.0,
            outputs=JobOutputs(failure_reason=INTERNAL_ERROR_REASON),
            errors=[str(exc)],
        )
        return JobStatus.failed, None

    status = status_for_bundle(bundle)
    job_store.update_job(job_id, status=status, progress=1.0, outputs=JobOutputs.from_bundle(bundle))
    logger.info(
        "Website generation job finished",
        extra={"job_id": job_id, "status": status.value, "pages": len(bundle.pages)},
    )
    return status, bundle


__all__ = ["INTERNAL_ERROR_REASON", "JobUpdater", "progress_recorder", "run_generation_job"]
