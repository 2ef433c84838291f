from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Dict

from .models.job import JobOutputs, JobRecord, JobStatus

TERMINAL_STATUSES = frozenset({JobStatus.completed, JobStatus.partial, JobStatus.cancelled, JobStatus.failed})


class JobStore:
    """In-memory job store for local development and tests."""

    def __init__(self) -> None:
        self._jobs: Dict[str, JobRecord] = {}
        self._lock = threading.Lock()

    def create_job(self, *, site_id: str | None, prompt: str) -> JobRecord:
        with self._lock:
            job_id = self._generate_id(site_id)
            job = JobRecord(id=job_id, status=JobStatus.queued, site_id=site_id, prompt=prompt)
            self._jobs[job_id] = job
            return job

    def get_job(self, job_id: str) -> JobRecord | None:
        with self._lock:
            return self._jobs.get(job_id)

    def update_job(
        self,
        job_id: str,
        *,
        status: JobStatus | None = None,
        progress: float | None = None,
        outputs: JobOutputs | None = None,
        errors: list[str] | None = None,
    ) -> JobRecord:
        with self._lock:
            job = self._jobs[job_id]
            if status is not None:
                job.status = status
            if progress is not None:
                job.progress = progress
            if outputs is not None:
                job.outputs = outputs
            if errors is not None:
                job.errors = list(errors)
            job.updated_at = datetime.now(timezone.utc)
            self._jobs[job_id] = job
            return job

    def request_cancel(self, job_id: str) -> JobRecord:
        """Flag a job for cancellation; terminal jobs are left unchanged."""
        with self._lock:
            job = self._jobs[job_id]
            if job.status not in TERMINAL_STATUSES:
                job.cancel_requested = True
                job.updated_at = datetime.now(timezone.utc)
            return job

    def _generate_id(self, site_id: str | None) -> str:
        ts = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        suffix = uuid.uuid4().hex[:6]
        if site_id:
            safe = site_id.replace("/", "-")
            return f"job_{safe}_{suffix}"
        return f"job_{ts}_{suffix}"


__all__ = ["JobStore", "TERMINAL_STATUSES"]
