from __future__ import annotations

import logging
from datetime import datetime, timezone

from google.cloud import firestore

from .job_store import TERMINAL_STATUSES
from .models.job import JobOutputs, JobRecord, JobStatus

logger = logging.getLogger(__name__)


class FirestoreJobStore:
    """Firestore-backed job store for production use."""

    COLLECTION_NAME = "website_jobs"

    def __init__(self, project_id: str | None = None) -> None:
        self._db = firestore.Client(project=project_id)
        self._collection = self._db.collection(self.COLLECTION_NAME)

    def create_job(self, *, site_id: str | None, prompt: str) -> JobRecord:
        job_id = self._generate_id(site_id)
        now = datetime.now(timezone.utc)
        job = JobRecord(
            id=job_id,
            status=JobStatus.queued,
            site_id=site_id,
            prompt=prompt,
            created_at=now,
            updated_at=now,
        )
        self._collection.document(job_id).set(self._to_firestore_dict(job))

        logger.info("Created job", extra={"job_id": job_id, "site_id": site_id})
        return job

    def get_job(self, job_id: str) -> JobRecord | None:
        doc = self._collection.document(job_id).get()
        if not doc.exists:
            return None
        return self._from_firestore_dict(doc.id, doc.to_dict())

    def update_job(
        self,
        job_id: str,
        *,
        status: JobStatus | None = None,
        progress: float | None = None,
        outputs: JobOutputs | None = None,
        errors: list[str] | None = None,
    ) -> JobRecord:
        doc_ref = self._collection.document(job_id)
        update_data: dict = {"updated_at": datetime.now(timezone.utc)}
        if status is not None:
            update_data["status"] = status.value
        if progress is not None:
            update_data["progress"] = progress
        if outputs is not None:
            update_data["outputs"] = outputs.model_dump(mode="json")
        if errors is not None:
            update_data["errors"] = errors
        doc_ref.update(update_data)

        logger.info(
            "Updated job",
            extra={"job_id": job_id, "status": status.value if status else None, "progress": progress},
        )
        updated_doc = doc_ref.get()
        return self._from_firestore_dict(updated_doc.id, updated_doc.to_dict())

    def request_cancel(self, job_id: str) -> JobRecord:
        doc_ref = self._collection.document(job_id)
        job = self.get_job(job_id)
        if job is None:
            raise KeyError(job_id)
        if job.status in TERMINAL_STATUSES:
            return job
        doc_ref.update({"cancel_requested": True, "updated_at": datetime.now(timezone.utc)})
        logger.info("Cancellation requested", extra={"job_id": job_id})
        return job.model_copy(update={"cancel_requested": True})

    def _generate_id(self, site_id: str | None) -> str:
        ts = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        # Firestore auto-generated ids are unique enough for the suffix
        suffix = self._collection.document().id[:6]
        if site_id:
            safe = site_id.replace("/", "-")
            return f"job_{safe}_{suffix}"
        return f"job_{ts}_{suffix}"

    def _to_firestore_dict(self, job: JobRecord) -> dict:
        return {
            "status": job.status.value,
            "site_id": job.site_id,
            "prompt": job.prompt,
            "cancel_requested": job.cancel_requested,
            "progress": job.progress,
            "created_at": job.created_at,
            "updated_at": job.updated_at,
            "errors": list(job.errors),
            "outputs": job.outputs.model_dump(mode="json"),
        }

    def _from_firestore_dict(self, job_id: str, data: dict) -> JobRecord:
        outputs = JobOutputs.model_validate(data["outputs"]) if data.get("outputs") else JobOutputs()
        return JobRecord(
            id=job_id,
            status=JobStatus(data["status"]),
            site_id=data.get("site_id"),
            prompt=data.get("prompt"),
            cancel_requested=data.get("cancel_requested", False),
            progress=data.get("progress", 0.0),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
            outputs=outputs,
            errors=data.get("errors", []),
        )


__all__ = ["FirestoreJobStore"]
