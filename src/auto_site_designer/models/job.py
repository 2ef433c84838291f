from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, Field

from .bundle import WebsiteBundle


class JobStatus(str, Enum):
    queued = "QUEUED"
    in_progress = "IN_PROGRESS"
    completed = "COMPLETED"
    partial = "PARTIAL"
    cancelled = "CANCELLED"
    failed = "FAILED"


class JobOutputs(BaseModel):
    bundle: Mapping[str, Any] | None = None
    failed_pages: Sequence[str] = Field(default_factory=list)
    cancelled_pages: Sequence[str] = Field(default_factory=list)
    failure_reason: str | None = None

    @classmethod
    def from_bundle(cls, bundle: WebsiteBundle) -> "JobOutputs":
        return cls(
            bundle=bundle.to_document(),
            failed_pages=list(bundle.failed_pages),
            cancelled_pages=list(bundle.cancelled_pages),
        )


def status_for_bundle(bundle: WebsiteBundle) -> JobStatus:
    if bundle.cancelled_pages:
        return JobStatus.cancelled
    if bundle.failed_pages:
        return JobStatus.partial
    return JobStatus.completed


class JobRecord(BaseModel):
    id: str
    status: JobStatus
    progress: float = 0.0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    site_id: str | None = None
    prompt: str | None = None
    cancel_requested: bool = False
    errors: Sequence[str] = Field(default_factory=list)
    outputs: JobOutputs = Field(default_factory=JobOutputs)


__all__ = ["JobRecord", "JobStatus", "JobOutputs", "status_for_bundle"]
