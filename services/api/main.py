from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from auto_site_designer.business_repository import LocalBusinessContextRepository
from auto_site_designer.config import EngineSettings
from auto_site_designer.engine import WebsiteDesignerEngine, validate_request
from auto_site_designer.errors import InvalidRequest
from auto_site_designer.firestore_job_store import FirestoreJobStore
from auto_site_designer.job_runner import run_generation_job
from auto_site_designer.job_store import TERMINAL_STATUSES, JobStore
from auto_site_designer.logging_config import setup_logging
from auto_site_designer.models.business import BusinessDataContext
from auto_site_designer.models.job import JobOutputs, JobRecord, JobStatus
from auto_site_designer.models.request import GenerationRequest
from auto_site_designer.pubsub_client import PubSubClient
from auto_site_designer.vertex_ai_adapter import VertexAIAdapter


class GenerateWebsiteRequest(GenerationRequest):
    business_context: BusinessDataContext | None = None


class GenerateWebsiteResponse(BaseModel):
    job_id: str
    status: JobStatus


class JobResponse(BaseModel):
    id: str
    status: JobStatus
    progress: float
    cancel_requested: bool
    outputs: JobOutputs
    errors: list[str]

    @staticmethod
    def from_record(record: JobRecord) -> "JobResponse":
        return JobResponse(
            id=record.id,
            status=record.status,
            progress=record.progress,
            cancel_requested=record.cancel_requested,
            outputs=record.outputs,
            errors=list(record.errors),
        )


# Environment configuration
ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
PROJECT_ID = os.getenv("PROJECT_ID")
VERTEX_LOCATION = os.getenv("VERTEX_LOCATION", "us-central1")
VERTEX_MODEL = os.getenv("VERTEX_MODEL", "gemini-1.5-pro")
BUSINESS_DATA_PATH = os.getenv("BUSINESS_DATA_PATH", "data/business")
PUBSUB_TOPIC_WEBSITE_REQUESTS = os.getenv("PUBSUB_TOPIC_WEBSITE_REQUESTS", "website-requests")

setup_logging(environment=ENVIRONMENT, project_id=PROJECT_ID)
logger = logging.getLogger(__name__)

app = FastAPI(title="Auto Site Designer API", version="0.1.0")

# Use Firestore in production, in-memory for dev
if ENVIRONMENT == "dev":
    job_store = JobStore()
else:
    job_store = FirestoreJobStore(project_id=PROJECT_ID)

pubsub_client = PubSubClient(project_id=PROJECT_ID, request_topic=PUBSUB_TOPIC_WEBSITE_REQUESTS) if PROJECT_ID else None
repository = LocalBusinessContextRepository(base_path=Path(BUSINESS_DATA_PATH).resolve())

engine = (
    WebsiteDesignerEngine(
        VertexAIAdapter(project_id=PROJECT_ID, location=VERTEX_LOCATION, model_name=VERTEX_MODEL),
        business_provider=repository,
        settings=EngineSettings.from_env(),
    )
    if PROJECT_ID
    else None
)

# Cancellation signals for jobs running in this process
cancel_events: dict[str, asyncio.Event] = {}


@app.post("/v1/websites:generate", response_model=GenerateWebsiteResponse)
async def generate_website(request: GenerateWebsiteRequest, background_tasks: BackgroundTasks) -> GenerateWebsiteResponse:
    try:
        validate_request(request)
    except InvalidRequest as exc:
        raise HTTPException(status_code=422, detail=exc.problems) from exc

    job = job_store.create_job(site_id=request.site_id, prompt=request.prompt)
    logger.info("Queued website generation job", extra={"job_id": job.id, "site_id": request.site_id})

    # In production, publish to Pub/Sub; in dev, use background task
    if pubsub_client and ENVIRONMENT != "dev":
        pubsub_client.publish_website_request(job_id=job.id, request=request.model_dump(mode="json"))
    else:
        if engine is None:
            job_store.update_job(job.id, status=JobStatus.failed, errors=["Generative service is not configured"])
            raise HTTPException(status_code=503, detail="Generative service is not configured")
        cancel_events[job.id] = asyncio.Event()
        background_tasks.add_task(_run_job, job.id, request)

    return GenerateWebsiteResponse(job_id=job.id, status=job.status)


@app.get("/v1/jobs/{job_id}", response_model=JobResponse)
async def get_job(job_id: str) -> JobResponse:
    record = job_store.get_job(job_id)
    if not record:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobResponse.from_record(record)


@app.post("/v1/jobs/{job_id}:cancel", response_model=JobResponse)
async def cancel_job(job_id: str) -> JobResponse:
    record = job_store.get_job(job_id)
    if not record:
        raise HTTPException(status_code=404, detail="Job not found")
    if record.status in TERMINAL_STATUSES:
        raise HTTPException(status_code=409, detail=f"Job already {record.status.value}")
    record = job_store.request_cancel(job_id)
    event = cancel_events.get(job_id)
    if event is not None:
        event.set()
    return JobResponse.from_record(record)


async def _run_job(job_id: str, request: GenerateWebsiteRequest) -> None:
    generation_request = GenerationRequest.model_validate(request.model_dump(exclude={"business_context"}))
    try:
        await run_generation_job(
            engine,
            job_store,
            job_id,
            generation_request,
            business_context=request.business_context,
            cancel_event=cancel_events.get(job_id),
        )
    finally:
        cancel_events.pop(job_id, None)


@app.get("/health")
async def healthcheck() -> JSONResponse:
    return JSONResponse({"status": "ok"})
