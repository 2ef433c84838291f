from __future__ import annotations

import asyncio
import base64
import json
import logging
import os
import uuid
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from auto_site_designer.business_repository import LocalBusinessContextRepository
from auto_site_designer.config import EngineSettings
from auto_site_designer.engine import WebsiteDesignerEngine
from auto_site_designer.firestore_job_store import FirestoreJobStore
from auto_site_designer.job_runner import run_generation_job
from auto_site_designer.logging_config import set_trace_id, setup_logging
from auto_site_designer.models.business import BusinessDataContext
from auto_site_designer.models.job import JobStatus
from auto_site_designer.models.request import GenerationRequest
from auto_site_designer.pubsub_client import PubSubClient
from auto_site_designer.vertex_ai_adapter import VertexAIAdapter

# Environment configuration
ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
PROJECT_ID = os.getenv("PROJECT_ID", "auto-site-designer")
VERTEX_LOCATION = os.getenv("VERTEX_LOCATION", "us-central1")
VERTEX_MODEL = os.getenv("VERTEX_MODEL", "gemini-1.5-pro")
BUSINESS_DATA_PATH = os.getenv("BUSINESS_DATA_PATH", "data/business")
PUBSUB_TOPIC_COMPLETED = os.getenv("PUBSUB_TOPIC_WEBSITE_COMPLETED", "website-completed")
CANCEL_POLL_INTERVAL_S = float(os.getenv("CANCEL_POLL_INTERVAL_S", "2.0"))

setup_logging(environment=ENVIRONMENT, project_id=PROJECT_ID)
logger = logging.getLogger(__name__)

job_store = FirestoreJobStore(project_id=PROJECT_ID)
pubsub_client = PubSubClient(project_id=PROJECT_ID, completed_topic=PUBSUB_TOPIC_COMPLETED)
engine = WebsiteDesignerEngine(
    VertexAIAdapter(project_id=PROJECT_ID, location=VERTEX_LOCATION, model_name=VERTEX_MODEL),
    business_provider=LocalBusinessContextRepository(base_path=Path(BUSINESS_DATA_PATH).resolve()),
    settings=EngineSettings.from_env(),
)

app = FastAPI(title="Auto Site Designer Worker", version="0.1.0")


class PubSubMessage(BaseModel):
    """Pub/Sub push message format."""

    message: dict[str, Any]
    subscription: str


@app.post("/v1/worker/process")
async def process_website_request(request: Request) -> JSONResponse:
    """Process a website generation request pushed by Pub/Sub."""
    trace_id = str(uuid.uuid4())
    set_trace_id(trace_id)

    body = await request.json()
    try:
        pubsub_message = PubSubMessage.model_validate(body)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Malformed Pub/Sub push body") from exc

    message_data = pubsub_message.message.get("data", "")
    if not message_data:
        raise HTTPException(status_code=400, detail="No message data")
    payload = json.loads(base64.b64decode(message_data).decode("utf-8"))

    job_id = payload.get("job_id")
    if not job_id or not payload.get("request"):
        raise HTTPException(status_code=400, detail="Missing required fields: job_id, request")

    try:
        generation_request = GenerationRequest.model_validate(payload["request"])
        business_context = (
            BusinessDataContext.model_validate(payload["request"]["business_context"])
            if payload["request"].get("business_context")
            else None
        )
    except ValidationError as exc:
        job_store.update_job(job_id, status=JobStatus.failed, progress=1.0, errors=[str(exc)])
        # Acknowledge so Pub/Sub does not redeliver an unprocessable message.
        return JSONResponse({"status": "rejected", "job_id": job_id})

    logger.info(
        "Processing website request",
        extra={"job_id": job_id, "site_id": generation_request.site_id, "trace_id": trace_id},
    )
    status = await _process_job(job_id, generation_request, business_context)
    return JSONResponse({"status": status.value, "job_id": job_id})


async def _watch_cancellation(job_id: str, cancel_event: asyncio.Event) -> None:
    while not cancel_event.is_set():
        await asyncio.sleep(CANCEL_POLL_INTERVAL_S)
        record = await asyncio.to_thread(job_store.get_job, job_id)
        if record is not None and record.cancel_requested:
            logger.info("Cancellation observed", extra={"job_id": job_id})
            cancel_event.set()


async def _process_job(
    job_id: str,
    generation_request: GenerationRequest,
    business_context: BusinessDataContext | None,
) -> JobStatus:
    cancel_event = asyncio.Event()
    watcher = asyncio.create_task(_watch_cancellation(job_id, cancel_event))
    try:
        status, bundle = await run_generation_job(
            engine, job_store, job_id, generation_request, business_context=business_context, cancel_event=cancel_event
        )
    finally:
        watcher.cancel()

    pubsub_client.publish_website_completed(
        job_id=job_id,
        status=status.value,
        site_id=generation_request.site_id,
        bundle=bundle.to_document() if bundle is not None else None,
    )
    return status


@app.get("/health")
async def healthcheck() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse({"status": "ok"})
