import json
import logging

import pytest

from auto_site_designer.business_repository import LocalBusinessContextRepository
from auto_site_designer.config import EngineSettings
from auto_site_designer.errors import SchemaMismatch
from auto_site_designer.job_store import JobStore
from auto_site_designer.logging_config import StructuredFormatter, get_trace_id, trace_scope
from auto_site_designer.models.job import JobStatus
from auto_site_designer.vertex_ai_adapter import parse_json_response

from support import DATA_DIR


def test_parse_json_response_strips_code_fences():
    assert parse_json_response('```json\n{"description": "ok"}\n```') == {"description": "ok"}
    assert parse_json_response('  {"pages": []}  ') == {"pages": []}


@pytest.mark.parametrize("text", ["not json", "[1, 2, 3]", "```\n```"])
def test_parse_json_response_rejects_non_objects(text):
    with pytest.raises(SchemaMismatch):
        parse_json_response(text)


def test_structured_formatter_includes_extra_fields_and_trace():
    record = logging.LogRecord("auto_site_designer.engine", logging.INFO, __file__, 10, "Assembled page", None, None)
    record.page_id = "menu"
    record.components = ["Hero", "Tabs"]

    with trace_scope("trace-123"):
        payload = json.loads(StructuredFormatter().format(record))
        scoped = json.loads(StructuredFormatter(project_id="demo").format(record))

    assert payload["severity"] == "INFO"
    assert payload["message"] == "Assembled page"
    assert payload["page_id"] == "menu"
    assert payload["components"] == ["Hero", "Tabs"]
    assert payload["logging.googleapis.com/trace"] == "trace-123"
    assert payload["timestamp"].endswith("Z")
    assert "msg" not in payload and "args" not in payload
    assert payload["serviceContext"] == {"service": "auto-site-designer"}
    assert scoped["logging.googleapis.com/trace"] == "projects/demo/traces/trace-123"
    assert get_trace_id() is None


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("SITE_DESIGNER_PAGE_CONCURRENCY", "5")
    monkeypatch.setenv("SITE_DESIGNER_GENERATION_TIMEOUT_S", "12.5")

    settings = EngineSettings.from_env()

    assert settings.page_concurrency == 5
    assert settings.generation_timeout_s == 12.5
    assert settings.component_max_attempts == 2


def test_settings_reject_invalid_values():
    with pytest.raises(ValueError):
        EngineSettings(page_concurrency=0)
    with pytest.raises(ValueError):
        EngineSettings(architecture_max_attempts=0)


def test_job_store_cancellation_only_for_running_jobs():
    store = JobStore()
    running = store.create_job(site_id="cafe", prompt="café")
    finished = store.create_job(site_id=None, prompt="café")
    store.update_job(finished.id, status=JobStatus.completed, progress=1.0)

    assert running.id.startswith("job_cafe_")
    assert store.request_cancel(running.id).cancel_requested
    assert not store.request_cancel(finished.id).cancel_requested
    assert store.get_job("missing") is None


def test_local_business_repository():
    repository = LocalBusinessContextRepository(base_path=DATA_DIR / "business")

    assert repository.get("cafe").business_name == "Bean & Bloom"
    with pytest.raises(FileNotFoundError):
        repository.get("unknown-site")
