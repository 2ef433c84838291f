from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Iterator

from google.cloud import logging as cloud_logging

SERVICE_NAME = "auto-site-designer"

# Trace (generation) id of the request being served.
trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, using Cloud Logging's special keys.

    Fields passed through ``extra=`` become top-level keys, so
    ``logger.info("Assembled page", extra={"page_id": "menu"})`` is queryable
    as ``jsonPayload.page_id``.
    """

    def __init__(self, *, project_id: str | None = None, service: str = SERVICE_NAME) -> None:
        super().__init__()
        self.project_id = project_id
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "severity": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "serviceContext": {"service": self.service},
            "logging.googleapis.com/sourceLocation": {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            },
        }

        trace_id = trace_id_var.get()
        if trace_id:
            log_obj["logging.googleapis.com/trace"] = (
                f"projects/{self.project_id}/traces/{trace_id}" if self.project_id else trace_id
            )

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_obj[key] = value

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, ensure_ascii=False, default=str)


def setup_logging(
    *,
    environment: str = "dev",
    project_id: str | None = None,
    use_cloud_logging: bool = True,
) -> None:
    """Configure root logging for a service process.

    Non-dev environments with a project hand records to the Cloud Logging
    client; everything else gets ``StructuredFormatter`` JSON on stdout.
    """
    log_level = logging.DEBUG if environment == "dev" else logging.INFO

    if use_cloud_logging and project_id and environment != "dev":
        client = cloud_logging.Client(project=project_id)
        client.setup_logging(log_level=log_level)
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter(project_id=project_id))
        logging.basicConfig(level=log_level, handlers=[handler], force=True)

    for noisy in ("google", "urllib3", "grpc", "vertexai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def set_trace_id(trace_id: str) -> None:
    trace_id_var.set(trace_id)


def get_trace_id() -> str | None:
    return trace_id_var.get()


@contextmanager
def trace_scope(trace_id: str) -> Iterator[str]:
    """Bind ``trace_id`` for the duration of the block, then restore the previous one."""
    token = trace_id_var.set(trace_id)
    try:
        yield trace_id
    finally:
        trace_id_var.reset(token)


__all__ = [
    "SERVICE_NAME",
    "StructuredFormatter",
    "get_trace_id",
    "set_trace_id",
    "setup_logging",
    "trace_scope",
]
