from __future__ import annotations

import json
import logging
from typing import Any

from google.cloud import pubsub_v1

logger = logging.getLogger(__name__)

REQUEST_TOPIC = "website-requests"
COMPLETED_TOPIC = "website-completed"


class PubSubClient:
    """Wrapper for Google Cloud Pub/Sub operations."""

    def __init__(
        self,
        project_id: str,
        *,
        request_topic: str = REQUEST_TOPIC,
        completed_topic: str = COMPLETED_TOPIC,
    ) -> None:
        self.project_id = project_id
        self.request_topic = request_topic
        self.completed_topic = completed_topic
        self.publisher = pubsub_v1.PublisherClient()

    def publish(
        self,
        topic_id: str,
        message: dict[str, Any],
        *,
        attributes: dict[str, str] | None = None,
    ) -> str:
        """Publish a JSON message and return the Pub/Sub message id."""
        topic_path = self.publisher.topic_path(self.project_id, topic_id)
        data = json.dumps(message, ensure_ascii=False, default=str).encode("utf-8")
        future = self.publisher.publish(topic_path, data, **(attributes or {}))
        message_id = future.result()

        logger.info(
            "Published message to Pub/Sub",
            extra={"topic_id": topic_id, "message_id": message_id, "attributes": attributes},
        )
        return message_id

    def publish_website_request(self, *, job_id: str, request: dict[str, Any]) -> str:
        """Publish a website generation request.

        Args:
            job_id: Job ID for tracking
            request: Serialized ``GenerationRequest``

        Returns:
            Message ID from Pub/Sub
        """
        attributes = {"job_id": job_id}
        if request.get("site_id"):
            attributes["site_id"] = request["site_id"]
        return self.publish(self.request_topic, {"job_id": job_id, "request": request}, attributes=attributes)

    def publish_website_completed(
        self,
        *,
        job_id: str,
        status: str,
        site_id: str | None,
        bundle: dict[str, Any] | None,
    ) -> str:
        """Publish a generation completion notification."""
        message = {"job_id": job_id, "status": status, "site_id": site_id, "bundle": bundle}
        attributes = {"job_id": job_id, "event_type": "website_completed", "status": status}
        return self.publish(self.completed_topic, message, attributes=attributes)


__all__ = ["PubSubClient", "COMPLETED_TOPIC", "REQUEST_TOPIC"]
