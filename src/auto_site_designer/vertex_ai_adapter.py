from __future__ import annotations

import json
import logging
from typing import Any

import vertexai
from google.api_core import exceptions as google_exceptions
from vertexai.generative_models import GenerationConfig, GenerativeModel

from .errors import GenerationTimeout, ProviderError, SchemaMismatch
from .generative import RequestKind, StructuredPrompt

logger = logging.getLogger(__name__)

_TEMPERATURES = {
    RequestKind.architecture: 0.4,
    RequestKind.page_components: 0.8,
    RequestKind.nav: 0.5,
    RequestKind.footer: 0.6,
}


def parse_json_response(text: str) -> dict[str, Any]:
    """Parse a JSON object, tolerating markdown code fences around it."""
    response = text.strip()
    if response.startswith("```json"):
        response = response[7:]
    if response.startswith("```"):
        response = response[3:]
    if response.endswith("```"):
        response = response[:-3]

    try:
        parsed = json.loads(response.strip())
    except json.JSONDecodeError as exc:
        raise SchemaMismatch(f"Invalid JSON response: {exc}") from exc
    if not isinstance(parsed, dict):
        raise SchemaMismatch(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


class VertexAIAdapter:
    """``GenerativeService`` backed by Vertex AI Gemini models."""

    def __init__(
        self,
        *,
        project_id: str,
        location: str = "us-central1",
        model_name: str = "gemini-1.5-pro",
        max_output_tokens: int = 8192,
    ) -> None:
        """Initialize Vertex AI adapter.

        Args:
            project_id: GCP project ID
            location: Vertex AI location
            model_name: Model name (e.g., "gemini-1.5-pro")
            max_output_tokens: Maximum output tokens per request
        """
        self.project_id = project_id
        self.location = location
        self.model_name = model_name
        self.max_output_tokens = max_output_tokens

        vertexai.init(project=project_id, location=location)
        self.model = GenerativeModel(model_name)

    async def generate(self, kind: RequestKind, prompt: StructuredPrompt) -> dict[str, Any]:
        temperature = _TEMPERATURES.get(kind, 0.7)
        if prompt.strict:
            temperature = min(temperature, 0.3)
        generation_config = GenerationConfig(
            temperature=temperature,
            max_output_tokens=self.max_output_tokens,
            response_mime_type="application/json",
        )
        rendered = prompt.render()

        try:
            response = await self.model.generate_content_async(rendered, generation_config=generation_config)
        except google_exceptions.DeadlineExceeded as exc:
            raise GenerationTimeout(f"Vertex AI deadline exceeded for {kind.value}") from exc
        except google_exceptions.GoogleAPICallError as exc:
            raise ProviderError(f"Vertex AI call failed for {kind.value}: {exc}") from exc

        try:
            generated_text = response.text
        except ValueError as exc:
            # Raised when the candidate was blocked or has no text part.
            raise ProviderError(f"Vertex AI returned no usable text for {kind.value}: {exc}") from exc

        logger.info(
            "Generated content with Vertex AI",
            extra={
                "model": self.model_name,
                "kind": kind.value,
                "temperature": temperature,
                "input_length": len(rendered),
                "output_length": len(generated_text),
            },
        )
        return parse_json_response(generated_text)


__all__ = ["VertexAIAdapter", "parse_json_response"]
