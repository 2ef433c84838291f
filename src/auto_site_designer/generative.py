from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Mapping, Protocol, Sequence, TypeVar

from pydantic import ValidationError

from .errors import GenerationError, GenerationTimeout, SchemaMismatch

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestKind(str, Enum):
    architecture = "architecture"
    page_components = "page-components"
    nav = "nav"
    footer = "footer"


@dataclass(frozen=True)
class StructuredPrompt:
    kind: RequestKind
    system: str
    instructions: Sequence[str]
    payload: Mapping[str, Any] = field(default_factory=dict)
    response_schema: Mapping[str, Any] | None = None
    strict: bool = False

    def render(self) -> str:
        """Flatten into a single text prompt for text-in/text-out providers."""
        parts = [self.system, "", "Instructions:"]
        parts.extend(f"- {line}" for line in self.instructions)
        parts.extend(["", "Input:", json.dumps(self.payload, ensure_ascii=False, indent=2, default=str)])
        if self.response_schema is not None:
            parts.extend(["", "Response JSON schema:", json.dumps(self.response_schema, ensure_ascii=False)])
        parts.extend(["", "Respond with a single valid JSON object only."])
        return "\n".join(parts)


class GenerativeService(Protocol):
    """Structured request in, structured result out.

    Implementations raise ``GenerationTimeout``, ``SchemaMismatch`` or
    ``ProviderError``.
    """

    async def generate(self, kind: RequestKind, prompt: StructuredPrompt) -> Mapping[str, Any]:
        ...


@dataclass
class GenerationResult(Generic[T]):
    value: T | None = None
    error: GenerationError | None = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None


async def generate_with_retry(
    service: GenerativeService,
    kind: RequestKind,
    prompt_for_attempt: Callable[[int], StructuredPrompt],
    *,
    validate: Callable[[Any], T],
    timeout: float,
    max_attempts: int,
    backoff: float = 0.0,
    log_extra: Mapping[str, Any] | None = None,
) -> GenerationResult[T]:
    """Call the service up to ``max_attempts`` times with an explicit timeout.

    ``prompt_for_attempt`` receives the 1-based attempt number so later
    attempts can be stricter or simpler. Validation runs after the call
    returns; a rejected response counts as ``SchemaMismatch``. Cancellation
    is never absorbed.
    """
    last_error: GenerationError | None = None
    for attempt in range(1, max_attempts + 1):
        prompt = prompt_for_attempt(attempt)
        try:
            raw = await asyncio.wait_for(service.generate(kind, prompt), timeout=timeout)
        except asyncio.TimeoutError:
            last_error = GenerationTimeout(f"{kind.value} request timed out after {timeout}s")
        except GenerationError as exc:
            last_error = exc
        else:
            try:
                return GenerationResult(value=validate(raw), attempts=attempt)
            except (ValidationError, ValueError, TypeError) as exc:
                last_error = SchemaMismatch(f"{kind.value} response rejected: {exc}")

        logger.warning(
            "Generative request failed",
            extra={
                "kind": kind.value,
                "attempt": attempt,
                "max_attempts": max_attempts,
                "error_type": type(last_error).__name__,
                "error": str(last_error),
                **(log_extra or {}),
            },
        )
        if attempt < max_attempts and backoff > 0:
            await asyncio.sleep(backoff * attempt)

    return GenerationResult(error=last_error, attempts=max_attempts)


__all__ = [
    "GenerationResult",
    "GenerativeService",
    "RequestKind",
    "StructuredPrompt",
    "generate_with_retry",
]
