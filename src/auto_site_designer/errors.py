from __future__ import annotations

from typing import Sequence


class GenerationFailure(Exception):
    """Terminal failure of a whole website generation request."""

    reason = "generation_failed"


class InvalidRequest(GenerationFailure):
    reason = "invalid_request"

    def __init__(self, problems: Sequence[str]) -> None:
        self.problems = list(problems)
        super().__init__("Invalid generation request: " + "; ".join(self.problems))


class ArchitecturePlanningFailure(GenerationFailure):
    reason = "architecture_planning_failed"

    def __init__(self, message: str, *, attempts: int, last_error: Exception | None = None) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(message)


class GenerationCancelled(GenerationFailure):
    """Cancelled before a site architecture existed, so there is nothing to return."""

    reason = "cancelled"


class GenerationError(Exception):
    """Typed failure reported by the generative service."""


class GenerationTimeout(GenerationError):
    pass


class SchemaMismatch(GenerationError):
    pass


class ProviderError(GenerationError):
    pass


class ContentUnavailable(Exception):
    def __init__(self, component_type: str, missing: Sequence[str]) -> None:
        self.component_type = component_type
        self.missing = list(missing)
        super().__init__(f"{component_type} cannot render, missing critical content: {', '.join(self.missing)}")


class PageAssemblyFailure(Exception):
    def __init__(self, page_id: str, message: str) -> None:
        self.page_id = page_id
        super().__init__(message)


__all__ = [
    "GenerationFailure",
    "InvalidRequest",
    "ArchitecturePlanningFailure",
    "GenerationCancelled",
    "GenerationError",
    "GenerationTimeout",
    "SchemaMismatch",
    "ProviderError",
    "ContentUnavailable",
    "PageAssemblyFailure",
]
