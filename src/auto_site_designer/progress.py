from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable


class GenerationStage(str, Enum):
    building_context = "building-context"
    analyzing_prompt = "analyzing-prompt"
    generating_pages = "generating-pages"
    generating_shared_elements = "generating-shared-elements"
    finalizing = "finalizing"


# Share of overall progress reached when each stage starts.
_STAGE_START = {
    GenerationStage.building_context: 0.05,
    GenerationStage.analyzing_prompt: 0.1,
    GenerationStage.generating_pages: 0.2,
    GenerationStage.generating_shared_elements: 0.85,
    GenerationStage.finalizing: 0.95,
}


@dataclass(frozen=True)
class GenerationProgress:
    """A stage transition or a finished page, reported while a site is built."""

    stage: GenerationStage
    message: str
    pages_complete: int = 0
    pages_total: int = 0
    current_page: str | None = None

    @property
    def fraction(self) -> float:
        """Overall completion in [0, 1). Page assembly fills 0.2 to 0.85."""
        start = _STAGE_START[self.stage]
        if self.stage is GenerationStage.generating_pages and self.pages_total:
            span = _STAGE_START[GenerationStage.generating_shared_elements] - start
            return round(start + span * self.pages_complete / self.pages_total, 4)
        return start


ProgressCallback = Callable[[GenerationProgress], None]


__all__ = ["GenerationProgress", "GenerationStage", "ProgressCallback"]
