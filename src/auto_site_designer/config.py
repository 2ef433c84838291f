from __future__ import annotations

import os
from dataclasses import dataclass

ENV_PREFIX = "SITE_DESIGNER_"


@dataclass(frozen=True)
class EngineSettings:
    generation_timeout_s: float = 60.0
    architecture_max_attempts: int = 3
    component_max_attempts: int = 2
    shared_max_attempts: int = 2
    page_concurrency: int = 3
    retry_backoff_s: float = 0.5

    def __post_init__(self) -> None:
        if self.generation_timeout_s <= 0:
            raise ValueError("generation_timeout_s must be positive")
        if self.page_concurrency < 1:
            raise ValueError("page_concurrency must be at least 1")
        for name in ("architecture_max_attempts", "component_max_attempts", "shared_max_attempts"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Build settings from ``SITE_DESIGNER_*`` environment variables."""
        defaults = cls()
        return cls(
            generation_timeout_s=float(os.getenv(f"{ENV_PREFIX}GENERATION_TIMEOUT_S", defaults.generation_timeout_s)),
            architecture_max_attempts=int(
                os.getenv(f"{ENV_PREFIX}ARCHITECTURE_MAX_ATTEMPTS", defaults.architecture_max_attempts)
            ),
            component_max_attempts=int(os.getenv(f"{ENV_PREFIX}COMPONENT_MAX_ATTEMPTS", defaults.component_max_attempts)),
            shared_max_attempts=int(os.getenv(f"{ENV_PREFIX}SHARED_MAX_ATTEMPTS", defaults.shared_max_attempts)),
            page_concurrency=int(os.getenv(f"{ENV_PREFIX}PAGE_CONCURRENCY", defaults.page_concurrency)),
            retry_backoff_s=float(os.getenv(f"{ENV_PREFIX}RETRY_BACKOFF_S", defaults.retry_backoff_s)),
        )


__all__ = ["EngineSettings"]
