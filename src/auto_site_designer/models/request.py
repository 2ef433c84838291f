from __future__ import annotations

from typing import Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field


class DesignPreferences(BaseModel):
    model_config = ConfigDict(frozen=True)

    style: Literal["minimal", "modern", "elegant", "bold", "playful"] | None = None
    tone: str | None = Field(default=None, description="Copywriting tone, e.g. friendly or authoritative")
    animation_level: Literal["none", "subtle", "moderate", "dramatic"] | None = None


class GenerationConstraints(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_pages: int | None = None
    required_pages: Sequence[str] = Field(default_factory=tuple)
    exclude_components: Sequence[str] = Field(default_factory=tuple)
    force_components: Sequence[str] = Field(default_factory=tuple)


class GenerationRequest(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "site_id": "site-cafe-001",
                "prompt": "a cozy neighborhood café with weekend brunch",
                "preferences": {"style": "modern", "tone": "warm", "animation_level": "subtle"},
                "constraints": {
                    "max_pages": 5,
                    "required_pages": ["/contact"],
                    "exclude_components": ["Video"],
                    "force_components": [],
                },
            }
        },
    )

    site_id: str | None = None
    prompt: str
    preferences: DesignPreferences = Field(default_factory=DesignPreferences)
    constraints: GenerationConstraints = Field(default_factory=GenerationConstraints)


__all__ = ["GenerationRequest", "DesignPreferences", "GenerationConstraints"]
