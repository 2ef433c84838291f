from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field


class SectionPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    intent: str
    candidates: Sequence[str] = Field(min_length=1, description="Primary component type first, then alternatives")
    content_hints: Sequence[str] = Field(default_factory=tuple)
    design_notes: str | None = None


class PagePlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    page_id: str = ""
    name: str
    slug: str
    purpose: str = ""
    priority: int
    sections: Sequence[SectionPlan] = Field(default_factory=tuple)

    @property
    def is_homepage(self) -> bool:
        return self.slug in ("/", "")


class NavbarHints(BaseModel):
    model_config = ConfigDict(frozen=True)

    style: str = "sticky"
    variant: str = "modern"
    show_cta: bool = True
    cta_text: str | None = None


class FooterHints(BaseModel):
    model_config = ConfigDict(frozen=True)

    style: str = "comprehensive"
    columns: int = 4
    newsletter: bool = True
    social_links: bool = True


class SharedElementHints(BaseModel):
    model_config = ConfigDict(frozen=True)

    navbar: NavbarHints = Field(default_factory=NavbarHints)
    footer: FooterHints = Field(default_factory=FooterHints)


class DesignTokens(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary_color: str | None = None
    secondary_color: str | None = None
    accent_color: str | None = None
    background_color: str | None = None
    text_color: str | None = None
    font_heading: str | None = None
    font_body: str | None = None
    border_radius: str | None = None
    shadow_style: str | None = None
    spacing_scale: str | None = None
    color_mood: str | None = None

    def merged(self, override: "DesignTokens") -> "DesignTokens":
        """Return a copy where every set field of ``override`` wins."""
        return self.model_copy(update=override.model_dump(exclude_none=True))


class SiteArchitecture(BaseModel):
    model_config = ConfigDict(frozen=True)

    industry: str
    tone: str = "professional"
    pages: Sequence[PagePlan]
    shared_elements: SharedElementHints = Field(default_factory=SharedElementHints)
    design_tokens: DesignTokens = Field(default_factory=DesignTokens)


# Shape the generative service must return for an architecture request.


class SectionResponse(BaseModel):
    intent: str = Field(min_length=1)
    suggested_component: str = Field(min_length=1)
    alternatives: Sequence[str] = Field(default_factory=list)
    content_needs: Sequence[str] = Field(default_factory=list)
    design_notes: str | None = None


class PageResponse(BaseModel):
    name: str = Field(min_length=1)
    slug: str
    purpose: str = ""
    priority: int
    sections: Sequence[SectionResponse] = Field(min_length=1)


class ArchitectureResponse(BaseModel):
    tone: str = "professional"
    pages: Sequence[PageResponse] = Field(min_length=1)
    shared_elements: SharedElementHints = Field(default_factory=SharedElementHints)
    design_tokens: DesignTokens = Field(default_factory=DesignTokens)


class NavbarResponse(BaseModel):
    logo_text: str | None = None
    cta_text: str | None = None
    cta_link: str | None = None
    style: str | None = None


class FooterResponse(BaseModel):
    description: str = Field(min_length=1)
    copyright: str | None = None


__all__ = [
    "ArchitectureResponse",
    "DesignTokens",
    "FooterHints",
    "FooterResponse",
    "NavbarHints",
    "NavbarResponse",
    "PagePlan",
    "PageResponse",
    "SectionPlan",
    "SectionResponse",
    "SharedElementHints",
    "SiteArchitecture",
]
