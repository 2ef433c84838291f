from __future__ import annotations

from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _BundleModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GeneratedComponent(_BundleModel):
    id: str | None = None
    type: str
    fields: Mapping[str, Any] = Field(default_factory=dict)
    section_intent: str | None = None
    score: float | None = None
    rationale: str | None = None
    degraded: bool = False
    placeholder: bool = False


class PageSEO(_BundleModel):
    title: str
    description: str
    keywords: Sequence[str] = Field(default_factory=list)


class GeneratedPage(_BundleModel):
    id: str
    name: str
    slug: str
    title: str
    description: str
    is_homepage: bool = False
    components: Sequence[GeneratedComponent] = Field(default_factory=list)
    seo: PageSEO
    order: int = 0
    priority: int = 0


class NavigationItem(_BundleModel):
    label: str
    href: str
    order: int


class NavigationStructure(_BundleModel):
    main: Sequence[NavigationItem] = Field(default_factory=list)
    footer: Sequence[NavigationItem] = Field(default_factory=list)


class SiteSettings(_BundleModel):
    theme: str = "light"
    language: str = "en"
    timezone: str = "UTC"
    favicon: str | None = None
    social_image: str | None = None


class SiteSEO(_BundleModel):
    title: str
    description: str
    keywords: Sequence[str] = Field(default_factory=list)
    og_image: str | None = None
    site_name: str | None = None


class SiteMetadata(_BundleModel):
    name: str
    domain: str | None = None
    settings: SiteSettings = Field(default_factory=SiteSettings)
    seo: SiteSEO


class AppliedDesignSystem(_BundleModel):
    colors: Mapping[str, str]
    typography: Mapping[str, str]
    spacing: Mapping[str, str]
    borders: Mapping[str, str]
    shadows: Mapping[str, str]


class ContentSummary(_BundleModel):
    total_pages: int = 0
    total_components: int = 0
    components_by_type: Mapping[str, int] = Field(default_factory=dict)
    components_per_page: Mapping[str, Mapping[str, int]] = Field(default_factory=dict)
    data_sources_used: Sequence[str] = Field(default_factory=list)
    degraded_components: int = 0
    placeholder_components: int = 0


class WebsiteBundle(_BundleModel):
    site: SiteMetadata
    industry: str
    pages: Sequence[GeneratedPage]
    navigation: NavigationStructure
    design_system: AppliedDesignSystem
    content_summary: ContentSummary
    failed_pages: Sequence[str] = Field(default_factory=list)
    cancelled_pages: Sequence[str] = Field(default_factory=list)
    estimated_build_time_ms: int = 0

    @property
    def complete(self) -> bool:
        return not self.failed_pages and not self.cancelled_pages

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "AppliedDesignSystem",
    "ContentSummary",
    "GeneratedComponent",
    "GeneratedPage",
    "NavigationItem",
    "NavigationStructure",
    "PageSEO",
    "SiteMetadata",
    "SiteSEO",
    "SiteSettings",
    "WebsiteBundle",
]
