from __future__ import annotations

from collections import Counter
from typing import Sequence

from .assembler import truncate_description
from .catalog import SHARED_COMPONENT_TYPES
from .models.architecture import DesignTokens, SiteArchitecture
from .models.bundle import (
    AppliedDesignSystem,
    ContentSummary,
    GeneratedComponent,
    GeneratedPage,
    NavigationItem,
    NavigationStructure,
    SiteMetadata,
    SiteSEO,
    SiteSettings,
    WebsiteBundle,
)
from .models.business import BusinessDataContext

_RADIUS = {"none": "0px", "sm": "4px", "md": "8px", "lg": "16px", "full": "9999px"}
_SPACING = {
    "compact": {"section": "48px", "block": "16px", "gap": "12px"},
    "balanced": {"section": "80px", "block": "24px", "gap": "16px"},
    "spacious": {"section": "120px", "block": "32px", "gap": "24px"},
}
_SHADOWS = {
    "none": "none",
    "subtle": "0 1px 2px rgba(0, 0, 0, 0.05)",
    "soft": "0 4px 12px rgba(0, 0, 0, 0.08)",
    "medium": "0 8px 24px rgba(0, 0, 0, 0.12)",
}
_DEFAULT_TOKENS = DesignTokens(
    primary_color="#3b82f6",
    secondary_color="#6b7280",
    accent_color="#f59e0b",
    background_color="#ffffff",
    text_color="#111827",
    font_heading="Inter",
    font_body="Inter",
    border_radius="md",
    spacing_scale="balanced",
    shadow_style="soft",
)


def build_design_system(tokens: DesignTokens) -> AppliedDesignSystem:
    tokens = _DEFAULT_TOKENS.merged(tokens)
    return AppliedDesignSystem(
        colors={
            "primary": tokens.primary_color,
            "secondary": tokens.secondary_color,
            "accent": tokens.accent_color,
            "background": tokens.background_color,
            "text": tokens.text_color,
        },
        typography={"heading": tokens.font_heading, "body": tokens.font_body},
        spacing=_SPACING.get(tokens.spacing_scale, _SPACING["balanced"]),
        borders={"radius": _RADIUS.get(tokens.border_radius, tokens.border_radius)},
        shadows={"card": _SHADOWS.get(tokens.shadow_style, _SHADOWS["soft"])},
    )


def build_navigation(pages: Sequence[GeneratedPage]) -> NavigationStructure:
    main = [page for page in pages if not page.is_homepage]
    return NavigationStructure(
        main=[NavigationItem(label=page.name, href=page.slug, order=index) for index, page in enumerate(main, start=1)],
        footer=[NavigationItem(label=page.name, href=page.slug, order=index) for index, page in enumerate(pages, start=1)],
    )


def _site_metadata(architecture: SiteArchitecture, business_context: BusinessDataContext) -> SiteMetadata:
    business_name = business_context.business_name
    client = business_context.client
    title = f"{business_name} | {client.tagline}" if client.tagline else business_name
    description = truncate_description(
        client.description or business_context.site.description or f"Welcome to {business_name}"
    )
    keywords = [architecture.industry, business_name, *(service.name for service in business_context.services[:5])]
    return SiteMetadata(
        name=business_name,
        domain=business_context.site.domain,
        settings=SiteSettings(
            language=business_context.site.language,
            timezone=business_context.site.timezone or "UTC",
            favicon=business_context.branding.favicon_url,
            social_image=business_context.branding.logo_url,
        ),
        seo=SiteSEO(
            title=title,
            description=description,
            keywords=keywords,
            og_image=business_context.branding.logo_url,
            site_name=business_name,
        ),
    )


def _summarize(pages: Sequence[GeneratedPage], business_context: BusinessDataContext) -> ContentSummary:
    unique: dict[str, GeneratedComponent] = {}
    per_page: dict[str, dict[str, int]] = {}
    for page in pages:
        per_page[page.id] = dict(Counter(component.type for component in page.components))
        for component in page.components:
            unique.setdefault(component.id, component)
    return ContentSummary(
        total_pages=len(pages),
        total_components=len(unique),
        components_by_type=dict(Counter(component.type for component in unique.values())),
        components_per_page=per_page,
        data_sources_used=business_context.data_sources_used(),
        degraded_components=sum(component.degraded for component in unique.values()),
        placeholder_components=sum(component.placeholder for component in unique.values()),
    )


def compose(
    architecture: SiteArchitecture,
    pages: Sequence[GeneratedPage],
    nav: GeneratedComponent,
    footer: GeneratedComponent,
    *,
    business_context: BusinessDataContext,
    failed_pages: Sequence[str] = (),
    cancelled_pages: Sequence[str] = (),
    build_time_ms: int = 0,
) -> WebsiteBundle:
    """Order pages, assign ids and splice the shared navbar and footer into every page."""
    composed: list[GeneratedPage] = []
    for order, page in enumerate(sorted(pages, key=lambda page: page.priority)):
        content = [component for component in page.components if component.type not in SHARED_COMPONENT_TYPES]
        components = [
            component.model_copy(update={"id": f"{page.id}-{index}-{component.type.lower()}"})
            for index, component in enumerate(content)
        ]
        composed.append(page.model_copy(update={"components": [nav, *components, footer], "order": order}))

    return WebsiteBundle(
        site=_site_metadata(architecture, business_context),
        industry=architecture.industry,
        pages=composed,
        navigation=build_navigation(composed),
        design_system=build_design_system(architecture.design_tokens),
        content_summary=_summarize(composed, business_context),
        failed_pages=list(failed_pages),
        cancelled_pages=list(cancelled_pages),
        estimated_build_time_ms=build_time_ms,
    )


__all__ = ["build_design_system", "build_navigation", "compose"]
