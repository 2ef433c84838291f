from __future__ import annotations

from typing import Any, Mapping, Sequence

from .catalog import ComponentCatalog, ComponentDefinition
from .generative import RequestKind, StructuredPrompt
from .industries import IndustryProfile, format_profile_for_prompt
from .models.architecture import (
    ArchitectureResponse,
    FooterResponse,
    NavbarResponse,
    PagePlan,
    SectionPlan,
    SiteArchitecture,
)
from .models.business import BusinessDataContext
from .models.request import GenerationRequest

ARCHITECT_SYSTEM = (
    "You are a senior information architect planning small-business websites. "
    "You choose pages and section intents and suggest components from a fixed catalog."
)
COPYWRITER_SYSTEM = (
    "You are a website copywriter. You write concise, specific copy for one component at a time, "
    "using only facts provided about the business."
)


def summarize_business(context: BusinessDataContext) -> dict[str, Any]:
    """Compact, prompt-safe view of the business data snapshot."""
    availability = context.availability()
    summary: dict[str, Any] = {
        "business_name": context.business_name,
        "industry": context.client.industry,
        "description": context.client.description or context.site.description,
        "tagline": context.client.tagline,
        "available_data": [name for name, present in availability.model_dump().items() if present],
    }
    if context.services:
        summary["services"] = [service.name for service in context.services[:12]]
    if context.team:
        summary["team"] = [f"{member.name} ({member.role})" if member.role else member.name for member in context.team[:8]]
    if context.testimonials:
        summary["testimonial_count"] = len(context.testimonials)
    if context.contact.address:
        summary["address"] = context.contact.address.one_line()
    return {key: value for key, value in summary.items() if value not in (None, [], "")}


def architecture_prompt(
    request: GenerationRequest,
    context: BusinessDataContext,
    profile: IndustryProfile,
    catalog: ComponentCatalog,
    *,
    attempt: int = 1,
) -> StructuredPrompt:
    constraints = request.constraints
    instructions = [
        "Plan the pages of the website in priority order, homepage first with slug '/'.",
        "Give every page at least one section; each section has an intent and a suggested_component from the catalog.",
        "List alternatives from the catalog in order of preference.",
        "Only suggest components whose content the business can plausibly supply.",
    ]
    if constraints.max_pages:
        instructions.append(f"Plan at most {constraints.max_pages} pages.")
    if constraints.required_pages:
        instructions.append(f"Include these pages: {', '.join(constraints.required_pages)}.")
    if constraints.exclude_components:
        instructions.append(f"Never use these components: {', '.join(constraints.exclude_components)}.")
    if constraints.force_components:
        instructions.append(f"Use these components somewhere on the site: {', '.join(constraints.force_components)}.")
    if attempt > 1:
        instructions.append(
            "Your previous answer did not match the schema. Return ONLY a JSON object that validates against "
            "the response schema: a non-empty 'pages' array, every page with name, slug, integer priority "
            "and a non-empty 'sections' array."
        )

    return StructuredPrompt(
        kind=RequestKind.architecture,
        system=ARCHITECT_SYSTEM,
        instructions=instructions,
        payload={
            "prompt": request.prompt,
            "business": summarize_business(context),
            "preferences": request.preferences.model_dump(exclude_none=True),
            "industry_profile": format_profile_for_prompt(profile),
            "component_catalog": catalog.summary(exclude=constraints.exclude_components),
        },
        response_schema=ArchitectureResponse.model_json_schema(),
        strict=attempt > 1,
    )


def component_prompt(
    *,
    page: PagePlan,
    section: SectionPlan,
    definition: ComponentDefinition,
    schema: Mapping[str, Any],
    architecture: SiteArchitecture,
    context: BusinessDataContext,
    known_values: Mapping[str, Any],
    previous_components: Sequence[str] = (),
    attempt: int = 1,
) -> StructuredPrompt:
    simplified = attempt > 1
    instructions = [
        f"Fill the fields of a {definition.type} component for the '{section.intent}' section.",
        f"Write in a {architecture.tone} tone.",
        "Keep known values; do not invent names, prices, quotes or contact details.",
    ]
    payload: dict[str, Any] = {
        "page": {"id": page.page_id, "name": page.name, "slug": page.slug},
        "section": {"intent": section.intent, "content_hints": list(section.content_hints)},
        "component": {
            "type": definition.type,
            "description": definition.description,
            "fields": {name: spec.kind for name, spec in definition.fields.items()},
        },
        "known_values": dict(known_values),
    }
    if simplified:
        instructions.append("Return only the component fields as a flat JSON object; short plain text values only.")
    else:
        payload["page"]["purpose"] = page.purpose
        payload["business"] = summarize_business(context)
        payload["design_tokens"] = architecture.design_tokens.model_dump(exclude_none=True)
        payload["earlier_sections"] = list(previous_components)
        if section.design_notes:
            payload["section"]["design_notes"] = section.design_notes

    return StructuredPrompt(
        kind=RequestKind.page_components,
        system=COPYWRITER_SYSTEM,
        instructions=instructions,
        payload=payload,
        response_schema=schema,
        strict=simplified,
    )


def nav_prompt(
    pages: Sequence[tuple[str, str]],
    architecture: SiteArchitecture,
    context: BusinessDataContext,
    *,
    attempt: int = 1,
) -> StructuredPrompt:
    hints = architecture.shared_elements.navbar
    instructions = [
        "Configure the site-wide navigation bar.",
        "Suggest a short call-to-action label that fits the business.",
    ]
    if attempt > 1:
        instructions.append("Return only logo_text, cta_text, cta_link and style.")
    return StructuredPrompt(
        kind=RequestKind.nav,
        system=COPYWRITER_SYSTEM,
        instructions=instructions,
        payload={
            "business_name": context.business_name,
            "pages": [{"name": name, "slug": slug} for name, slug in pages],
            "hints": hints.model_dump(exclude_none=True),
            "tone": architecture.tone,
        },
        response_schema=NavbarResponse.model_json_schema(),
        strict=attempt > 1,
    )


def footer_prompt(
    architecture: SiteArchitecture,
    context: BusinessDataContext,
    *,
    attempt: int = 1,
) -> StructuredPrompt:
    instructions = [
        "Write the site-wide footer copy: a one or two sentence description of the business.",
        "Contact details and links are filled in separately; do not repeat or invent them.",
    ]
    if attempt > 1:
        instructions.append("Return only description and copyright.")
    payload: dict[str, Any] = {
        "business": summarize_business(context),
        "hints": architecture.shared_elements.footer.model_dump(exclude_none=True),
        "tone": architecture.tone,
    }
    if context.hours:
        payload["hours"] = [hours.model_dump(exclude_none=True) for hours in context.hours]
    if context.social:
        payload["social_platforms"] = [link.platform for link in context.social]
    return StructuredPrompt(
        kind=RequestKind.footer,
        system=COPYWRITER_SYSTEM,
        instructions=instructions,
        payload=payload,
        response_schema=FooterResponse.model_json_schema(),
        strict=attempt > 1,
    )


__all__ = [
    "architecture_prompt",
    "component_prompt",
    "footer_prompt",
    "nav_prompt",
    "summarize_business",
]
