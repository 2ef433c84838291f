from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from .catalog import DEFAULT_CATALOG, SHARED_COMPONENT_TYPES, ComponentCatalog
from .config import EngineSettings
from .errors import ArchitecturePlanningFailure
from .generative import GenerativeService, RequestKind, generate_with_retry
from .industries import IndustryProfile, default_candidates
from .models.architecture import (
    ArchitectureResponse,
    DesignTokens,
    PagePlan,
    PageResponse,
    SectionPlan,
    SiteArchitecture,
)
from .models.business import BusinessDataContext
from .models.request import GenerationRequest
from .prompts import architecture_prompt
from .scorer import INTENT_AFFINITY

logger = logging.getLogger(__name__)

_HOME_ALIASES = {"", "/", "/home", "/index"}


def normalize_slug(value: str) -> str:
    slug = value.strip().lower()
    slug = re.sub(r"\s+", "-", slug)
    if not slug.startswith("/"):
        slug = f"/{slug}"
    slug = slug.rstrip("/") or "/"
    return "/" if slug in _HOME_ALIASES else slug


def page_id_for(slug: str) -> str:
    return "home" if slug == "/" else slug.strip("/").replace("/", "-")


def _slugify(name: str) -> str:
    # Unlike normalize_slug, home aliases are not mapped to "/".
    cleaned = re.sub(r"[^a-z0-9\s-]", "", name.lower()).strip()
    return "/" + re.sub(r"\s+", "-", cleaned) if cleaned else "/page"


def _branding_tokens(context: BusinessDataContext) -> DesignTokens:
    branding = context.branding
    return DesignTokens(
        primary_color=branding.primary_color,
        secondary_color=branding.secondary_color,
        accent_color=branding.accent_color,
        font_heading=branding.heading_font,
        font_body=branding.body_font,
    )


class ArchitecturePlanner:
    """Turns a request into a constraint-respecting ``SiteArchitecture``."""

    def __init__(
        self,
        service: GenerativeService,
        *,
        catalog: ComponentCatalog = DEFAULT_CATALOG,
        settings: EngineSettings | None = None,
    ) -> None:
        self._service = service
        self._catalog = catalog
        self._settings = settings or EngineSettings()

    async def plan(
        self,
        request: GenerationRequest,
        business_context: BusinessDataContext,
        profile: IndustryProfile,
    ) -> SiteArchitecture:
        result = await generate_with_retry(
            self._service,
            RequestKind.architecture,
            lambda attempt: architecture_prompt(request, business_context, profile, self._catalog, attempt=attempt),
            validate=ArchitectureResponse.model_validate,
            timeout=self._settings.generation_timeout_s,
            max_attempts=self._settings.architecture_max_attempts,
            backoff=self._settings.retry_backoff_s,
            log_extra={"industry": profile.id},
        )
        if not result.ok:
            raise ArchitecturePlanningFailure(
                f"No valid architecture after {result.attempts} attempts: {result.error}",
                attempts=result.attempts,
                last_error=result.error,
            )
        architecture = self.build_architecture(result.value, request, business_context, profile)
        logger.info(
            "Planned site architecture",
            extra={
                "industry": profile.id,
                "pages": [page.slug for page in architecture.pages],
                "attempts": result.attempts,
            },
        )
        return architecture

    def build_architecture(
        self,
        response: ArchitectureResponse,
        request: GenerationRequest,
        business_context: BusinessDataContext,
        profile: IndustryProfile,
    ) -> SiteArchitecture:
        """Apply request constraints to a validated planner response."""
        constraints = request.constraints
        pages = [self._page_from_response(page, profile) for page in response.pages]
        pages = self._ensure_homepage(self._dedupe_slugs(pages))

        pages = sorted(pages, key=lambda page: page.priority)
        if constraints.max_pages:
            pages = pages[: constraints.max_pages]

        pages = self._insert_required_pages(pages, constraints.required_pages, constraints.max_pages, profile)
        pages = self._remove_excluded(pages, constraints.exclude_components)
        pages = self._add_forced(pages, constraints.force_components, constraints.exclude_components)
        pages = self._assign_page_ids(sorted(pages, key=lambda page: page.priority))

        design_tokens = response.design_tokens.merged(profile.design_tokens).merged(_branding_tokens(business_context))
        return SiteArchitecture(
            industry=profile.id,
            tone=request.preferences.tone or response.tone,
            pages=pages,
            shared_elements=response.shared_elements,
            design_tokens=design_tokens,
        )

    def _known_candidates(self, types: Iterable[str]) -> list[str]:
        return [
            component_type
            for component_type in dict.fromkeys(types)
            if component_type in self._catalog and component_type not in SHARED_COMPONENT_TYPES
        ]

    def _section_for_intent(self, intent: str, profile: IndustryProfile) -> SectionPlan:
        candidates = self._known_candidates(default_candidates(intent, profile))
        return SectionPlan(intent=intent, candidates=candidates or [self._fallback_type()])

    def _fallback_type(self) -> str:
        # A catalog without the fallback type is caught during page assembly.
        return self._catalog.fallback_type or "RichText"

    def _page_from_response(self, page: PageResponse, profile: IndustryProfile) -> PagePlan:
        sections: list[SectionPlan] = []
        for section in page.sections:
            intent = section.intent.strip().lower()
            candidates = self._known_candidates([section.suggested_component, *section.alternatives])
            if not candidates:
                sections.append(self._section_for_intent(intent, profile))
                continue
            sections.append(
                SectionPlan(
                    intent=intent,
                    candidates=candidates,
                    content_hints=tuple(section.content_needs),
                    design_notes=section.design_notes,
                )
            )
        return PagePlan(
            name=page.name.strip(),
            slug=normalize_slug(page.slug),
            purpose=page.purpose,
            priority=page.priority,
            sections=sections,
        )

    def _dedupe_slugs(self, pages: Sequence[PagePlan]) -> list[PagePlan]:
        seen: set[str] = set()
        result: list[PagePlan] = []
        for page in pages:
            slug = page.slug
            if slug in seen:
                base = _slugify(page.name) if slug == "/" else slug
                slug, counter = base, 2
                while slug in seen or slug in _HOME_ALIASES:
                    slug = f"{base}-{counter}"
                    counter += 1
                page = page.model_copy(update={"slug": slug})
            seen.add(slug)
            result.append(page)
        return result

    def _ensure_homepage(self, pages: Sequence[PagePlan]) -> list[PagePlan]:
        pages = list(pages)
        if not pages or any(page.is_homepage for page in pages):
            return pages
        index = min(range(len(pages)), key=lambda position: pages[position].priority)
        pages[index] = pages[index].model_copy(update={"slug": "/"})
        return pages

    def _insert_required_pages(
        self,
        pages: list[PagePlan],
        required_pages: Sequence[str],
        max_pages: int | None,
        profile: IndustryProfile,
    ) -> list[PagePlan]:
        required_slugs: set[str] = set()
        for required in required_pages:
            slug = normalize_slug(required)
            name = required.strip().strip("/").lower()
            match = next((page for page in pages if page.slug == slug or page.name.lower() == name), None)
            if match:
                required_slugs.add(match.slug)
                continue

            template = profile.page_template(required)
            next_priority = max((page.priority for page in pages), default=0) + 1
            if template:
                stub = PagePlan(
                    name=template.name,
                    slug=template.slug,
                    purpose=f"{template.name} page",
                    priority=template.priority,
                    sections=[self._section_for_intent(intent, profile) for intent in template.intents],
                )
            else:
                label = name.replace("-", " ").title() or "Home"
                stub = PagePlan(
                    name=label,
                    slug=slug,
                    purpose=f"{label} page",
                    priority=next_priority,
                    sections=[self._section_for_intent("hero", profile), self._section_for_intent("content", profile)],
                )
            logger.info("Inserted required page stub", extra={"slug": stub.slug})
            pages.append(stub)
            required_slugs.add(stub.slug)

        pages = sorted(pages, key=lambda page: page.priority)
        if max_pages:
            while len(pages) > max_pages:
                removable = [page for page in pages if page.slug not in required_slugs]
                if not removable:
                    break
                # Lowest priority first, the homepage last.
                victim = max(removable, key=lambda page: (not page.is_homepage, page.priority))
                pages.remove(victim)
        return self._ensure_homepage(pages)

    def _remove_excluded(self, pages: Sequence[PagePlan], excluded: Sequence[str]) -> list[PagePlan]:
        excluded_types = set(excluded)
        result: list[PagePlan] = []
        for page in pages:
            sections: list[SectionPlan] = []
            for section in page.sections:
                candidates = [candidate for candidate in section.candidates if candidate not in excluded_types]
                if not candidates:
                    logger.debug(
                        "Removed section with only excluded candidates",
                        extra={"slug": page.slug, "intent": section.intent},
                    )
                    continue
                sections.append(section.model_copy(update={"candidates": candidates}))
            if not sections:
                sections = [SectionPlan(intent="content", candidates=[self._fallback_type()])]
            result.append(page.model_copy(update={"sections": sections}))
        return result

    def _add_forced(
        self,
        pages: Sequence[PagePlan],
        forced: Sequence[str],
        excluded: Sequence[str],
    ) -> list[PagePlan]:
        pages = list(pages)
        if not pages:
            return pages
        home_index = next((index for index, page in enumerate(pages) if page.is_homepage), 0)
        for component_type in self._known_candidates(forced):
            if component_type in excluded:
                continue
            if any(section.candidates[0] == component_type for page in pages for section in page.sections):
                continue
            intent = next(
                (intent for intent, types in INTENT_AFFINITY.items() if component_type in types),
                component_type.lower(),
            )
            home = pages[home_index]
            sections = [*home.sections, SectionPlan(intent=intent, candidates=[component_type])]
            pages[home_index] = home.model_copy(update={"sections": sections})
        return pages

    def _assign_page_ids(self, pages: Sequence[PagePlan]) -> list[PagePlan]:
        seen: set[str] = set()
        result: list[PagePlan] = []
        for page in pages:
            base = page_id_for(page.slug)
            page_id, counter = base, 2
            while page_id in seen:
                page_id = f"{base}-{counter}"
                counter += 1
            seen.add(page_id)
            result.append(page.model_copy(update={"page_id": page_id}))
        return result


__all__ = ["ArchitecturePlanner", "normalize_slug", "page_id_for"]
