from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic.alias_generators import to_snake

from .catalog import DEFAULT_CATALOG, SHARED_COMPONENT_TYPES, ComponentCatalog
from .config import EngineSettings
from .errors import ContentUnavailable, PageAssemblyFailure, ProviderError
from .generative import GenerativeService, RequestKind, generate_with_retry
from .industries import IndustryProfile
from .models.architecture import PagePlan, SectionPlan, SiteArchitecture
from .models.bundle import GeneratedComponent, GeneratedPage, PageSEO
from .models.business import BusinessDataContext, is_present
from .models.request import DesignPreferences
from .prompts import component_prompt
from .resolver import ContentResolution, require, resolve
from .scorer import ComponentScore, ScoringContext, rank, score

logger = logging.getLogger(__name__)

SEO_DESCRIPTION_LIMIT = 160


def truncate_description(text: str, limit: int = SEO_DESCRIPTION_LIMIT) -> str:
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[: limit - 3].rstrip() + "..."


@dataclass(frozen=True)
class AssemblyContext:
    """Read-only inputs shared by every page task of one request."""

    business_context: BusinessDataContext
    profile: IndustryProfile
    preferences: DesignPreferences | None = None


class PageAssembler:
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

    async def assemble(
        self,
        page_plan: PagePlan,
        architecture: SiteArchitecture,
        context: AssemblyContext,
    ) -> GeneratedPage:
        if self._catalog.fallback_type is None:
            raise PageAssemblyFailure(page_plan.page_id, "Component catalog has no fallback component registered")

        used_types: set[str] = set()
        components: list[GeneratedComponent] = []
        for section in page_plan.sections:
            try:
                choice, resolution = self.select_component(section, context, used_types)
                component = await self._generate_component(
                    page_plan, section, choice, resolution, architecture, context, components
                )
            except ContentUnavailable as exc:
                raise PageAssemblyFailure(page_plan.page_id, str(exc)) from exc
            components.append(component)
            used_types.add(choice.component_type)

        logger.info(
            "Assembled page",
            extra={
                "page_id": page_plan.page_id,
                "components": [component.type for component in components],
                "placeholders": sum(component.placeholder for component in components),
            },
        )
        return self._build_page(page_plan, architecture, context, components)

    def select_component(
        self,
        section: SectionPlan,
        context: AssemblyContext,
        used_types: set[str] | frozenset[str] = frozenset(),
    ) -> tuple[ComponentScore, ContentResolution]:
        """Highest-ranked renderable candidate, else the catalog fallback type."""
        scoring_context = ScoringContext(
            intent=section.intent,
            availability=context.business_context.availability(),
            profile=context.profile,
            used_types=frozenset(used_types),
            preferences=context.preferences,
            catalog=self._catalog,
        )
        candidates = [candidate for candidate in section.candidates if candidate not in SHARED_COMPONENT_TYPES]
        for candidate in rank(section.intent, candidates, scoring_context):
            try:
                resolution = require(candidate.component_type, context.business_context, self._catalog)
            except ContentUnavailable as exc:
                logger.debug(
                    "Skipping candidate without critical content",
                    extra={"intent": section.intent, "component_type": exc.component_type, "missing": exc.missing},
                )
                continue
            return candidate, resolution

        fallback_type = self._catalog.fallback_type
        resolution = resolve(fallback_type, context.business_context, self._catalog)
        if not resolution.can_render:
            raise ContentUnavailable(fallback_type, resolution.missing_critical)
        logger.info(
            "No renderable candidate, using fallback component",
            extra={"intent": section.intent, "candidates": list(section.candidates), "fallback": fallback_type},
        )
        return score(fallback_type, scoring_context), resolution

    async def _generate_component(
        self,
        page_plan: PagePlan,
        section: SectionPlan,
        choice: ComponentScore,
        resolution: ContentResolution,
        architecture: SiteArchitecture,
        context: AssemblyContext,
        previous: list[GeneratedComponent],
    ) -> GeneratedComponent:
        """Generate one component's fields.

        Timeouts and schema mismatches fall back to placeholder fields. A
        ``ProviderError`` that survives every retry raises
        ``PageAssemblyFailure`` instead, reporting the page in ``failed_pages``.
        """
        component_type = choice.component_type
        definition = self._catalog.get(component_type)
        schema = self._catalog.schema_model(component_type).model_json_schema()
        known_values = {name: resolution.values[name] for name in resolution.from_data}
        previous_labels = []
        for component in previous:
            label = component.fields.get("headline") or component.fields.get("title")
            previous_labels.append(f"{component.type}: {label}" if label else component.type)

        result = await generate_with_retry(
            self._service,
            RequestKind.page_components,
            lambda attempt: component_prompt(
                page=page_plan,
                section=section,
                definition=definition,
                schema=schema,
                architecture=architecture,
                context=context.business_context,
                known_values=known_values,
                previous_components=previous_labels,
                attempt=attempt,
            ),
            validate=lambda raw: self._catalog.validate_fields(component_type, raw),
            timeout=self._settings.generation_timeout_s,
            max_attempts=self._settings.component_max_attempts,
            backoff=self._settings.retry_backoff_s,
            log_extra={"page_id": page_plan.page_id, "component_type": component_type},
        )
        if not result.ok and isinstance(result.error, ProviderError):
            raise PageAssemblyFailure(
                page_plan.page_id,
                f"Generative service unavailable for {component_type} on page {page_plan.page_id}: {result.error}",
            )

        generated = result.value if result.ok else {}
        fields = self.merge_fields(component_type, choice, generated, resolution)
        return GeneratedComponent(
            type=component_type,
            fields=fields,
            section_intent=section.intent,
            score=choice.score,
            rationale="; ".join(choice.reasons),
            degraded=resolution.degraded or not result.ok,
            placeholder=not result.ok,
        )

    def merge_fields(
        self,
        component_type: str,
        choice: ComponentScore,
        generated: Mapping[str, Any],
        resolution: ContentResolution,
    ) -> dict[str, Any]:
        """Catalog defaults < industry overrides < generated < business data, then fallbacks fill gaps."""
        definition = self._catalog.get(component_type)
        overrides = {to_snake(key): value for key, value in choice.overrides.items()}
        if choice.variant:
            overrides["variant"] = choice.variant

        fields: dict[str, Any] = self._catalog.default_fields(component_type)
        fields.update({key: value for key, value in overrides.items() if key in definition.fields})
        fields.update({key: value for key, value in generated.items() if is_present(value)})
        fields.update({name: resolution.values[name] for name in resolution.from_data})

        for requirement in definition.requirements:
            if not is_present(fields.get(requirement.field)) and requirement.field in resolution.values:
                fields[requirement.field] = resolution.values[requirement.field]

        unresolved = [name for name in definition.critical_fields if not is_present(fields.get(name))]
        if unresolved:
            raise ContentUnavailable(component_type, unresolved)
        return fields

    def _build_page(
        self,
        page_plan: PagePlan,
        architecture: SiteArchitecture,
        context: AssemblyContext,
        components: list[GeneratedComponent],
    ) -> GeneratedPage:
        business = context.business_context
        business_name = business.business_name
        if page_plan.is_homepage:
            title = f"{business_name} | {business.client.tagline}" if business.client.tagline else business_name
        else:
            title = f"{page_plan.name} | {business_name}"
        description = truncate_description(
            page_plan.purpose or business.client.description or f"{page_plan.name} - {business_name}"
        )
        keywords = [keyword for keyword in (architecture.industry, page_plan.name.lower(), business_name) if keyword]
        return GeneratedPage(
            id=page_plan.page_id,
            name=page_plan.name,
            slug=page_plan.slug,
            title=title,
            description=description,
            is_homepage=page_plan.is_homepage,
            components=components,
            seo=PageSEO(title=title, description=description, keywords=keywords),
            priority=page_plan.priority,
        )


__all__ = ["AssemblyContext", "PageAssembler", "truncate_description"]
