from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol, Sequence

from .catalog import DEFAULT_CATALOG, ComponentCatalog
from .config import EngineSettings
from .errors import ContentUnavailable
from .generative import GenerativeService, RequestKind, generate_with_retry
from .models.architecture import FooterResponse, NavbarResponse, SiteArchitecture
from .models.bundle import GeneratedComponent
from .models.business import BusinessDataContext, is_present
from .prompts import footer_prompt, nav_prompt
from .resolver import resolve

logger = logging.getLogger(__name__)

NAVBAR_TYPE = "Navbar"
FOOTER_TYPE = "Footer"
NAVBAR_ID = "shared-navbar"
FOOTER_ID = "shared-footer"


class PageLike(Protocol):
    name: str
    slug: str
    priority: int


def page_links(pages: Sequence[PageLike]) -> list[dict[str, str]]:
    ordered = sorted(pages, key=lambda page: page.priority)
    return [{"label": page.name, "href": page.slug} for page in ordered]


class SharedElementGenerator:
    """Builds the one navbar and the one footer shared by every page."""

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

    async def generate_nav(
        self,
        pages: Sequence[PageLike],
        *,
        architecture: SiteArchitecture,
        business_context: BusinessDataContext,
    ) -> GeneratedComponent:
        links = [(page.name, page.slug) for page in sorted(pages, key=lambda page: page.priority)]
        result = await generate_with_retry(
            self._service,
            RequestKind.nav,
            lambda attempt: nav_prompt(links, architecture, business_context, attempt=attempt),
            validate=NavbarResponse.model_validate,
            timeout=self._settings.generation_timeout_s,
            max_attempts=self._settings.shared_max_attempts,
            backoff=self._settings.retry_backoff_s,
            log_extra={"component_type": NAVBAR_TYPE},
        )
        if not result.ok:
            logger.warning("Using placeholder navbar", extra={"error": str(result.error)})
            return self.placeholder_nav(pages, architecture=architecture, business_context=business_context)
        return self._build_nav(pages, architecture, business_context, result.value.model_dump(exclude_none=True))

    async def generate_footer(
        self,
        business_context: BusinessDataContext,
        *,
        architecture: SiteArchitecture,
        pages: Sequence[PageLike] = (),
    ) -> GeneratedComponent:
        result = await generate_with_retry(
            self._service,
            RequestKind.footer,
            lambda attempt: footer_prompt(architecture, business_context, attempt=attempt),
            validate=FooterResponse.model_validate,
            timeout=self._settings.generation_timeout_s,
            max_attempts=self._settings.shared_max_attempts,
            backoff=self._settings.retry_backoff_s,
            log_extra={"component_type": FOOTER_TYPE},
        )
        if not result.ok:
            logger.warning("Using placeholder footer", extra={"error": str(result.error)})
            return self.placeholder_footer(business_context, architecture=architecture, pages=pages)
        return self._build_footer(pages, architecture, business_context, result.value.model_dump(exclude_none=True))

    def placeholder_nav(
        self,
        pages: Sequence[PageLike],
        *,
        architecture: SiteArchitecture,
        business_context: BusinessDataContext,
    ) -> GeneratedComponent:
        return self._build_nav(pages, architecture, business_context, {}, placeholder=True)

    def placeholder_footer(
        self,
        business_context: BusinessDataContext,
        *,
        architecture: SiteArchitecture,
        pages: Sequence[PageLike] = (),
    ) -> GeneratedComponent:
        return self._build_footer(pages, architecture, business_context, {}, placeholder=True)

    def _build_nav(
        self,
        pages: Sequence[PageLike],
        architecture: SiteArchitecture,
        business_context: BusinessDataContext,
        generated: Mapping[str, Any],
        *,
        placeholder: bool = False,
    ) -> GeneratedComponent:
        hints = architecture.shared_elements.navbar
        hinted: dict[str, Any] = {"style": hints.style}
        if hints.cta_text:
            hinted["cta_text"] = hints.cta_text
        fields, degraded = self._merge(NAVBAR_TYPE, business_context, hinted, generated)
        fields["links"] = page_links(pages) or fields.get("links", [])
        if not hints.show_cta:
            fields.pop("cta_text", None)
            fields.pop("cta_link", None)
        return GeneratedComponent(
            id=NAVBAR_ID,
            type=NAVBAR_TYPE,
            fields=fields,
            rationale="Shared navigation generated once per site",
            degraded=degraded or placeholder,
            placeholder=placeholder,
        )

    def _build_footer(
        self,
        pages: Sequence[PageLike],
        architecture: SiteArchitecture,
        business_context: BusinessDataContext,
        generated: Mapping[str, Any],
        *,
        placeholder: bool = False,
    ) -> GeneratedComponent:
        hints = architecture.shared_elements.footer
        hinted: dict[str, Any] = {"newsletter": hints.newsletter}
        fields, degraded = self._merge(FOOTER_TYPE, business_context, hinted, generated)
        fields["links"] = page_links(pages)
        if not hints.social_links:
            fields.pop("social_links", None)
        return GeneratedComponent(
            id=FOOTER_ID,
            type=FOOTER_TYPE,
            fields=fields,
            rationale="Shared footer generated once per site",
            degraded=degraded or placeholder,
            placeholder=placeholder,
        )

    def _merge(
        self,
        component_type: str,
        business_context: BusinessDataContext,
        hinted: Mapping[str, Any],
        generated: Mapping[str, Any],
    ) -> tuple[dict[str, Any], bool]:
        """Catalog defaults < hints < generated copy < business data, then fallbacks fill gaps.

        Raises ``ContentUnavailable`` if a critical field is still empty.
        """
        definition = self._catalog.get(component_type)
        allowed = set(definition.fields) if definition else set(hinted) | set(generated)
        resolution = resolve(component_type, business_context, self._catalog)

        fields: dict[str, Any] = self._catalog.default_fields(component_type) if definition else {}
        fields.update(hinted)
        fields.update({key: value for key, value in generated.items() if key in allowed and is_present(value)})
        fields.update({name: resolution.values[name] for name in resolution.from_data})
        for name, value in resolution.values.items():
            if not is_present(fields.get(name)):
                fields[name] = value

        critical = definition.critical_fields if definition else []
        unresolved = [name for name in critical if not is_present(fields.get(name))]
        if unresolved:
            raise ContentUnavailable(component_type, unresolved)
        return fields, resolution.degraded


__all__ = [
    "FOOTER_ID",
    "NAVBAR_ID",
    "SharedElementGenerator",
    "page_links",
]
