from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Literal, Mapping, Sequence

from pydantic import BaseModel, create_model

FieldKind = Literal["text", "url", "list", "bool", "number", "mapping"]

_PYTHON_TYPES: Mapping[str, Any] = {
    "text": str,
    "url": str,
    "list": list[Any],
    "bool": bool,
    "number": float,
    "mapping": dict[str, Any],
}

FALLBACK_COMPONENT_TYPE = "RichText"
SHARED_COMPONENT_TYPES = frozenset({"Navbar", "Footer"})


class Severity(str, Enum):
    critical = "critical"
    important = "important"
    optional = "optional"


@dataclass(frozen=True)
class FieldSpec:
    kind: FieldKind
    required: bool = False
    default: Any = None
    description: str = ""


@dataclass(frozen=True)
class ContentRequirement:
    """Content a component needs, where to find it, and what to use otherwise.

    ``fallback`` strings may contain ``{business_name}``.
    """

    field: str
    severity: Severity
    source: str | None = None
    fallback: Any = None


@dataclass(frozen=True)
class ComponentDefinition:
    type: str
    category: str
    description: str
    fields: Mapping[str, FieldSpec]
    requirements: Sequence[ContentRequirement] = ()
    character: Literal["plain", "rich", "neutral"] = "neutral"

    @property
    def critical_fields(self) -> list[str]:
        return [req.field for req in self.requirements if req.severity is Severity.critical]


def _text(required: bool = False, default: Any = None, description: str = "") -> FieldSpec:
    return FieldSpec("text", required=required, default=default, description=description)


def _list(required: bool = False, description: str = "") -> FieldSpec:
    return FieldSpec("list", required=required, description=description)


def _url(default: str | None = None) -> FieldSpec:
    return FieldSpec("url", default=default)


def _critical(name: str, source: str | None = None, fallback: Any = None) -> ContentRequirement:
    return ContentRequirement(name, Severity.critical, source=source, fallback=fallback)


def _important(name: str, source: str | None = None, fallback: Any = None) -> ContentRequirement:
    return ContentRequirement(name, Severity.important, source=source, fallback=fallback)


def _optional(name: str, source: str | None = None, fallback: Any = None) -> ContentRequirement:
    return ContentRequirement(name, Severity.optional, source=source, fallback=fallback)


DEFAULT_COMPONENTS: Sequence[ComponentDefinition] = (
    ComponentDefinition(
        type="Hero",
        category="sections",
        description="Full-width opening section with headline, supporting text and primary call to action",
        fields={
            "headline": _text(required=True),
            "subheadline": _text(),
            "cta_text": _text(),
            "cta_link": _url(default="/contact"),
            "background_image": _url(),
            "variant": _text(default="centered"),
        },
        requirements=(
            _critical("headline", fallback="Welcome to {business_name}"),
            _important("subheadline", source="client.tagline", fallback="Quality and care in everything we do"),
            _optional("cta_text", fallback="Get in Touch"),
            _optional("background_image"),
        ),
    ),
    ComponentDefinition(
        type="Features",
        category="sections",
        description="Grid of benefits or services with icons and short descriptions",
        fields={"title": _text(required=True), "subtitle": _text(), "items": _list(required=True), "columns": FieldSpec("number", default=3)},
        requirements=(
            _critical("title", fallback="What We Offer"),
            _critical(
                "items",
                source="services",
                fallback=[
                    {"title": "Experienced Team", "description": "Years of hands-on experience."},
                    {"title": "Personal Service", "description": "Every client gets our full attention."},
                    {"title": "Fair Pricing", "description": "Clear prices with no surprises."},
                ],
            ),
            _optional("subtitle", source="client.tagline"),
        ),
        character="plain",
    ),
    ComponentDefinition(
        type="Card",
        category="layout",
        description="Simple content card with a title, description and optional list",
        fields={"title": _text(required=True), "description": _text(), "items": _list(), "image": _url()},
        requirements=(
            _critical("title", fallback="About {business_name}"),
            _important("description", source="client.description", fallback="{business_name} looks forward to serving you."),
            _optional("items", source="hours"),
        ),
        character="plain",
    ),
    ComponentDefinition(
        type="CTA",
        category="sections",
        description="Conversion banner with headline and a single button",
        fields={"headline": _text(required=True), "description": _text(), "cta_text": _text(required=True), "cta_link": _url(default="/contact")},
        requirements=(
            _critical("headline", fallback="Ready to get started?"),
            _critical("cta_text", fallback="Contact Us"),
            _optional("description", source="client.tagline"),
            _optional("cta_link", fallback="/contact"),
        ),
        character="plain",
    ),
    ComponentDefinition(
        type="Testimonials",
        category="social-proof",
        description="Customer quotes with names and optional ratings",
        fields={"title": _text(required=True), "testimonials": _list(required=True), "variant": _text(default="grid")},
        requirements=(
            _critical("title", fallback="What Our Customers Say"),
            _critical("testimonials", source="testimonials"),
        ),
    ),
    ComponentDefinition(
        type="SocialProof",
        category="social-proof",
        description="Compact trust strip with a headline, highlights and optional quotes",
        fields={"headline": _text(required=True), "highlights": _list(), "testimonials": _list()},
        requirements=(
            _critical("headline", fallback="Trusted by our community"),
            _important("highlights", fallback=["Locally owned", "Friendly service", "Loved by regulars"]),
            _optional("testimonials", source="testimonials"),
        ),
    ),
    ComponentDefinition(
        type="Quote",
        category="social-proof",
        description="Single highlighted customer quote",
        fields={"quote": _text(required=True), "author": _text()},
        requirements=(
            _critical("quote", source="testimonials.0.content"),
            _important("author", source="testimonials.0.author"),
        ),
        character="plain",
    ),
    ComponentDefinition(
        type="FAQ",
        category="content",
        description="Frequently asked questions with answers",
        fields={"title": _text(required=True), "items": _list(required=True)},
        requirements=(_critical("title", fallback="Frequently Asked Questions"), _critical("items", source="faq")),
        character="plain",
    ),
    ComponentDefinition(
        type="Accordion",
        category="interactive",
        description="Expandable panels for grouped content",
        fields={"title": _text(required=True), "items": _list()},
        requirements=(_critical("title", fallback="Learn More"), _important("items", source="faq")),
        character="plain",
    ),
    ComponentDefinition(
        type="Tabs",
        category="interactive",
        description="Tabbed panels, good for menus and service categories",
        fields={"title": _text(required=True), "tabs": _list(required=True)},
        requirements=(_critical("title", fallback="Our Offerings"), _critical("tabs", source="services")),
    ),
    ComponentDefinition(
        type="Stats",
        category="sections",
        description="Key numbers with labels",
        fields={"title": _text(), "stats": _list(required=True)},
        requirements=(
            _critical(
                "stats",
                fallback=[
                    {"value": "100%", "label": "Commitment"},
                    {"value": "7", "label": "Days a week"},
                    {"value": "1", "label": "Neighborhood we love"},
                ],
            ),
            _optional("title", fallback="By the Numbers"),
        ),
        character="plain",
    ),
    ComponentDefinition(
        type="Team",
        category="sections",
        description="Team member cards with photos, roles and bios",
        fields={"title": _text(required=True), "members": _list(required=True), "variant": _text(default="grid")},
        requirements=(_critical("title", fallback="Meet the Team"), _critical("members", source="team")),
    ),
    ComponentDefinition(
        type="Gallery",
        category="media",
        description="Image gallery with lightbox",
        fields={"title": _text(required=True), "images": _list(required=True), "variant": _text(default="grid")},
        requirements=(_critical("title", fallback="Gallery"), _critical("images", source="portfolio")),
        character="rich",
    ),
    ComponentDefinition(
        type="Carousel",
        category="media",
        description="Auto-advancing slides of images or cards",
        fields={"title": _text(), "items": _list(required=True), "autoplay": FieldSpec("bool", default=True)},
        requirements=(_critical("items", source="portfolio"), _optional("title")),
        character="rich",
    ),
    ComponentDefinition(
        type="Pricing",
        category="sections",
        description="Pricing plans or price list",
        fields={"title": _text(required=True), "plans": _list(required=True)},
        requirements=(_critical("title", fallback="Pricing"), _critical("plans", source="services")),
    ),
    ComponentDefinition(
        type="ComparisonTable",
        category="sections",
        description="Side-by-side comparison of plans or options",
        fields={"title": _text(required=True), "rows": _list(required=True)},
        requirements=(_critical("title", fallback="Compare Options"), _critical("rows", source="services")),
        character="plain",
    ),
    ComponentDefinition(
        type="ContactForm",
        category="forms",
        description="Contact form with name, email and message fields",
        fields={
            "title": _text(required=True),
            "form_fields": _list(required=True),
            "submit_text": _text(default="Send Message"),
            "email": _text(),
            "phone": _text(),
        },
        requirements=(
            _critical("title", fallback="Get in Touch"),
            _critical("form_fields", fallback=["name", "email", "message"]),
            _important("email", source="contact.email"),
            _optional("phone", source="contact.phone"),
        ),
        character="plain",
    ),
    ComponentDefinition(
        type="Newsletter",
        category="forms",
        description="Email signup block",
        fields={"title": _text(required=True), "description": _text(), "cta_text": _text(required=True)},
        requirements=(
            _critical("title", fallback="Stay in the loop"),
            _critical("cta_text", fallback="Subscribe"),
            _optional("description", fallback="News and offers from {business_name}, no spam."),
        ),
        character="plain",
    ),
    ComponentDefinition(
        type="LogoCloud",
        category="social-proof",
        description="Row of client or partner logos",
        fields={"title": _text(), "logos": _list(required=True)},
        requirements=(_critical("logos", source="portfolio"), _optional("title", fallback="Trusted by")),
    ),
    ComponentDefinition(
        type="TrustBadges",
        category="social-proof",
        description="Badges for certifications, guarantees and policies",
        fields={"title": _text(), "badges": _list(required=True)},
        requirements=(
            _critical("badges", fallback=["Satisfaction Guaranteed", "Locally Owned", "Friendly Support"]),
            _optional("title", fallback="Why Choose {business_name}"),
        ),
        character="plain",
    ),
    ComponentDefinition(
        type="Map",
        category="location",
        description="Embedded map with address and directions",
        fields={"title": _text(), "address": _text(required=True), "show_directions": FieldSpec("bool", default=True)},
        requirements=(_critical("address", source="contact.address"), _optional("title", fallback="Find Us")),
    ),
    ComponentDefinition(
        type="Video",
        category="media",
        description="Embedded video with caption",
        fields={"title": _text(), "video_url": _url()},
        requirements=(_critical("video_url"), _optional("title")),
        character="rich",
    ),
    ComponentDefinition(
        type="Parallax",
        category="media",
        description="Scrolling image band with overlaid headline",
        fields={"headline": _text(required=True), "background_image": _url()},
        requirements=(
            _critical("headline", fallback="{business_name}"),
            _important("background_image"),
        ),
        character="rich",
    ),
    ComponentDefinition(
        type="Typewriter",
        category="typography",
        description="Animated rotating words after a fixed prefix",
        fields={"prefix": _text(), "words": _list(required=True)},
        requirements=(_critical("words", fallback=["Quality", "Care", "Craft"]), _optional("prefix", fallback="We deliver")),
        character="rich",
    ),
    ComponentDefinition(
        type=FALLBACK_COMPONENT_TYPE,
        category="typography",
        description="Heading and formatted body text, usable for any section",
        fields={"title": _text(required=True), "content": _text(required=True)},
        requirements=(
            _critical("title", fallback="About {business_name}"),
            _critical(
                "content",
                source="client.description",
                fallback="{business_name} is dedicated to serving its customers with care.",
            ),
        ),
        character="plain",
    ),
    ComponentDefinition(
        type="Navbar",
        category="navigation",
        description="Site-wide navigation bar",
        fields={
            "logo_text": _text(required=True),
            "logo_url": _url(),
            "links": _list(required=True),
            "cta_text": _text(),
            "cta_link": _url(default="/contact"),
            "style": _text(default="sticky"),
        },
        requirements=(
            _critical("logo_text", source="business_name", fallback="{business_name}"),
            _critical("links", fallback=[{"label": "Home", "href": "/"}]),
            _optional("logo_url", source="branding.logo_url"),
            _optional("cta_text", fallback="Contact Us"),
        ),
    ),
    ComponentDefinition(
        type="Footer",
        category="navigation",
        description="Site-wide footer with contact details, links and social profiles",
        fields={
            "company_name": _text(required=True),
            "description": _text(),
            "email": _text(),
            "phone": _text(),
            "address": _text(),
            "links": _list(),
            "social_links": _list(),
            "hours": _list(),
            "copyright": _text(required=True),
            "newsletter": FieldSpec("bool", default=False),
        },
        requirements=(
            _critical("company_name", source="business_name", fallback="{business_name}"),
            _critical("copyright", fallback="© {business_name}. All rights reserved."),
            _important("description", source="client.description", fallback="Thank you for visiting {business_name}."),
            _optional("email", source="contact.email"),
            _optional("phone", source="contact.phone"),
            _optional("address", source="contact.address"),
            _optional("social_links", source="social"),
            _optional("hours", source="hours"),
        ),
    ),
)


class ComponentCatalog:
    """Immutable lookup of component definitions keyed by type name."""

    def __init__(
        self,
        definitions: Iterable[ComponentDefinition] = DEFAULT_COMPONENTS,
        *,
        fallback_type: str = FALLBACK_COMPONENT_TYPE,
    ) -> None:
        self._definitions = MappingProxyType({definition.type: definition for definition in definitions})
        self._fallback_type = fallback_type
        self._schemas: dict[str, type[BaseModel]] = {}

    def __contains__(self, component_type: object) -> bool:
        return component_type in self._definitions

    def get(self, component_type: str) -> ComponentDefinition | None:
        return self._definitions.get(component_type)

    def types(self) -> list[str]:
        return list(self._definitions)

    @property
    def fallback_type(self) -> str | None:
        """The generic fallback type, or None when it is not registered."""
        return self._fallback_type if self._fallback_type in self._definitions else None

    def schema_model(self, component_type: str) -> type[BaseModel]:
        model = self._schemas.get(component_type)
        if model is None:
            definition = self._definitions[component_type]
            field_definitions: dict[str, Any] = {}
            for name, spec in definition.fields.items():
                python_type = _PYTHON_TYPES[spec.kind]
                if spec.required:
                    field_definitions[name] = (python_type, ...)
                else:
                    field_definitions[name] = (python_type | None, None)
            model = create_model(f"{component_type}Fields", **field_definitions)
            self._schemas[component_type] = model
        return model

    def validate_fields(self, component_type: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Validate generated fields; raises ``pydantic.ValidationError``.

        Keys outside the component's field schema are dropped.
        """
        model = self.schema_model(component_type)
        return model.model_validate(dict(payload)).model_dump(exclude_none=True)

    def default_fields(self, component_type: str) -> dict[str, Any]:
        definition = self._definitions[component_type]
        return {name: spec.default for name, spec in definition.fields.items() if spec.default is not None}

    def summary(self, exclude: Iterable[str] = ()) -> str:
        excluded = set(exclude) | SHARED_COMPONENT_TYPES
        return "\n".join(
            f"- {definition.type} ({definition.category}): {definition.description} [{len(definition.fields)} fields]"
            for definition in self._definitions.values()
            if definition.type not in excluded
        )


DEFAULT_CATALOG = ComponentCatalog()


__all__ = [
    "ComponentCatalog",
    "ComponentDefinition",
    "ContentRequirement",
    "DEFAULT_CATALOG",
    "DEFAULT_COMPONENTS",
    "FALLBACK_COMPONENT_TYPE",
    "FieldSpec",
    "SHARED_COMPONENT_TYPES",
    "Severity",
]
