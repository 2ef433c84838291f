from __future__ import annotations

import asyncio
import copy
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from auto_site_designer.errors import GenerationError, ProviderError
from auto_site_designer.generative import RequestKind, StructuredPrompt
from auto_site_designer.models.business import BusinessDataContext

DATA_DIR = Path(__file__).parent.parent / "data"


def load_business(name: str) -> BusinessDataContext:
    fixture_path = DATA_DIR / "business" / f"{name}.json"
    return BusinessDataContext.model_validate_json(fixture_path.read_text(encoding="utf-8"))


def section(intent: str, component: str, *alternatives: str) -> dict[str, Any]:
    return {"intent": intent, "suggested_component": component, "alternatives": list(alternatives)}


CAFE_ARCHITECTURE: dict[str, Any] = {
    "tone": "warm",
    "pages": [
        {
            "name": "Home",
            "slug": "/",
            "purpose": "Welcome visitors and get them through the door",
            "priority": 1,
            "sections": [
                section("hero", "Hero"),
                section("features", "Features", "Card"),
                section("testimonials", "Testimonials", "SocialProof", "Quote"),
                section("cta", "CTA"),
            ],
        },
        {
            "name": "Menu",
            "slug": "/menu",
            "purpose": "Show drinks and brunch dishes",
            "priority": 2,
            "sections": [
                section("hero", "Hero"),
                section("menu", "Tabs", "Accordion"),
                section("gallery", "Gallery", "Carousel"),
            ],
        },
        {
            "name": "About",
            "slug": "/about",
            "purpose": "Tell the story of the café and its people",
            "priority": 3,
            "sections": [section("about", "RichText", "Card"), section("team", "Team", "Card")],
        },
        {
            "name": "Contact",
            "slug": "/contact",
            "purpose": "Directions, hours and a contact form",
            "priority": 4,
            "sections": [section("contact", "ContactForm"), section("location", "Map", "Card")],
        },
    ],
    "shared_elements": {"navbar": {"style": "sticky", "show_cta": True}, "footer": {"newsletter": False}},
    "design_tokens": {"primary_color": "#222222", "color_mood": "warm"},
}


def cafe_architecture(**changes: Any) -> dict[str, Any]:
    data = copy.deepcopy(CAFE_ARCHITECTURE)
    data.update(changes)
    return data


class ScriptedGenerativeService:
    """In-memory ``GenerativeService`` with scripted failures.

    ``architecture`` may be a single response or a list consumed one per call
    (the last entry repeats). Entries that are exceptions are raised.
    """

    def __init__(
        self,
        architecture: Any = None,
        *,
        failing_pages: Iterable[str] = (),
        page_error: Callable[[], GenerationError] = lambda: ProviderError("upstream 503"),
        invalid_pages: Iterable[str] = (),
        blocking_pages: Iterable[str] = (),
        on_block: Callable[[], None] | None = None,
        delays: Mapping[RequestKind, float] | None = None,
        shared_error: Callable[[], GenerationError] | None = None,
    ) -> None:
        self._architecture = architecture if isinstance(architecture, list) else [architecture or CAFE_ARCHITECTURE]
        self._failing_pages = set(failing_pages)
        self._page_error = page_error
        self._invalid_pages = set(invalid_pages)
        self._blocking_pages = set(blocking_pages)
        self._on_block = on_block
        self._delays = dict(delays or {})
        self._shared_error = shared_error
        self.calls: list[tuple[RequestKind, StructuredPrompt]] = []

    def kinds(self) -> list[RequestKind]:
        return [kind for kind, _ in self.calls]

    async def generate(self, kind: RequestKind, prompt: StructuredPrompt) -> Mapping[str, Any]:
        self.calls.append((kind, prompt))
        delay = self._delays.get(kind)
        if delay:
            await asyncio.sleep(delay)

        if kind is RequestKind.architecture:
            index = min(sum(1 for called, _ in self.calls if called is RequestKind.architecture), len(self._architecture))
            response = self._architecture[index - 1]
            if isinstance(response, Exception):
                raise response
            return copy.deepcopy(response)

        if kind is RequestKind.page_components:
            page_id = prompt.payload["page"]["id"]
            if page_id in self._blocking_pages:
                if self._on_block:
                    self._on_block()
                await asyncio.Event().wait()
            if page_id in self._failing_pages:
                raise self._page_error()
            if page_id in self._invalid_pages:
                return {"unexpected": "shape"}
            return self._component_fields(prompt)

        if self._shared_error is not None:
            raise self._shared_error()
        if kind is RequestKind.nav:
            return {"cta_text": "Visit Us", "logo_text": "ignored in favour of business data"}
        return {"description": "Coffee, pastries and brunch in Logan Square.", "copyright": "© Bean & Bloom"}

    def _component_fields(self, prompt: StructuredPrompt) -> dict[str, Any]:
        component = prompt.payload["component"]
        known = prompt.payload["known_values"]
        required = set((prompt.response_schema or {}).get("required", []))
        fields: dict[str, Any] = {}
        for name, kind in component["fields"].items():
            if name in known:
                fields[name] = known[name]
            elif kind == "text":
                fields[name] = f"{component['type']} {name.replace('_', ' ')}"
            elif kind == "url" and name in required:
                fields[name] = "/contact"
            elif kind == "list" and name in required:
                fields[name] = [f"{name} item"]
        return fields
