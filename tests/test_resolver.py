import pytest

from auto_site_designer.errors import ContentUnavailable
from auto_site_designer.models.business import BusinessDataContext
from auto_site_designer.resolver import render_fallback, require, resolve

from support import load_business


def test_data_wins_over_fallback():
    resolution = resolve("RichText", load_business("cafe"))

    assert resolution.can_render
    assert resolution.values["content"].startswith("A cozy neighborhood café")
    assert resolution.values["title"] == "About Bean & Bloom"
    assert resolution.from_data == ("content",)
    assert resolution.from_fallback == ("title",)


def test_missing_critical_data_blocks_rendering():
    resolution = resolve("Testimonials", load_business("cafe"))

    assert not resolution.can_render
    assert resolution.missing_critical == ("testimonials",)
    assert resolution.degraded

    with pytest.raises(ContentUnavailable) as excinfo:
        require("Testimonials", load_business("cafe"))
    assert excinfo.value.component_type == "Testimonials"
    assert list(excinfo.value.missing) == ["testimonials"]


def test_indexed_sources_pick_first_item():
    resolution = require("Quote", load_business("hartwell-law"))

    assert resolution.values == {
        "quote": "They took my case when nobody else would, and won.",
        "author": "J. Alvarez",
    }
    assert not resolution.degraded


def test_address_resolves_to_one_line():
    resolution = require("Map", load_business("cafe"))

    assert resolution.values["address"] == "1842 W Armitage Ave, Chicago, IL, 60622, USA"


def test_missing_important_content_is_reported():
    resolution = resolve("Quote", BusinessDataContext())

    assert not resolution.can_render
    assert resolution.missing_important == ("author",)


def test_empty_context_still_renders_fallback_component():
    resolution = require("RichText", BusinessDataContext())

    assert resolution.values["content"] == "Your Business is dedicated to serving its customers with care."
    assert resolution.from_data == ()


def test_unknown_component_cannot_render():
    assert not resolve("Marquee", BusinessDataContext()).can_render


def test_render_fallback_substitutes_nested_values():
    assert render_fallback({"title": "Why {business_name}", "items": ["{business_name} rocks", 3]}, "Acme") == {
        "title": "Why Acme",
        "items": ["Acme rocks", 3],
    }
