import asyncio

import pytest

from auto_site_designer.assembler import AssemblyContext, PageAssembler, truncate_description
from auto_site_designer.catalog import DEFAULT_COMPONENTS, ComponentCatalog
from auto_site_designer.errors import ContentUnavailable, PageAssemblyFailure
from auto_site_designer.industries import DEFAULT_KNOWLEDGE_BASE
from auto_site_designer.models.architecture import ArchitectureResponse, SectionPlan
from auto_site_designer.models.business import BusinessDataContext
from auto_site_designer.models.request import GenerationRequest
from auto_site_designer.planner import ArchitecturePlanner
from auto_site_designer.resolver import require, resolve
from auto_site_designer.scorer import ScoringContext, score

from support import ScriptedGenerativeService, cafe_architecture, load_business

RESTAURANT = DEFAULT_KNOWLEDGE_BASE.get_profile("restaurant")
CAFE = load_business("cafe")
CONTEXT = AssemblyContext(business_context=CAFE, profile=RESTAURANT)


def cafe_site():
    planner = ArchitecturePlanner(ScriptedGenerativeService())
    return planner.build_architecture(
        ArchitectureResponse.model_validate(cafe_architecture()),
        GenerationRequest(prompt="a cozy neighborhood café"),
        CAFE,
        RESTAURANT,
    )


def test_selects_highest_ranked_renderable_candidate():
    assembler = PageAssembler(ScriptedGenerativeService())
    section = SectionPlan(intent="testimonials", candidates=["Testimonials", "SocialProof", "Quote"])

    choice, resolution = assembler.select_component(section, CONTEXT)

    assert choice.component_type == "SocialProof"
    assert resolution.can_render


def test_falls_back_when_no_candidate_renders():
    assembler = PageAssembler(ScriptedGenerativeService())
    section = SectionPlan(intent="gallery", candidates=["Gallery", "Carousel"])

    choice, resolution = assembler.select_component(section, CONTEXT)

    assert choice.component_type == "RichText"
    assert resolution.values["content"].startswith("A cozy neighborhood café")


def test_merge_precedence():
    assembler = PageAssembler(ScriptedGenerativeService())
    choice = score("Hero", ScoringContext(intent="hero", profile=RESTAURANT))
    resolution = require("Hero", CAFE)

    fields = assembler.merge_fields(
        "Hero",
        choice,
        {"headline": "Coffee worth the walk", "cta_text": "See today's specials", "subheadline": "invented"},
        resolution,
    )

    assert fields["variant"] == "image-background"
    assert fields["headline"] == "Coffee worth the walk"
    assert fields["cta_text"] == "See today's specials"
    assert fields["subheadline"] == "Your neighborhood living room"
    assert fields["cta_link"] == "/contact"
    assert "show_cta" not in fields


def test_merge_without_generated_copy_uses_overrides_then_fallbacks():
    assembler = PageAssembler(ScriptedGenerativeService())
    choice = score("Hero", ScoringContext(intent="hero", profile=RESTAURANT))

    fields = assembler.merge_fields("Hero", choice, {}, require("Hero", CAFE))

    assert fields["cta_text"] == "View Menu"
    assert fields["headline"] == "Welcome to Bean & Bloom"


def test_merge_rejects_unresolved_critical_fields():
    assembler = PageAssembler(ScriptedGenerativeService())
    choice = score("Quote", ScoringContext(intent="testimonials"))

    with pytest.raises(ContentUnavailable):
        assembler.merge_fields("Quote", choice, {}, resolve("Quote", BusinessDataContext()))


def test_assembles_homepage():
    architecture = cafe_site()
    home = architecture.pages[0]

    page = asyncio.run(PageAssembler(ScriptedGenerativeService()).assemble(home, architecture, CONTEXT))

    assert page.id == "home"
    assert page.is_homepage
    assert page.title == "Bean & Bloom | Your neighborhood living room"
    assert [component.type for component in page.components] == ["Hero", "Features", "SocialProof", "CTA"]
    assert all(component.rationale.startswith("base 50") for component in page.components)
    features = page.components[1]
    assert [item["name"] for item in features.fields["items"]] == ["Espresso Bar", "Pour-over Flight", "Weekend Brunch"]


def test_catalog_without_fallback_fails_page():
    catalog = ComponentCatalog([definition for definition in DEFAULT_COMPONENTS if definition.type != "RichText"])
    architecture = cafe_site()

    with pytest.raises(PageAssemblyFailure) as excinfo:
        asyncio.run(PageAssembler(ScriptedGenerativeService(), catalog=catalog).assemble(
            architecture.pages[0], architecture, CONTEXT
        ))
    assert excinfo.value.page_id == "home"


def test_truncate_description():
    assert truncate_description("  short   text ") == "short text"
    long_text = "word " * 60
    truncated = truncate_description(long_text)
    assert len(truncated) <= 160
    assert truncated.endswith("...")
