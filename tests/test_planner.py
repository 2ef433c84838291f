import asyncio

from auto_site_designer.industries import DEFAULT_KNOWLEDGE_BASE
from auto_site_designer.models.architecture import ArchitectureResponse
from auto_site_designer.models.request import DesignPreferences, GenerationConstraints, GenerationRequest
from auto_site_designer.planner import ArchitecturePlanner, normalize_slug, page_id_for

from support import ScriptedGenerativeService, cafe_architecture, load_business, section

RESTAURANT = DEFAULT_KNOWLEDGE_BASE.get_profile("restaurant")
CAFE = load_business("cafe")


def build(response=None, **constraints):
    planner = ArchitecturePlanner(ScriptedGenerativeService())
    request = GenerationRequest(prompt="a cozy neighborhood café", constraints=GenerationConstraints(**constraints))
    return planner.build_architecture(
        ArchitectureResponse.model_validate(response or cafe_architecture()), request, CAFE, RESTAURANT
    )


def slugs(architecture):
    return [page.slug for page in architecture.pages]


def sections_of(architecture, slug):
    page = next(page for page in architecture.pages if page.slug == slug)
    return [(item.intent, list(item.candidates)) for item in page.sections]


def test_slug_helpers():
    assert normalize_slug("About Us/") == "/about-us"
    assert normalize_slug("/home") == "/"
    assert normalize_slug("index") == "/"
    assert page_id_for("/") == "home"
    assert page_id_for("/services/legal") == "services-legal"


def test_pages_sorted_and_identified():
    architecture = build()

    assert slugs(architecture) == ["/", "/menu", "/about", "/contact"]
    assert [page.page_id for page in architecture.pages] == ["home", "menu", "about", "contact"]
    assert architecture.industry == "restaurant"
    assert architecture.tone == "warm"


def test_max_pages_keeps_highest_priority_pages():
    assert slugs(build(max_pages=2)) == ["/", "/menu"]


def test_required_page_is_inserted_from_industry_template():
    architecture = build(max_pages=4, required_pages=["/gallery"])

    assert slugs(architecture) == ["/", "/menu", "/about", "/gallery"]
    assert [intent for intent, _ in sections_of(architecture, "/gallery")] == ["hero", "gallery", "cta"]


def test_required_page_without_template_gets_generic_stub():
    architecture = build(required_pages=["careers"])

    careers = architecture.pages[-1]
    assert careers.slug == "/careers"
    assert careers.name == "Careers"
    assert careers.priority == 5
    assert [item.intent for item in careers.sections] == ["hero", "content"]


def test_required_page_matching_existing_page_is_not_duplicated():
    assert slugs(build(required_pages=["/menu", "Contact"])) == ["/", "/menu", "/about", "/contact"]


def test_excluded_components_are_removed_from_candidates():
    architecture = build(exclude_components=["Map", "Team"])

    assert sections_of(architecture, "/contact") == [("contact", ["ContactForm"]), ("location", ["Card"])]
    assert sections_of(architecture, "/about") == [("about", ["RichText", "Card"]), ("team", ["Card"])]


def test_page_emptied_by_exclusions_gets_content_section():
    architecture = build(exclude_components=["ContactForm", "Map", "Card"])

    assert sections_of(architecture, "/contact") == [("content", ["RichText"])]


def test_forced_component_added_to_homepage_once():
    architecture = build(force_components=["Newsletter", "Hero"])

    home = sections_of(architecture, "/")
    assert home[-1] == ("newsletter", ["Newsletter"])
    assert sum(1 for _, candidates in home if candidates[0] == "Hero") == 1


def test_homepage_is_ensured_and_duplicate_slugs_renamed():
    response = {
        "pages": [
            {"name": "Welcome", "slug": "/welcome", "priority": 1, "sections": [section("hero", "Hero")]},
            {"name": "About", "slug": "/about", "priority": 2, "sections": [section("about", "RichText")]},
            {"name": "Our Story", "slug": "/about", "priority": 3, "sections": [section("about", "RichText")]},
        ]
    }
    architecture = build(response)

    assert slugs(architecture) == ["/", "/about", "/about-2"]
    assert architecture.pages[0].is_homepage


def test_second_homepage_is_renamed_off_the_root():
    response = cafe_architecture()
    response["pages"][2].update(name="Home", slug="/home")

    architecture = build(response)

    assert [(page.page_id, page.slug) for page in architecture.pages] == [
        ("home", "/"),
        ("menu", "/menu"),
        ("home-2", "/home-2"),
        ("contact", "/contact"),
    ]
    assert sum(page.is_homepage for page in architecture.pages) == 1


def test_unknown_component_types_use_intent_defaults():
    response = cafe_architecture()
    response["pages"][1]["sections"] = [section("gallery", "Marquee", "Navbar")]
    architecture = build(response)

    assert sections_of(architecture, "/menu") == [("gallery", ["Gallery", "Carousel"])]


def test_design_token_precedence():
    tokens = build().design_tokens

    assert tokens.primary_color == "#6b4226"
    assert tokens.font_heading == "Fraunces"
    assert tokens.secondary_color == "#78350f"
    assert tokens.background_color == "#fffbeb"
    assert tokens.color_mood == "warm"


def test_requested_tone_overrides_planner_tone():
    planner = ArchitecturePlanner(ScriptedGenerativeService())
    request = GenerationRequest(prompt="café", preferences=DesignPreferences(tone="playful"))
    architecture = planner.build_architecture(
        ArchitectureResponse.model_validate(cafe_architecture()), request, CAFE, RESTAURANT
    )

    assert architecture.tone == "playful"


def test_plan_calls_service_once_on_valid_response():
    service = ScriptedGenerativeService()
    planner = ArchitecturePlanner(service)

    architecture = asyncio.run(planner.plan(GenerationRequest(prompt="café"), CAFE, RESTAURANT))

    assert len(architecture.pages) == 4
    assert len(service.calls) == 1
    prompt = service.calls[0][1]
    assert not prompt.strict
    assert "Newsletter" in prompt.payload["component_catalog"]
