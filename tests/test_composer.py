from auto_site_designer.composer import build_design_system, build_navigation, compose
from auto_site_designer.models.architecture import DesignTokens, SiteArchitecture
from auto_site_designer.models.bundle import GeneratedComponent, GeneratedPage, PageSEO

from support import load_business

NAV = GeneratedComponent(id="shared-navbar", type="Navbar", fields={"logo_text": "Bean & Bloom"})
FOOTER = GeneratedComponent(id="shared-footer", type="Footer", fields={"company_name": "Bean & Bloom"})


def make_page(page_id, slug, priority, *types):
    return GeneratedPage(
        id=page_id,
        name=page_id.title(),
        slug=slug,
        title=page_id.title(),
        description=f"{page_id} page",
        is_homepage=slug == "/",
        components=[GeneratedComponent(type=component_type, placeholder=component_type == "Map") for component_type in types],
        seo=PageSEO(title=page_id.title(), description=f"{page_id} page"),
        priority=priority,
    )


def architecture():
    return SiteArchitecture(industry="restaurant", pages=[], design_tokens=DesignTokens(primary_color="#6b4226"))


def test_design_system_fills_missing_tokens():
    design = build_design_system(DesignTokens(primary_color="#6b4226", spacing_scale="spacious", border_radius="lg"))

    assert design.colors["primary"] == "#6b4226"
    assert design.colors["background"] == "#ffffff"
    assert design.spacing["section"] == "120px"
    assert design.borders["radius"] == "16px"
    assert design.typography == {"heading": "Inter", "body": "Inter"}


def test_navigation_excludes_homepage_from_main_menu():
    pages = [make_page("home", "/", 1), make_page("menu", "/menu", 2)]

    navigation = build_navigation(pages)

    assert [(item.href, item.order) for item in navigation.main] == [("/menu", 1)]
    assert [item.href for item in navigation.footer] == ["/", "/menu"]


def test_compose_orders_pages_and_splices_shared_elements():
    pages = [
        make_page("contact", "/contact", 3, "ContactForm", "Map"),
        make_page("home", "/", 1, "Hero", "Navbar", "CTA"),
        make_page("menu", "/menu", 2, "Tabs"),
    ]

    bundle = compose(
        architecture(),
        pages,
        NAV,
        FOOTER,
        business_context=load_business("cafe"),
        failed_pages=["about"],
        build_time_ms=1200,
    )

    assert [page.id for page in bundle.pages] == ["home", "menu", "contact"]
    assert [page.order for page in bundle.pages] == [0, 1, 2]
    home = bundle.pages[0]
    assert [component.id for component in home.components] == [
        "shared-navbar",
        "home-0-hero",
        "home-1-cta",
        "shared-footer",
    ]
    assert all(page.components[0] is NAV and page.components[-1] is FOOTER for page in bundle.pages)
    assert bundle.failed_pages == ["about"]
    assert not bundle.complete
    assert bundle.estimated_build_time_ms == 1200


def test_content_summary_counts_shared_elements_once():
    pages = [make_page("home", "/", 1, "Hero", "CTA"), make_page("contact", "/contact", 2, "Map")]

    summary = compose(architecture(), pages, NAV, FOOTER, business_context=load_business("cafe")).content_summary

    assert summary.total_pages == 2
    assert summary.total_components == 5
    assert summary.components_by_type["Navbar"] == 1
    assert summary.components_per_page["contact"] == {"Navbar": 1, "Map": 1, "Footer": 1}
    assert summary.placeholder_components == 1
    assert "services" in summary.data_sources_used
    assert "portfolio" not in summary.data_sources_used


def test_site_metadata_and_document_aliases():
    bundle = compose(architecture(), [make_page("home", "/", 1, "Hero")], NAV, FOOTER, business_context=load_business("cafe"))

    assert bundle.site.name == "Bean & Bloom"
    assert bundle.site.seo.title == "Bean & Bloom | Your neighborhood living room"
    assert bundle.site.settings.timezone == "America/Chicago"

    document = bundle.to_document()
    assert document["designSystem"]["colors"]["primary"] == "#6b4226"
    assert document["pages"][0]["isHomepage"] is True
    assert document["contentSummary"]["totalPages"] == 1
