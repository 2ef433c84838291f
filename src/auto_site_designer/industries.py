from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from .models.architecture import DesignTokens


@dataclass(frozen=True)
class PageTemplate:
    name: str
    slug: str
    priority: int
    required: bool
    intents: Sequence[str]


@dataclass(frozen=True)
class ComponentPreference:
    intent: str
    preferred: Sequence[str]
    variant: str | None = None
    overrides: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class IndustryProfile:
    id: str
    name: str
    keywords: Sequence[str]
    recommended_pages: Sequence[PageTemplate]
    component_preferences: Sequence[ComponentPreference]
    design_tokens: DesignTokens
    content_guidelines: Mapping[str, Sequence[str]]
    imagery: str = "authentic-photography"

    def preference_for(self, intent: str) -> ComponentPreference | None:
        for preference in self.component_preferences:
            if preference.intent == intent:
                return preference
        return None

    def page_template(self, slug_or_name: str) -> PageTemplate | None:
        key = slug_or_name.strip().lower()
        normalized_slug = key if key.startswith("/") else f"/{key}"
        for template in self.recommended_pages:
            if template.slug == normalized_slug or template.name.lower() == key:
                return template
        return None


def _pref(intent: str, *preferred: str, variant: str | None = None, **overrides: Any) -> ComponentPreference:
    return ComponentPreference(intent=intent, preferred=preferred, variant=variant, overrides=overrides)


def _page(name: str, slug: str, priority: int, required: bool, *intents: str) -> PageTemplate:
    return PageTemplate(name=name, slug=slug, priority=priority, required=required, intents=intents)


# Generic component choices per section intent: primary first, then alternatives.
DEFAULT_INTENT_COMPONENTS: Mapping[str, Sequence[str]] = {
    "hero": ("Hero", "Parallax"),
    "features": ("Features", "Card"),
    "services": ("Features", "Card", "Tabs"),
    "testimonials": ("Testimonials", "SocialProof", "Quote"),
    "cta": ("CTA", "Newsletter"),
    "about": ("RichText", "Card"),
    "team": ("Team", "Card"),
    "stats": ("Stats", "Features"),
    "process": ("Features", "Accordion"),
    "contact": ("ContactForm", "Card"),
    "location": ("Map", "Card"),
    "hours": ("Card", "Stats"),
    "gallery": ("Gallery", "Carousel"),
    "work": ("Gallery", "Carousel"),
    "projects": ("Gallery", "Carousel"),
    "featured": ("Gallery", "Carousel"),
    "pricing": ("Pricing", "ComparisonTable"),
    "faq": ("FAQ", "Accordion"),
    "menu": ("Tabs", "Accordion"),
    "trust": ("TrustBadges", "LogoCloud"),
    "clients": ("LogoCloud", "SocialProof"),
    "newsletter": ("Newsletter", "CTA"),
    "impact": ("Stats", "Features"),
    "mission": ("Features", "RichText"),
    "programs": ("Features", "Card"),
    "practice-areas": ("Features", "Card"),
    "categories": ("Features", "Card"),
    "content": ("RichText",),
}

GENERAL_PAGES: Sequence[PageTemplate] = (
    _page("Home", "/", 1, True, "hero", "features", "testimonials", "cta"),
    _page("About", "/about", 2, False, "hero", "about", "team", "stats"),
    _page("Services", "/services", 3, False, "hero", "services", "process", "cta"),
    _page("Contact", "/contact", 4, True, "hero", "contact", "location", "hours"),
)


INDUSTRY_PROFILES: Sequence[IndustryProfile] = (
    IndustryProfile(
        id="restaurant",
        name="Restaurant & Food Service",
        keywords=(
            "restaurant", "cafe", "café", "coffee", "espresso", "food", "menu", "dining", "chef",
            "cuisine", "catering", "bistro", "pizzeria", "bakery", "brunch",
        ),
        recommended_pages=(
            _page("Home", "/", 1, True, "hero", "features", "testimonials", "cta"),
            _page("Menu", "/menu", 2, True, "hero", "menu", "gallery", "cta"),
            _page("About", "/about", 3, False, "hero", "about", "team"),
            _page("Reservations", "/reservations", 4, False, "hero", "contact", "hours"),
            _page("Contact", "/contact", 5, True, "hero", "contact", "location", "hours"),
            _page("Gallery", "/gallery", 6, False, "hero", "gallery", "cta"),
        ),
        component_preferences=(
            _pref("hero", "Hero", variant="image-background", showCta=True, ctaText="View Menu"),
            _pref("menu", "Tabs", "Accordion", allowCategoryFiltering=True),
            _pref("gallery", "Gallery", variant="masonry", enableLightbox=True),
            _pref("hours", "Stats", "Card", showBusinessHours=True),
            _pref("testimonials", "Testimonials", variant="carousel", showRating=True),
            _pref("cta", "CTA", variant="split", ctaText="Make a Reservation"),
            _pref("location", "Map", "Card", showDirections=True),
        ),
        design_tokens=DesignTokens(
            primary_color="#b45309", secondary_color="#78350f", accent_color="#eab308",
            background_color="#fffbeb", text_color="#1c1917", font_heading="Playfair Display",
            font_body="Lato", border_radius="sm", spacing_scale="spacious", color_mood="warm",
            shadow_style="soft",
        ),
        content_guidelines={
            "hero": ("Use appetizing food imagery", "Highlight signature dish or ambiance", "Mention opening hours"),
            "menu": ("Include prices", "Mark popular items", "Note dietary options (V, GF)"),
        },
        imagery="high-quality-food-photos",
    ),
    IndustryProfile(
        id="law-firm",
        name="Law Firm & Legal Services",
        keywords=("law firm", "attorney", "legal", "lawyer", "litigation", "practice areas", "counsel"),
        recommended_pages=(
            _page("Home", "/", 1, True, "hero", "practice-areas", "testimonials", "trust", "cta"),
            _page("Practice Areas", "/practice-areas", 2, True, "hero", "practice-areas", "faq", "cta"),
            _page("Attorneys", "/attorneys", 3, True, "hero", "team", "testimonials"),
            _page("About", "/about", 4, True, "hero", "about", "stats"),
            _page("Contact", "/contact", 5, True, "hero", "contact", "location"),
        ),
        component_preferences=(
            _pref("hero", "Hero", variant="split", tone="authoritative", showCredentials=True),
            _pref("practice-areas", "Features", "Card", variant="icon-grid", showLearnMore=True),
            _pref("team", "Team", variant="detailed-grid", showCredentials=True, showEducation=True),
            _pref("testimonials", "Testimonials", variant="minimal", anonymize=True),
            _pref("trust", "TrustBadges", "LogoCloud", showBarAssociations=True),
            _pref("cta", "CTA", variant="form", ctaText="Free Consultation"),
            _pref("faq", "FAQ", variant="accordion", groupByCategory=True),
        ),
        design_tokens=DesignTokens(
            primary_color="#1e3a5f", secondary_color="#334155", accent_color="#b08d57",
            background_color="#ffffff", text_color="#0f172a", font_heading="Merriweather",
            font_body="Source Sans Pro", border_radius="none", spacing_scale="balanced",
            color_mood="professional", shadow_style="subtle",
        ),
        content_guidelines={
            "hero": ("Emphasize experience and track record", "Include trust indicators", "Clear call to consultation"),
            "team": ("Include bar admissions", "Education credentials", "Areas of expertise"),
        },
        imagery="professional-portraits",
    ),
    IndustryProfile(
        id="ecommerce",
        name="E-commerce & Retail",
        keywords=("shop", "store", "products", "ecommerce", "e-commerce", "sell", "cart", "retail", "fashion", "boutique"),
        recommended_pages=(
            _page("Home", "/", 1, True, "hero", "featured", "categories", "testimonials", "newsletter"),
            _page("Shop", "/shop", 2, True, "hero", "featured", "trust"),
            _page("About", "/about", 3, False, "hero", "about", "team"),
            _page("Contact", "/contact", 4, True, "hero", "contact", "faq"),
        ),
        component_preferences=(
            _pref("hero", "Hero", variant="full-width", showPromotion=True),
            _pref("featured", "Gallery", "Carousel", variant="product-grid", showPrices=True),
            _pref("categories", "Features", "Card", variant="image-card"),
            _pref("trust", "TrustBadges", "LogoCloud", showPaymentMethods=True, showShipping=True),
            _pref("testimonials", "Testimonials", "SocialProof", showProductReviews=True),
            _pref("newsletter", "Newsletter", "CTA", offerDiscount=True),
        ),
        design_tokens=DesignTokens(
            primary_color="#db2777", secondary_color="#1f2937", accent_color="#f59e0b",
            background_color="#ffffff", text_color="#111827", font_heading="Poppins",
            font_body="Inter", border_radius="md", spacing_scale="compact", color_mood="vibrant",
            shadow_style="medium",
        ),
        content_guidelines={
            "hero": ("Highlight current promotion", "Show best-selling products", "Clear shop CTA"),
            "trust": ("Payment methods accepted", "Shipping info", "Return policy highlights"),
        },
        imagery="product-lifestyle",
    ),
    IndustryProfile(
        id="saas",
        name="SaaS & Technology",
        keywords=("software", "saas", "subscription", "pricing plans", "startup", "platform", "tech", "app"),
        recommended_pages=(
            _page("Home", "/", 1, True, "hero", "features", "testimonials", "cta"),
            _page("Features", "/features", 2, True, "hero", "features", "process", "cta"),
            _page("Pricing", "/pricing", 3, True, "hero", "pricing", "faq", "cta"),
            _page("About", "/about", 4, False, "hero", "about", "team"),
            _page("Contact", "/contact", 5, True, "hero", "contact"),
        ),
        component_preferences=(
            _pref("hero", "Hero", variant="centered", showProductDemo=True),
            _pref("features", "Features", variant="alternating", showScreenshots=True),
            _pref("pricing", "Pricing", variant="comparison", highlightRecommended=True),
            _pref("testimonials", "Testimonials", "LogoCloud", showCompanyLogos=True),
            _pref("faq", "FAQ", groupByCategory=True),
            _pref("cta", "CTA", variant="centered", ctaText="Start Free Trial"),
        ),
        design_tokens=DesignTokens(
            primary_color="#4f46e5", secondary_color="#0f172a", accent_color="#22d3ee",
            background_color="#ffffff", text_color="#0f172a", font_heading="Inter",
            font_body="Inter", border_radius="lg", spacing_scale="spacious", color_mood="professional",
            shadow_style="soft",
        ),
        content_guidelines={
            "hero": ("Value proposition in six words or less", "Show product interface", "Social proof"),
            "pricing": ("Highlight most popular plan", "Show savings for annual billing"),
        },
        imagery="product-screenshots",
    ),
    IndustryProfile(
        id="real-estate",
        name="Real Estate",
        keywords=("real estate", "property", "listings", "realtor", "mortgage", "homes for sale"),
        recommended_pages=(
            _page("Home", "/", 1, True, "hero", "featured", "stats", "testimonials", "cta"),
            _page("Listings", "/listings", 2, True, "hero", "featured", "cta"),
            _page("About", "/about", 3, True, "hero", "about", "team"),
            _page("Contact", "/contact", 4, True, "hero", "contact", "location"),
        ),
        component_preferences=(
            _pref("hero", "Hero", variant="search", showPropertySearch=True),
            _pref("featured", "Gallery", "Carousel", variant="property-cards", showPrice=True),
            _pref("team", "Team", "Card", variant="agent-profile", showContact=True),
            _pref("testimonials", "Testimonials", showPropertySold=True),
            _pref("stats", "Stats", showSalesStats=True),
            _pref("cta", "CTA", variant="form", ctaText="Get a Free Home Valuation"),
        ),
        design_tokens=DesignTokens(
            primary_color="#0f766e", secondary_color="#1e293b", accent_color="#d4a373",
            background_color="#ffffff", text_color="#111827", font_heading="Playfair Display",
            font_body="Inter", border_radius="md", spacing_scale="balanced", color_mood="professional",
            shadow_style="soft",
        ),
        content_guidelines={
            "hero": ("Property search functionality", "Market area highlight"),
            "stats": ("Homes sold", "Years of experience", "Average days on market"),
        },
        imagery="property-photos",
    ),
    IndustryProfile(
        id="healthcare",
        name="Healthcare & Medical",
        keywords=("medical", "health", "doctor", "clinic", "patient", "dental", "therapy", "hospital", "dentist"),
        recommended_pages=(
            _page("Home", "/", 1, True, "hero", "services", "trust", "testimonials", "cta"),
            _page("Services", "/services", 2, True, "hero", "services", "faq", "cta"),
            _page("Team", "/team", 3, True, "hero", "team", "testimonials"),
            _page("About", "/about", 4, True, "hero", "about", "stats"),
            _page("Contact", "/contact", 5, True, "hero", "contact", "location", "hours"),
        ),
        component_preferences=(
            _pref("hero", "Hero", variant="image-background", tone="caring", showBooking=True),
            _pref("services", "Features", "Card", variant="icon-grid", showBookNow=True),
            _pref("team", "Team", variant="detailed-grid", showCredentials=True),
            _pref("trust", "TrustBadges", "LogoCloud", showCertifications=True),
            _pref("testimonials", "Testimonials", variant="carousel", showPatientStories=True),
            _pref("faq", "FAQ", groupByCategory=True),
            _pref("cta", "CTA", variant="split", ctaText="Book Appointment"),
        ),
        design_tokens=DesignTokens(
            primary_color="#0e7490", secondary_color="#155e75", accent_color="#f59e0b",
            background_color="#ffffff", text_color="#0f172a", font_heading="Nunito",
            font_body="Open Sans", border_radius="lg", spacing_scale="spacious", color_mood="calm",
            shadow_style="soft",
        ),
        content_guidelines={
            "hero": ("Patient-focused messaging", "Easy appointment booking", "Trust indicators"),
            "team": ("Medical credentials", "Specializations", "Friendly headshots"),
        },
        imagery="professional-caring",
    ),
    IndustryProfile(
        id="portfolio",
        name="Portfolio & Creative",
        keywords=("portfolio", "designer", "photographer", "creative", "artist", "freelancer"),
        recommended_pages=(
            _page("Home", "/", 1, True, "hero", "work", "clients", "testimonials", "cta"),
            _page("Work", "/work", 2, True, "hero", "work", "cta"),
            _page("About", "/about", 3, True, "hero", "about", "clients"),
            _page("Contact", "/contact", 4, True, "hero", "contact"),
        ),
        component_preferences=(
            _pref("hero", "Hero", variant="minimal", emphasizeWork=True),
            _pref("work", "Gallery", variant="masonry", enableLightbox=True),
            _pref("about", "Card", "Features", variant="image-side"),
            _pref("clients", "LogoCloud", showInfiniteScroll=True),
            _pref("testimonials", "Testimonials", variant="minimal", showClientName=True),
            _pref("cta", "CTA", variant="minimal", ctaText="Let's Work Together"),
        ),
        design_tokens=DesignTokens(
            primary_color="#111111", secondary_color="#404040", accent_color="#ff5a36",
            background_color="#ffffff", text_color="#111111", font_heading="Space Grotesk",
            font_body="Inter", border_radius="none", spacing_scale="spacious", color_mood="minimal",
            shadow_style="none",
        ),
        content_guidelines={
            "hero": ("Let the work speak", "Minimal text", "Strong visual impact"),
            "work": ("High-quality project images", "Brief project descriptions"),
        },
        imagery="work-samples",
    ),
    IndustryProfile(
        id="construction",
        name="Construction & Trades",
        keywords=("construction", "contractor", "renovation", "plumber", "electrician", "roofing", "hvac", "handyman"),
        recommended_pages=(
            _page("Home", "/", 1, True, "hero", "services", "trust", "testimonials", "cta"),
            _page("Services", "/services", 2, True, "hero", "services", "process", "cta"),
            _page("Projects", "/projects", 3, True, "hero", "projects", "cta"),
            _page("About", "/about", 4, True, "hero", "about", "stats"),
            _page("Contact", "/contact", 5, True, "hero", "contact", "location"),
        ),
        component_preferences=(
            _pref("hero", "Hero", variant="image-background", showPhone=True),
            _pref("services", "Features", "Card", variant="icon-grid", showRequestQuote=True),
            _pref("projects", "Gallery", variant="before-after"),
            _pref("trust", "TrustBadges", "Stats", showLicenses=True, showInsurance=True),
            _pref("testimonials", "Testimonials", showProjectType=True),
            _pref("cta", "CTA", variant="form", ctaText="Get a Free Quote"),
            _pref("location", "Map", showServiceArea=True),
        ),
        design_tokens=DesignTokens(
            primary_color="#ea580c", secondary_color="#1c1917", accent_color="#facc15",
            background_color="#ffffff", text_color="#1c1917", font_heading="Oswald",
            font_body="Roboto", border_radius="sm", spacing_scale="balanced", color_mood="bold",
            shadow_style="medium",
        ),
        content_guidelines={
            "hero": ("Show completed project", "Prominent phone number", "Get Quote CTA"),
            "trust": ("Licensed & insured", "Years in business", "Projects completed"),
        },
        imagery="project-photos",
    ),
    IndustryProfile(
        id="education",
        name="Education & Training",
        keywords=("education", "school", "training", "courses", "academy", "tutoring", "coaching"),
        recommended_pages=(
            _page("Home", "/", 1, True, "hero", "programs", "stats", "testimonials", "cta"),
            _page("Programs", "/programs", 2, True, "hero", "programs", "faq", "cta"),
            _page("About", "/about", 3, True, "hero", "about", "team"),
            _page("Contact", "/contact", 4, True, "hero", "contact", "location"),
        ),
        component_preferences=(
            _pref("hero", "Hero", variant="centered", showEnrollCta=True),
            _pref("programs", "Features", "Card", variant="detailed-grid", showPricing=True),
            _pref("team", "Team", variant="grid", showCredentials=True),
            _pref("testimonials", "Testimonials", showStudentSuccess=True),
            _pref("stats", "Stats", showSuccessRate=True),
            _pref("cta", "CTA", ctaText="Enroll Now"),
        ),
        design_tokens=DesignTokens(
            primary_color="#2563eb", secondary_color="#1e3a8a", accent_color="#f97316",
            background_color="#ffffff", text_color="#111827", font_heading="Nunito",
            font_body="Inter", border_radius="md", spacing_scale="balanced", color_mood="professional",
            shadow_style="soft",
        ),
        content_guidelines={
            "hero": ("Inspiring headline", "Student success focus", "Clear enrollment path"),
            "stats": ("Graduation rate", "Student satisfaction", "Career placement"),
        },
        imagery="learning-environment",
    ),
    IndustryProfile(
        id="nonprofit",
        name="Nonprofit & Charity",
        keywords=("nonprofit", "non-profit", "charity", "ngo", "foundation", "donate", "volunteer"),
        recommended_pages=(
            _page("Home", "/", 1, True, "hero", "impact", "mission", "testimonials", "cta"),
            _page("Our Work", "/our-work", 2, True, "hero", "mission", "impact", "cta"),
            _page("About", "/about", 3, True, "hero", "about", "team"),
            _page("Contact", "/contact", 4, True, "hero", "contact"),
        ),
        component_preferences=(
            _pref("hero", "Hero", variant="image-background", showDonateCta=True),
            _pref("impact", "Stats", showImpactNumbers=True),
            _pref("mission", "Features", "Card", showValues=True),
            _pref("testimonials", "Testimonials", showBeneficiaries=True),
            _pref("team", "Team", variant="grid", showLeadership=True),
            _pref("cta", "CTA", ctaText="Donate Now"),
        ),
        design_tokens=DesignTokens(
            primary_color="#15803d", secondary_color="#14532d", accent_color="#f59e0b",
            background_color="#ffffff", text_color="#111827", font_heading="Merriweather",
            font_body="Open Sans", border_radius="md", spacing_scale="spacious", color_mood="warm",
            shadow_style="soft",
        ),
        content_guidelines={
            "hero": ("Emotional connection", "Clear mission statement", "Multiple ways to help"),
            "impact": ("Lives changed", "Projects completed", "Funds raised"),
        },
        imagery="impact-photos",
    ),
)


GENERAL_PROFILE = IndustryProfile(
    id="general",
    name="General Business",
    keywords=(),
    recommended_pages=GENERAL_PAGES,
    component_preferences=(
        _pref("hero", "Hero", variant="centered"),
        _pref("cta", "CTA", variant="centered", ctaText="Get in Touch"),
    ),
    design_tokens=DesignTokens(
        primary_color="#3b82f6", secondary_color="#6b7280", accent_color="#f59e0b",
        background_color="#ffffff", text_color="#111827", font_heading="Inter", font_body="Inter",
        border_radius="md", spacing_scale="balanced", color_mood="professional", shadow_style="soft",
    ),
    content_guidelines={
        "hero": ("State what the business does in one sentence", "One primary call to action"),
    },
)


class IndustryKnowledgeBase:
    """Static, ordered collection of industry profiles."""

    def __init__(
        self,
        profiles: Sequence[IndustryProfile] = INDUSTRY_PROFILES,
        general: IndustryProfile = GENERAL_PROFILE,
    ) -> None:
        self._profiles = tuple(profiles)
        self._general = general
        self._by_id = {profile.id: profile for profile in self._profiles}

    def __iter__(self):
        return iter(self._profiles)

    @property
    def general(self) -> IndustryProfile:
        return self._general

    def ids(self) -> list[str]:
        return [profile.id for profile in self._profiles]

    def get_profile(self, industry_id: str) -> IndustryProfile:
        return self._by_id.get(industry_id.lower(), self._general)


DEFAULT_KNOWLEDGE_BASE = IndustryKnowledgeBase()


def default_candidates(intent: str, profile: IndustryProfile | None = None) -> list[str]:
    """Candidate component types for an intent, industry preferences first."""
    candidates: list[str] = []
    preference = profile.preference_for(intent) if profile else None
    if preference:
        candidates.extend(preference.preferred)
    for component_type in DEFAULT_INTENT_COMPONENTS.get(intent, ("RichText",)):
        if component_type not in candidates:
            candidates.append(component_type)
    return candidates


def format_profile_for_prompt(profile: IndustryProfile) -> str:
    lines = [f"Industry: {profile.name} ({profile.id})", "Recommended pages:"]
    for page in profile.recommended_pages:
        marker = "required" if page.required else "optional"
        lines.append(f"- {page.name} {page.slug} [{marker}] sections: {', '.join(page.intents)}")
    if profile.component_preferences:
        lines.append("Preferred components:")
        for preference in profile.component_preferences:
            variant = f" ({preference.variant})" if preference.variant else ""
            lines.append(f"- {preference.intent}: {' / '.join(preference.preferred)}{variant}")
    if profile.content_guidelines:
        lines.append("Content guidelines:")
        for intent, tips in profile.content_guidelines.items():
            lines.append(f"- {intent}: {'; '.join(tips)}")
    return "\n".join(lines)


__all__ = [
    "ComponentPreference",
    "DEFAULT_INTENT_COMPONENTS",
    "DEFAULT_KNOWLEDGE_BASE",
    "GENERAL_PROFILE",
    "INDUSTRY_PROFILES",
    "IndustryKnowledgeBase",
    "IndustryProfile",
    "PageTemplate",
    "default_candidates",
    "format_profile_for_prompt",
]
