from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Sequence

from .catalog import DEFAULT_CATALOG, ComponentCatalog
from .industries import IndustryProfile
from .models.business import DataAvailability
from .models.request import DesignPreferences

BASE_SCORE = 50
INDUSTRY_PREFERENCE_BONUS = 30
DATA_AVAILABLE_BONUS = 25
DATA_MISSING_PENALTY = 10
INTENT_AFFINITY_BONUS = 20
REPETITION_PENALTY = 15
PREFERENCE_ADJUSTMENT = 10

# Component type -> DataAvailability flags it depends on.
DATA_REQUIREMENTS: Mapping[str, Sequence[str]] = {
    "Team": ("has_team",),
    "Testimonials": ("has_testimonials",),
    "SocialProof": ("has_testimonials",),
    "Quote": ("has_testimonials",),
    "Gallery": ("has_portfolio",),
    "Carousel": ("has_portfolio",),
    "LogoCloud": ("has_portfolio",),
    "FAQ": ("has_faq",),
    "Accordion": ("has_faq",),
    "Map": ("has_locations",),
    "Features": ("has_services",),
    "Pricing": ("has_services",),
    "Tabs": ("has_services",),
    "ComparisonTable": ("has_services",),
    "ContactForm": ("has_contact",),
}

INTENT_AFFINITY: Mapping[str, Sequence[str]] = {
    "hero": ("Hero",),
    "testimonials": ("Testimonials", "SocialProof"),
    "team": ("Team",),
    "features": ("Features",),
    "services": ("Features", "Tabs"),
    "pricing": ("Pricing", "ComparisonTable"),
    "faq": ("FAQ", "Accordion"),
    "menu": ("Tabs", "Accordion"),
    "gallery": ("Gallery", "Carousel"),
    "work": ("Gallery",),
    "projects": ("Gallery",),
    "featured": ("Gallery", "Carousel"),
    "contact": ("ContactForm",),
    "location": ("Map",),
    "cta": ("CTA",),
    "newsletter": ("Newsletter",),
    "stats": ("Stats",),
    "impact": ("Stats",),
    "trust": ("TrustBadges", "LogoCloud"),
    "clients": ("LogoCloud",),
    "about": ("RichText", "Card"),
    "content": ("RichText",),
}


@dataclass(frozen=True)
class ScoringContext:
    intent: str
    availability: DataAvailability = field(default_factory=DataAvailability)
    profile: IndustryProfile | None = None
    used_types: frozenset[str] = frozenset()
    preferences: DesignPreferences | None = None
    catalog: ComponentCatalog = DEFAULT_CATALOG


@dataclass(frozen=True)
class ComponentScore:
    component_type: str
    score: int
    reasons: tuple[str, ...]
    variant: str | None = None
    overrides: Mapping[str, Any] = field(default_factory=dict)


def _preference_adjustment(component_type: str, context: ScoringContext) -> tuple[int, str | None]:
    preferences = context.preferences
    if preferences is None:
        return 0, None
    definition = context.catalog.get(component_type)
    character = definition.character if definition else "neutral"

    restrained = preferences.style == "minimal" or preferences.animation_level == "none"
    expressive = preferences.style in ("bold", "playful") or preferences.animation_level in ("moderate", "dramatic")
    if restrained:
        if character == "rich":
            return -PREFERENCE_ADJUSTMENT, "heavy effects clash with restrained style preference"
        if character == "plain":
            return PREFERENCE_ADJUSTMENT, "plain layout suits restrained style preference"
    elif expressive and character == "rich":
        return PREFERENCE_ADJUSTMENT, "rich effects suit expressive style preference"
    return 0, None


def score(component_type: str, context: ScoringContext) -> ComponentScore:
    """Score one candidate type for the context's section intent.

    Pure and deterministic: the same inputs always give the same score and
    the same reasons in the same order.

    The intent-affinity bonus is skipped for types the industry profile
    already prefers for this intent, so the two bonuses never stack.
    """
    value = BASE_SCORE
    reasons: list[str] = [f"base {BASE_SCORE}"]
    variant: str | None = None
    overrides: Mapping[str, Any] = {}

    preference = context.profile.preference_for(context.intent) if context.profile else None
    industry_preferred = preference is not None and component_type in preference.preferred
    if industry_preferred:
        value += INDUSTRY_PREFERENCE_BONUS
        reasons.append(f"+{INDUSTRY_PREFERENCE_BONUS} preferred by {context.profile.id} for {context.intent}")
        variant = preference.variant
        overrides = dict(preference.overrides)

    for flag in DATA_REQUIREMENTS.get(component_type, ()):
        if getattr(context.availability, flag):
            value += DATA_AVAILABLE_BONUS
            reasons.append(f"+{DATA_AVAILABLE_BONUS} {flag}")
        else:
            value -= DATA_MISSING_PENALTY
            reasons.append(f"-{DATA_MISSING_PENALTY} missing {flag}")

    # Affinity and industry preference express the same signal; credit it once.
    if component_type in INTENT_AFFINITY.get(context.intent, ()) and not industry_preferred:
        value += INTENT_AFFINITY_BONUS
        reasons.append(f"+{INTENT_AFFINITY_BONUS} affinity with {context.intent}")

    if component_type in context.used_types:
        value -= REPETITION_PENALTY
        reasons.append(f"-{REPETITION_PENALTY} already used on page")

    adjustment, note = _preference_adjustment(component_type, context)
    if adjustment:
        value += adjustment
        reasons.append(f"{adjustment:+d} {note}")

    clamped = max(0, min(100, value))
    if clamped != value:
        reasons.append(f"clamped from {value}")
    return ComponentScore(component_type, clamped, tuple(reasons), variant, overrides)


def rank(intent: str, candidates: Sequence[str], context: ScoringContext) -> list[ComponentScore]:
    """All candidates by descending score; equal scores keep candidate order."""
    if context.intent != intent:
        context = replace(context, intent=intent)
    scores = [score(component_type, context) for component_type in dict.fromkeys(candidates)]
    return sorted(scores, key=lambda item: -item.score)


def select_best(intent: str, candidates: Sequence[str], context: ScoringContext) -> ComponentScore:
    if not candidates:
        raise ValueError(f"No candidates to score for intent '{intent}'")
    return rank(intent, candidates, context)[0]


__all__ = [
    "ComponentScore",
    "DATA_REQUIREMENTS",
    "INTENT_AFFINITY",
    "ScoringContext",
    "rank",
    "score",
    "select_best",
]
