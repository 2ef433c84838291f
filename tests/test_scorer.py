import pytest

from auto_site_designer.industries import DEFAULT_KNOWLEDGE_BASE
from auto_site_designer.models.business import DataAvailability
from auto_site_designer.models.request import DesignPreferences
from auto_site_designer.scorer import ScoringContext, rank, score, select_best

RESTAURANT = DEFAULT_KNOWLEDGE_BASE.get_profile("restaurant")
GENERAL = DEFAULT_KNOWLEDGE_BASE.general


def test_scoring_is_deterministic():
    context = ScoringContext(intent="testimonials", availability=DataAvailability(has_testimonials=True), profile=RESTAURANT)

    assert score("SocialProof", context) == score("SocialProof", context)
    assert rank("testimonials", ["Quote", "SocialProof", "Testimonials"], context) == rank(
        "testimonials", ["Quote", "SocialProof", "Testimonials"], context
    )


def test_industry_preferred_component_wins_when_data_exists():
    context = ScoringContext(intent="testimonials", availability=DataAvailability(has_testimonials=True), profile=RESTAURANT)

    ranked = rank("testimonials", ["SocialProof", "Quote", "Testimonials"], context)

    assert ranked[0].component_type == "Testimonials"
    assert ranked[0].score == 100
    assert "clamped from 105" in ranked[0].reasons
    assert not any("affinity" in reason for reason in ranked[0].reasons)
    assert ranked[0].variant == "carousel"
    assert ranked[0].overrides == {"showRating": True}
    assert all(candidate.score < ranked[0].score for candidate in ranked[1:])


def test_missing_data_lowers_score():
    context = ScoringContext(intent="testimonials", profile=RESTAURANT)

    ranked = rank("testimonials", ["Testimonials", "SocialProof", "Quote"], context)

    assert [(candidate.component_type, candidate.score) for candidate in ranked] == [
        ("Testimonials", 70),
        ("SocialProof", 60),
        ("Quote", 40),
    ]
    assert "-10 missing has_testimonials" in ranked[0].reasons


def test_equal_scores_keep_candidate_order():
    context = ScoringContext(intent="about", profile=GENERAL)

    assert [item.component_type for item in rank("about", ["Card", "RichText"], context)] == ["Card", "RichText"]
    assert [item.component_type for item in rank("about", ["RichText", "Card"], context)] == ["RichText", "Card"]


def test_repetition_penalty():
    fresh = ScoringContext(intent="hero", profile=GENERAL)
    repeated = ScoringContext(intent="hero", profile=GENERAL, used_types=frozenset({"Hero"}))

    assert score("Hero", fresh).score == 80
    assert score("Hero", repeated).score == 65


def test_restrained_style_prefers_plain_components():
    availability = DataAvailability(has_portfolio=True)
    neutral = ScoringContext(intent="gallery", availability=availability, profile=GENERAL)
    minimal = ScoringContext(
        intent="gallery",
        availability=availability,
        profile=GENERAL,
        preferences=DesignPreferences(style="minimal"),
    )

    assert score("Gallery", neutral).score == 95
    assert score("Gallery", minimal).score == 85
    assert score("Card", minimal).score == 60


def test_expressive_style_rewards_rich_components():
    context = ScoringContext(intent="featured", profile=GENERAL, preferences=DesignPreferences(animation_level="dramatic"))

    assert score("Typewriter", context).score == 60


def test_select_best_requires_candidates():
    with pytest.raises(ValueError):
        select_best("hero", [], ScoringContext(intent="hero"))
