from auto_site_designer.classifier import GENERAL_INDUSTRY, classify
from auto_site_designer.models.business import BusinessDataContext, ClientInfo

from support import load_business


def test_prompt_keywords_select_industry():
    assert classify("a cozy neighborhood café") == "restaurant"
    assert classify("Personal injury attorney website") == "law-firm"
    assert classify("Family dental clinic") == "healthcare"


def test_business_context_contributes_keywords():
    context = BusinessDataContext(client=ClientInfo(industry="Roofing contractor"))

    assert classify("a new website for our team", context) == "construction"


def test_first_profile_in_order_wins():
    # Matches both restaurant ("coffee") and ecommerce ("shop").
    assert classify("coffee shop") == "restaurant"


def test_unmatched_prompt_uses_general_profile():
    assert classify("a simple site for a notary public") == GENERAL_INDUSTRY
    assert GENERAL_INDUSTRY == "general"


def test_fixture_businesses():
    assert classify("new website", load_business("cafe")) == "restaurant"
    assert classify("new website", load_business("hartwell-law")) == "law-firm"
