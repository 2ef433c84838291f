from __future__ import annotations

import logging

from .industries import DEFAULT_KNOWLEDGE_BASE, IndustryKnowledgeBase
from .models.business import BusinessDataContext

logger = logging.getLogger(__name__)

GENERAL_INDUSTRY = "general"


def classify(
    prompt: str,
    business_context: BusinessDataContext | None = None,
    *,
    knowledge_base: IndustryKnowledgeBase = DEFAULT_KNOWLEDGE_BASE,
) -> str:
    """Infer an industry id by keyword search, first profile in declaration order wins."""
    client = business_context.client if business_context else None
    combined = " ".join(
        part for part in (prompt, client.industry if client else None, client.notes if client else None) if part
    ).lower()

    for profile in knowledge_base:
        matched = next((keyword for keyword in profile.keywords if keyword.lower() in combined), None)
        if matched:
            logger.info("Classified industry", extra={"industry": profile.id, "keyword": matched})
            return profile.id

    logger.debug("No industry keyword matched, using general profile")
    return GENERAL_INDUSTRY


__all__ = ["classify", "GENERAL_INDUSTRY"]
