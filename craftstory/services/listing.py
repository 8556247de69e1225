"""Marketplace copy for craft pieces.

Descriptions and captions come from the extractor when it answers and from
the heuristic templates otherwise; a listing request never fails on a model
outage. The boolean returned alongside the copy says which path produced it.
"""

import logging
from typing import Any

from craftstory.core.languages import require_language
from craftstory.core.models import CaptionSuggestions, CraftDescription
from craftstory.services.extraction import heuristics
from craftstory.services.extraction.base import BaseExtractor

logger = logging.getLogger(__name__)


async def describe_craft(
    craft: dict[str, Any], language: str, extractor: BaseExtractor
) -> tuple[CraftDescription, bool]:
    """Write a description, myth, story and tags for one piece.

    Returns:
        ``(description, generated)``.

    Raises:
        UnsupportedLanguageError: If *language* is not supported.
    """
    config = require_language(language)
    try:
        return await extractor.describe_craft(craft, config.code), True
    except Exception as exc:
        logger.warning(
            "Craft description failed for '%s', using template: %s", craft.get("title"), exc
        )
        return heuristics.fallback_description(craft), False


async def suggest_captions(
    description: str,
    language: str,
    extractor: BaseExtractor,
    tone: str = "storytelling",
    craft_type: str | None = None,
) -> tuple[CaptionSuggestions, bool]:
    """Suggest captions and hashtags for a described piece.

    Raises:
        UnsupportedLanguageError: If *language* is not supported.
    """
    config = require_language(language)
    try:
        return await extractor.suggest_captions(description, config.code, tone), True
    except Exception as exc:
        logger.warning("Caption suggestion failed, using templates: %s", exc)
        return heuristics.fallback_captions(description, craft_type), False
