"""Tests for craft listing copy with model and template paths."""

import pytest

from craftstory.core.exceptions import ExtractionError, UnsupportedLanguageError
from craftstory.core.models import CaptionSuggestions, CraftDescription
from craftstory.services import listing

_CRAFT = {"title": "Peacock Bowl", "craft_type": "Blue pottery", "materials": ["quartz"]}


class TestDescribeCraft:
    async def test_model_description(self, mock_extractor):
        mock_extractor.describe_craft.return_value = CraftDescription(description="Generated.")

        result, generated = await listing.describe_craft(_CRAFT, "hi", mock_extractor)

        assert generated is True
        assert result.description == "Generated."
        mock_extractor.describe_craft.assert_awaited_once_with(_CRAFT, "hi")

    async def test_extractor_failure_uses_template(self, mock_extractor):
        mock_extractor.describe_craft.side_effect = ExtractionError("model offline")

        result, generated = await listing.describe_craft(_CRAFT, "en", mock_extractor)

        assert generated is False
        assert result.description.startswith("Peacock Bowl is a handmade piece of blue pottery")

    async def test_unsupported_language(self, mock_extractor):
        with pytest.raises(UnsupportedLanguageError):
            await listing.describe_craft(_CRAFT, "klingon", mock_extractor)
        mock_extractor.describe_craft.assert_not_awaited()


class TestSuggestCaptions:
    async def test_model_captions(self, mock_extractor):
        mock_extractor.suggest_captions.return_value = CaptionSuggestions(captions=["Hi"])

        result, generated = await listing.suggest_captions(
            "A bowl.", "ta", mock_extractor, tone="inspirational"
        )

        assert generated is True
        assert result.captions == ["Hi"]
        mock_extractor.suggest_captions.assert_awaited_once_with("A bowl.", "ta", "inspirational")

    async def test_extractor_failure_uses_templates(self, mock_extractor):
        mock_extractor.suggest_captions.side_effect = ConnectionError("down")

        result, generated = await listing.suggest_captions(
            "A bowl.", "en", mock_extractor, craft_type="wood carving"
        )

        assert generated is False
        assert len(result.captions) == 3
        assert result.hashtags[0] == "#WoodCarving"
