"""Unit tests for pydantic domain models."""

import pytest
from pydantic import ValidationError

from craftstory.core.models import ArtisanBio, MessageRequest, OnboardingQuestion


class TestOnboardingQuestion:
    def test_model_style_keys(self):
        question = OnboardingQuestion.model_validate(
            {"question": "Craft?", "questionTranslated": "शिल्प?", "field": "craftType"}
        )
        assert question.prompt_text == "Craft?"
        assert question.prompt_translated == "शिल्प?"
        assert question.target_field == "craft_type"
        assert question.id == "craft_type"

    def test_translation_defaults_to_prompt(self):
        question = OnboardingQuestion(prompt_text="Name?", target_field="name")
        assert question.prompt_translated == "Name?"
        assert question.answered is False
        assert question.answer_text is None

    def test_target_field_required(self):
        with pytest.raises(ValidationError):
            OnboardingQuestion.model_validate({"question": "Name?"})


class TestArtisanBio:
    def test_defaults(self):
        bio = ArtisanBio()
        assert (bio.name, bio.craft_type, bio.location) == (
            "Artisan",
            "Traditional Craft",
            "Unknown Location",
        )
        assert bio.confidence == 0.8

    def test_confidence_bounds(self):
        with pytest.raises(ValidationError):
            ArtisanBio(confidence=1.5)


class TestMessageRequest:
    def test_exactly_one_input(self):
        assert MessageRequest(text="hi").text == "hi"
        with pytest.raises(ValidationError):
            MessageRequest()
        with pytest.raises(ValidationError):
            MessageRequest(text="hi", audio_data="data:audio/webm;base64,AAAA")
