"""Unit tests for ProfileExtractor (mocked LLM provider)."""

import json

import pytest

from craftstory.core.exceptions import ExtractionError
from craftstory.core.models import ConversationMessage, OnboardingQuestion
from craftstory.services.extraction.profile_extractor import ProfileExtractor


@pytest.fixture
def extractor(mock_llm):
    return ProfileExtractor(mock_llm)


def _name_question() -> OnboardingQuestion:
    return OnboardingQuestion(id="name", prompt_text="What is your name?", target_field="name")


# ---------------------------------------------------------------------------
# generate_questions
# ---------------------------------------------------------------------------


class TestGenerateQuestions:
    async def test_parses_camel_case_items(self, extractor, mock_llm):
        mock_llm.generate.return_value = (
            "Here you go:\n"
            + json.dumps(
                [
                    {
                        "id": "craftType",
                        "question": "What do you make?",
                        "questionTranslated": "आप क्या बनाते हैं?",
                        "field": "craftType",
                        "required": True,
                        "answered": True,
                    },
                    {"question": "Where are you based?", "field": "location"},
                ]
            )
        )

        questions = await extractor.generate_questions("I make pots", "hi")

        assert [q.target_field for q in questions] == ["craft_type", "location"]
        assert questions[0].prompt_translated == "आप क्या बनाते हैं?"
        assert questions[0].answered is False
        assert questions[1].id == "location"
        assert questions[1].prompt_translated == "Where are you based?"

    async def test_skips_malformed_items(self, extractor, mock_llm):
        mock_llm.generate.return_value = json.dumps(
            [{"question": "No field here"}, "not a dict", {"question": "Name?", "field": "name"}]
        )

        questions = await extractor.generate_questions("hello", "en")

        assert [q.target_field for q in questions] == ["name"]

    async def test_duplicate_ids_are_made_unique(self, extractor, mock_llm):
        mock_llm.generate.return_value = json.dumps(
            [{"question": "Name?", "field": "name"}, {"question": "Full name?", "field": "name"}]
        )

        questions = await extractor.generate_questions("hello", "en")

        assert len({q.id for q in questions}) == 2

    async def test_no_array_raises(self, extractor, mock_llm):
        mock_llm.generate.return_value = "I'd love to help you onboard!"
        with pytest.raises(ExtractionError):
            await extractor.generate_questions("hello", "en")

    async def test_no_usable_items_raises(self, extractor, mock_llm):
        mock_llm.generate.return_value = "[]"
        with pytest.raises(ExtractionError):
            await extractor.generate_questions("hello", "en")

    async def test_llm_failure_raises(self, extractor, mock_llm):
        mock_llm.generate.side_effect = RuntimeError("Ollama error")
        with pytest.raises(ExtractionError):
            await extractor.generate_questions("hello", "en")

    async def test_transient_error_is_retried(self, extractor, mock_llm):
        mock_llm.generate.side_effect = [
            ConnectionError("blip"),
            '[{"question": "Name?", "field": "name"}]',
        ]

        questions = await extractor.generate_questions("hello", "en")

        assert len(questions) == 1
        assert mock_llm.generate.await_count == 2


# ---------------------------------------------------------------------------
# process_answer
# ---------------------------------------------------------------------------


class TestProcessAnswer:
    async def test_profile_update_keys_normalized(self, extractor, mock_llm):
        mock_llm.generate.return_value = (
            '```json\n{"profileUpdate": {"experienceYears": 12}, "nextQuestion": null}\n```'
        )

        result = await extractor.process_answer(
            OnboardingQuestion(prompt_text="Years?", target_field="experience_years"),
            "twelve years",
            "en",
            {},
        )

        assert result.profile_update == {"experience_years": 12}
        assert result.next_question is None

    async def test_prompt_includes_context(self, extractor, mock_llm):
        mock_llm.generate.return_value = '{"profileUpdate": {"name": "Priya"}}'

        await extractor.process_answer(_name_question(), "I am Priya", "en", {"craft_type": "pottery"})

        prompt = mock_llm.generate.await_args.args[0]
        assert "What is your name?" in prompt
        assert "I am Priya" in prompt
        assert '"craft_type": "pottery"' in prompt

    async def test_follow_up_inherits_field(self, extractor, mock_llm):
        mock_llm.generate.return_value = json.dumps(
            {
                "profileUpdate": {"name": "P"},
                "nextQuestion": {"question": "Could you spell your full name?"},
            }
        )

        result = await extractor.process_answer(_name_question(), "P", "en", {})

        assert result.next_question.target_field == "name"
        assert result.next_question.prompt_text == "Could you spell your full name?"

    async def test_malformed_follow_up_is_dropped(self, extractor, mock_llm):
        mock_llm.generate.return_value = json.dumps(
            {"profileUpdate": {"name": "Priya"}, "nextQuestion": {"field": "name"}}
        )

        result = await extractor.process_answer(_name_question(), "Priya", "en", {})

        assert result.next_question is None
        assert result.profile_update == {"name": "Priya"}

    async def test_missing_profile_update_is_empty(self, extractor, mock_llm):
        mock_llm.generate.return_value = '{"nextQuestion": null}'
        result = await extractor.process_answer(_name_question(), "Priya", "en", {})
        assert result.profile_update == {}

    async def test_prose_raises(self, extractor, mock_llm):
        mock_llm.generate.return_value = "The artisan is called Priya."
        with pytest.raises(ExtractionError):
            await extractor.process_answer(_name_question(), "Priya", "en", {})


# ---------------------------------------------------------------------------
# generate_bio / extract_profile
# ---------------------------------------------------------------------------


class TestBioAndProfile:
    async def test_bio_is_stripped(self, extractor, mock_llm):
        mock_llm.generate.return_value = "  Priya shapes clay in Jaipur.  \n"
        assert await extractor.generate_bio({"name": "Priya"}, "en") == (
            "Priya shapes clay in Jaipur."
        )

    async def test_blank_bio_raises(self, extractor, mock_llm):
        mock_llm.generate.return_value = "   "
        with pytest.raises(ExtractionError):
            await extractor.generate_bio({}, "en")

    async def test_extract_profile(self, extractor, mock_llm):
        mock_llm.generate.return_value = json.dumps(
            {
                "name": "Ahmed Hassan",
                "craftType": "Wood carving",
                "location": "Lucknow",
                "bio": "Carves sheesham wood.",
                "confidence": 0.93,
            }
        )

        bio = await extractor.extract_profile("I am Ahmed...", "en")

        assert bio.name == "Ahmed Hassan"
        assert bio.craft_type == "Wood carving"
        assert bio.location == "Lucknow"
        assert bio.confidence == pytest.approx(0.93)

    async def test_extract_profile_defaults_and_clamp(self, extractor, mock_llm):
        mock_llm.generate.return_value = '{"name": "", "confidence": 7}'

        bio = await extractor.extract_profile("mumble", "en")

        assert bio.name == "Artisan"
        assert bio.craft_type == "Traditional Craft"
        assert bio.location == "Unknown Location"
        assert bio.bio == "A skilled artisan preserving traditional craft techniques."
        assert bio.confidence == 1.0

    async def test_extract_profile_zero_confidence_is_kept(self, extractor, mock_llm):
        mock_llm.generate.return_value = '{"name": "Meera", "confidence": 0}'

        bio = await extractor.extract_profile("mumble", "en")

        assert bio.confidence == 0.0

    async def test_extract_profile_missing_confidence_uses_default(self, extractor, mock_llm):
        mock_llm.generate.return_value = '{"name": "Meera"}'
        bio = await extractor.extract_profile("mumble", "en")
        assert bio.confidence == pytest.approx(0.8)

    async def test_extract_profile_unparseable(self, extractor, mock_llm):
        mock_llm.generate.return_value = "no json"
        with pytest.raises(ExtractionError):
            await extractor.extract_profile("mumble", "en")


# ---------------------------------------------------------------------------
# reply
# ---------------------------------------------------------------------------


class TestReply:
    async def test_history_becomes_chat_turns(self, extractor, mock_llm):
        history = [
            ConversationMessage(type="assistant", text="Hello!"),
            ConversationMessage(type="user", text="I weave."),
            ConversationMessage(type="assistant", text="Lovely!"),
        ]

        reply = await extractor.reply("Silk mostly", "artisan_onboarding", history, "ta")

        assert reply == "That's wonderful! How long have you been weaving?"
        messages = mock_llm.chat.await_args.args[0]
        assert [m["role"] for m in messages] == ["assistant", "user", "assistant", "user"]
        assert messages[-1]["content"] == "Silk mostly"
        system = mock_llm.chat.await_args.kwargs["system"]
        assert "Tamil" in system
        assert "create their profile" in system

    async def test_failure_raises(self, extractor, mock_llm):
        mock_llm.chat.side_effect = ConnectionError("down")
        with pytest.raises(ExtractionError):
            await extractor.reply("hi", "general", [], "en")


# ---------------------------------------------------------------------------
# describe_craft / suggest_captions
# ---------------------------------------------------------------------------


class TestCraftListing:
    async def test_describe_craft(self, extractor, mock_llm):
        mock_llm.generate.return_value = json.dumps(
            {
                "description": "A hand-painted blue pottery bowl.",
                "myth": "The glaze was a gift from the river.",
                "story": "Priya paints at dawn.",
                "culturalContext": "Blue pottery came to Jaipur from Persia.",
                "suggestedTags": ["Blue Pottery", "jaipur", "blue pottery", ""],
            }
        )

        result = await extractor.describe_craft(
            {"title": "Blue bowl", "materials": ["quartz"], "cultural_context": None}, "hi"
        )

        assert result.description == "A hand-painted blue pottery bowl."
        assert result.cultural_context == "Blue pottery came to Jaipur from Persia."
        assert result.suggested_tags == ["blue pottery", "jaipur"]
        prompt = mock_llm.generate.await_args.args[0]
        assert "Hindi" in prompt
        assert '"materials": ["quartz"]' in prompt
        assert "cultural_context" not in prompt

    async def test_describe_craft_without_description_raises(self, extractor, mock_llm):
        mock_llm.generate.return_value = '{"myth": "only a myth"}'
        with pytest.raises(ExtractionError):
            await extractor.describe_craft({"title": "Bowl"}, "en")

    async def test_suggest_captions(self, extractor, mock_llm):
        mock_llm.generate.return_value = (
            "Here you go:\n"
            '{"captions": ["Dawn in Jaipur.", " ", "Made by hand."], '
            '"hashtags": ["#bluePottery", "handmade", "#Handmade", "#"], '
            '"postingTime": "7-9 PM IST"}'
        )

        result = await extractor.suggest_captions("A blue bowl", "en", tone="educational")

        assert result.captions == ["Dawn in Jaipur.", "Made by hand."]
        assert result.hashtags == ["#BluePottery", "#Handmade"]
        assert result.posting_time == "7-9 PM IST"
        assert "Tone: educational" in mock_llm.generate.await_args.args[0]

    async def test_suggest_captions_without_captions_raises(self, extractor, mock_llm):
        mock_llm.generate.return_value = '{"captions": [], "hashtags": ["#Craft"]}'
        with pytest.raises(ExtractionError):
            await extractor.suggest_captions("A blue bowl", "en")
