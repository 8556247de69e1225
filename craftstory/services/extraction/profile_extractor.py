"""
LLM-backed structured extraction for artisan onboarding.

The model is asked for bare JSON, but its output is never trusted: every
response goes through ``extract_json`` and anything that does not decode
to the expected shape raises ``ExtractionError`` so the caller can switch
to the heuristic path.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from craftstory.core.exceptions import ExtractionError
from craftstory.core.languages import get_language_config
from craftstory.core.models import (
    ArtisanBio,
    CaptionSuggestions,
    ConversationMessage,
    CraftDescription,
    OnboardingQuestion,
    ProcessedAnswer,
)
from craftstory.core.utils import ParsedJSON, extract_json, normalize_keys, strip_code_fences
from craftstory.services.extraction import heuristics
from craftstory.services.extraction.base import BaseExtractor
from craftstory.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)

QUESTIONS_PROMPT = """\
Based on this initial transcript from an artisan: "{transcript}"
Language: {language_name}

Generate 4 onboarding questions to learn about this artisan: their name, the
type of craft they practice, their years of experience and their cultural
background. Make the questions conversational and culturally appropriate.

Return ONLY a JSON array, no markdown fences or extra text. Each item:
{{"id": "...", "question": "<English text>", "questionTranslated": "<text in {language_name}>",
  "field": "<snake_case profile field, e.g. name, craft_type, experience_years, cultural_background>",
  "required": true}}"""

ANSWER_PROMPT = """\
Process this artisan's answer to extract information.

Question: "{question}"
Answer: "{answer}"
Current Profile: {profile}
Language: {language_name}

Return ONLY a JSON object, no markdown fences or extra text:
{{"profileUpdate": {{"{field}": "<extracted and cleaned value>"}}, "nextQuestion": null}}

Clean up the answer and make it more descriptive. If it is about experience,
extract the years as a number. Only when the answer is ambiguous or
incomplete, set "nextQuestion" to one short clarifying question object with
the keys "question", "questionTranslated" and "field"."""

BIO_PROMPT = """\
Generate a compelling artisan bio from this profile data:
{profile}
Language: {language_name}

Create a 2-3 sentence bio that captures their craft, experience and cultural
heritage. Make it engaging and authentic for an artisan marketplace.

Return only the bio text, no JSON wrapper or additional formatting."""

PROFILE_PROMPT = """\
Extract artisan information from this transcript: "{transcript}"

Return ONLY a JSON object with:
- name: artisan's name (use "Artisan" if it is not clear)
- craft_type: type of craft they practice (be specific)
- location: their location (city, region, country)
- bio: a brief bio paragraph (2-3 sentences) in {language_name}
- confidence: confidence score (0-1) based on clarity of information

Be culturally sensitive and preserve the artisan's voice."""

DESCRIPTION_PROMPT = """\
Write marketplace copy for this handmade craft piece.

Details: {details}
Language: {language_name}

Return ONLY a JSON object, no markdown fences or extra text:
{{"description": "<2-3 sentences about the piece>",
  "myth": "<a short legend or folk belief tied to this craft>",
  "story": "<a short personal story that could accompany the piece>",
  "culturalContext": "<1-2 sentences on the tradition behind it>",
  "suggestedTags": ["<lowercase discovery tag>", "..."]}}

Write every text value in {language_name}. Be culturally sensitive and
educational, and do not invent facts about the artisan."""

CAPTION_PROMPT = """\
Create Instagram captions for this craft post.

Craft description: "{description}"
Tone: {tone}
Language: {language_name}

Return ONLY a JSON object, no markdown fences or extra text:
{{"captions": ["<caption>", "<caption>", "<caption>"],
  "hashtags": ["#..."],
  "postingTime": "<best time of day to post>"}}

Write 3 captions in {language_name} and 10-20 hashtags mixing popular and
niche tags. Keep it authentic to the artisan's voice."""

_CONTEXT_PROMPTS = {
    "artisan_onboarding": (
        "You are a friendly AI assistant helping an artisan create their profile. "
        "You need to learn about their name, craft type, experience, and cultural "
        "background through natural conversation."
    ),
    "product_description": (
        "You are helping an artisan describe their specific craft product in detail."
    ),
}
_DEFAULT_CONTEXT_PROMPT = "You are a helpful AI assistant for artisans and craft enthusiasts."

REPLY_SYSTEM_PROMPT = """\
You are a warm, enthusiastic AI assistant having a real-time voice conversation with an artisan.

Context: {context_prompt}
Respond in {language_name}.

Guidelines:
- Keep responses short (1-2 sentences) since this is spoken aloud.
- Ask ONE specific follow-up question to keep the conversation flowing.
- If they mention their name, acknowledge it warmly.
- If they mention their craft, ask about their experience or techniques.
- Avoid repeating information they already shared.

Return only your response text, no JSON wrapper or additional formatting."""


def _language_name(language: str) -> str:
    config = get_language_config(language.split("-")[0])
    return config.name if config else "the selected language"


def _parse_object(raw: str, what: str) -> dict[str, Any]:
    result = extract_json(raw, kind="object")
    if not isinstance(result, ParsedJSON):
        raise ExtractionError(detail=f"Unparseable {what} from LLM: {result.reason}: {raw[:200]}")
    return result.data


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def _clamp_confidence(value: Any) -> float:
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return 0.8
    return min(max(confidence, 0.0), 1.0)


class ProfileExtractor(BaseExtractor):
    """Extracts onboarding data with an LLM provider.

    Args:
        llm: Any provider implementing ``BaseLLM``.
    """

    def __init__(self, llm: BaseLLM) -> None:
        self._llm = llm

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        reraise=True,
    )
    async def _call_llm(self, prompt: str, **kwargs) -> str:
        """Call LLM with retry for transient failures."""
        return await self._llm.generate(prompt, **kwargs)

    async def _ask(self, prompt: str, what: str, **kwargs) -> str:
        try:
            return await self._call_llm(prompt, **kwargs)
        except Exception as exc:
            raise ExtractionError(detail=f"LLM call failed for {what}: {exc}") from exc

    async def generate_questions(
        self, transcript: str, language: str
    ) -> list[OnboardingQuestion]:
        """Ask the model for a question list tailored to the introduction.

        Items that do not validate as questions are skipped.

        Raises:
            ExtractionError: If the call fails, no array is found, or no item
                is a usable question.
        """
        prompt = QUESTIONS_PROMPT.format(
            transcript=transcript, language_name=_language_name(language)
        )
        raw = await self._ask(prompt, "question generation", temperature=0.4)

        result = extract_json(raw, kind="array")
        if not isinstance(result, ParsedJSON):
            raise ExtractionError(
                detail=f"Unparseable question list from LLM: {result.reason}: {raw[:200]}"
            )

        questions: list[OnboardingQuestion] = []
        seen_ids: set[str] = set()
        for item in result.data:
            if not isinstance(item, dict):
                continue
            try:
                question = OnboardingQuestion.model_validate(item)
            except ValidationError as exc:
                logger.debug("Skipping malformed question %r: %s", item, exc)
                continue
            question = question.model_copy(
                update={"answered": False, "answer_text": None, "is_follow_up": False}
            )
            if question.id in seen_ids:
                question.id = f"{question.id}_{len(questions)}"
            seen_ids.add(question.id)
            questions.append(question)

        if not questions:
            raise ExtractionError(detail="LLM returned no usable onboarding questions")
        logger.info("Generated %d onboarding questions via LLM", len(questions))
        return questions

    async def process_answer(
        self,
        question: OnboardingQuestion,
        answer: str,
        language: str,
        profile: dict[str, Any],
    ) -> ProcessedAnswer:
        """Extract the profile update for one answer.

        A malformed ``nextQuestion`` is dropped rather than failing the turn;
        a follow-up without a field inherits the answered question's field.

        Raises:
            ExtractionError: If the call fails or the reply has no JSON object.
        """
        prompt = ANSWER_PROMPT.format(
            question=question.prompt_text,
            answer=answer,
            profile=json.dumps(profile, ensure_ascii=False, default=str),
            language_name=_language_name(language),
            field=question.target_field,
        )
        raw = await self._ask(prompt, f"answer to '{question.id}'", temperature=0.2)
        data = normalize_keys(_parse_object(raw, "answer"))

        update = data.get("profile_update")
        if not isinstance(update, dict):
            update = {}

        next_question = None
        candidate = data.get("next_question")
        if isinstance(candidate, dict):
            candidate = {"field": question.target_field, **candidate}
            try:
                next_question = OnboardingQuestion.model_validate(candidate)
            except ValidationError as exc:
                logger.warning("Ignoring malformed follow-up question: %s", exc)

        return ProcessedAnswer(next_question=next_question, profile_update=normalize_keys(update))

    async def generate_bio(self, profile: dict[str, Any], language: str) -> str:
        """Generate a plain-text bio.

        Raises:
            ExtractionError: If the call fails or the model returns nothing.
        """
        prompt = BIO_PROMPT.format(
            profile=json.dumps(profile, ensure_ascii=False, default=str),
            language_name=_language_name(language),
        )
        bio = strip_code_fences(await self._ask(prompt, "bio generation"))
        if not bio:
            raise ExtractionError(detail="LLM returned an empty bio")
        return bio

    async def extract_profile(self, transcript: str, language: str) -> ArtisanBio:
        """Extract a structured profile from a single free-form introduction."""
        prompt = PROFILE_PROMPT.format(
            transcript=transcript, language_name=_language_name(language)
        )
        raw = await self._ask(prompt, "profile extraction", temperature=0.2)
        data = normalize_keys(_parse_object(raw, "profile"))

        defaults = ArtisanBio()
        return ArtisanBio(
            name=str(data.get("name") or defaults.name),
            craft_type=str(data.get("craft_type") or defaults.craft_type),
            location=str(data.get("location") or defaults.location),
            bio=str(data.get("bio") or defaults.bio),
            confidence=_clamp_confidence(data.get("confidence", defaults.confidence)),
        )

    async def describe_craft(self, craft: dict[str, Any], language: str) -> CraftDescription:
        """Generate listing copy from the piece's basic details.

        Raises:
            ExtractionError: If the call fails or no description comes back.
        """
        details = {key: value for key, value in craft.items() if value}
        prompt = DESCRIPTION_PROMPT.format(
            details=json.dumps(details, ensure_ascii=False, default=str),
            language_name=_language_name(language),
        )
        raw = await self._ask(prompt, "craft description")
        data = normalize_keys(_parse_object(raw, "craft description"))

        description = str(data.get("description") or "").strip()
        if not description:
            raise ExtractionError(detail="LLM returned no craft description")
        tags = (tag.lower() for tag in _strings(data.get("suggested_tags")))
        return CraftDescription(
            description=description,
            myth=str(data.get("myth") or "").strip(),
            story=str(data.get("story") or "").strip(),
            cultural_context=str(data.get("cultural_context") or "").strip(),
            suggested_tags=list(dict.fromkeys(tags)),
        )

    async def suggest_captions(
        self, description: str, language: str, tone: str = "storytelling"
    ) -> CaptionSuggestions:
        """Generate caption options; hashtags are normalized to ``#CamelCase``.

        Raises:
            ExtractionError: If the call fails or no caption comes back.
        """
        prompt = CAPTION_PROMPT.format(
            description=description, tone=tone, language_name=_language_name(language)
        )
        raw = await self._ask(prompt, "caption suggestions")
        data = normalize_keys(_parse_object(raw, "captions"))

        captions = _strings(data.get("captions"))
        if not captions:
            raise ExtractionError(detail="LLM returned no captions")
        hashtags = (heuristics.to_hashtag(tag) for tag in _strings(data.get("hashtags")))
        posting_time = str(data.get("posting_time") or "").strip()
        return CaptionSuggestions(
            captions=captions,
            hashtags=list(dict.fromkeys(tag for tag in hashtags if tag)),
            posting_time=posting_time or None,
        )

    async def reply(
        self,
        user_input: str,
        context: str,
        history: list[ConversationMessage],
        language: str,
    ) -> str:
        """Continue an assistant conversation.

        Raises:
            ExtractionError: If the call fails or the reply is blank.
        """
        system = REPLY_SYSTEM_PROMPT.format(
            context_prompt=_CONTEXT_PROMPTS.get(context, _DEFAULT_CONTEXT_PROMPT),
            language_name=_language_name(language),
        )
        messages = [{"role": message.type, "content": message.text} for message in history]
        messages.append({"role": "user", "content": user_input})

        try:
            text = await self._llm.chat(messages, system=system)
        except Exception as exc:
            raise ExtractionError(detail=f"LLM call failed for assistant reply: {exc}") from exc

        text = strip_code_fences(text or "")
        if not text:
            raise ExtractionError(detail="LLM returned an empty reply")
        return text
