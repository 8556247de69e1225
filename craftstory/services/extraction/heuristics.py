"""
Deterministic fallbacks used whenever the generative model is unreachable
or returns something unusable.

Nothing in this module raises; every function returns a usable value for
any input.
"""

import re
from typing import Any

from craftstory.core.models import CaptionSuggestions, CraftDescription, OnboardingQuestion

_NAME_PATTERN = re.compile(r"(?:my name is|i am|i'm)\s+([a-zA-Z\s]+)", re.IGNORECASE)
_HASHTAG_WORD = re.compile(r"[^\W_]+")
_YEARS_PATTERN = re.compile(r"(\d+)\s*(?:years?|yrs?)", re.IGNORECASE)

# (target_field, English prompt, Hindi prompt)
_DEFAULT_QUESTIONS: tuple[tuple[str, str, str], ...] = (
    ("name", "What is your name?", "आपका नाम क्या है?"),
    (
        "craft_type",
        "What type of craft do you practice?",
        "आप किस प्रकार का शिल्प करते हैं?",
    ),
    (
        "experience_years",
        "How many years of experience do you have?",
        "आपके पास कितने साल का अनुभव है?",
    ),
    (
        "cultural_background",
        "Tell us about your cultural background and heritage.",
        "अपनी सांस्कृतिक पृष्ठभूमि और विरासत के बारे में बताएं।",
    ),
)

BIO_TEMPLATE = (
    "{name} is a skilled artisan specializing in {craft_type} with {experience} "
    "years of experience. They are passionate about preserving traditional craft "
    "techniques and sharing their cultural heritage through their beautiful "
    "handmade creations."
)

_ONBOARDING_REPLIES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("name", "i am", "i'm"), "Nice to meet you! What type of craft do you practice?"),
    (
        ("pottery", "ceramic"),
        "Pottery is such a beautiful art form! How long have you been working with clay?",
    ),
    (
        ("weav", "textile"),
        "Textile weaving is amazing! What materials do you like to work with?",
    ),
    (
        ("carv", "wood"),
        "Wood carving requires such skill! What inspired you to start carving?",
    ),
    (
        ("year", "experience"),
        "That's wonderful experience! What do you love most about your craft?",
    ),
)
_ONBOARDING_DEFAULT_REPLY = (
    "That sounds fascinating! Could you tell me more about your craft background?"
)
_GENERAL_REPLY = "I understand. Please tell me more about that."

DESCRIPTION_TEMPLATE = (
    "{title} is a handmade piece of {craft_type}{made_from}{made_with}. "
    "Each piece is shaped by hand, so no two are exactly alike."
)
CONTEXT_TEMPLATE = (
    "{craft_type} is a living tradition, passed from one generation of "
    "artisans to the next."
)

_CAPTION_TEMPLATES = (
    "Every piece tells a story. {summary}",
    "Made by hand, one careful step at a time. {summary}",
    "Behind every handmade piece is an artisan keeping a tradition alive. {summary}",
)
_DEFAULT_HASHTAGS = ("#Handmade", "#TraditionalCraft", "#ArtisanMade", "#CraftStory")
_CAPTION_SUMMARY_LIMIT = 180


def default_questions(language: str = "en") -> list[OnboardingQuestion]:
    """Return the fixed four-question list: name, craft, experience, background.

    Prompts are translated to Hindi for ``hi``; every other language gets
    the English text in both prompt fields.
    """
    hindi = language.split("-")[0].lower() == "hi"
    return [
        OnboardingQuestion(
            id=field,
            prompt_text=prompt,
            prompt_translated=prompt_hi if hindi else prompt,
            target_field=field,
        )
        for field, prompt, prompt_hi in _DEFAULT_QUESTIONS
    ]


def extract_name(text: str) -> str | None:
    """Return the name following "my name is" / "I am" / "I'm", if any."""
    match = _NAME_PATTERN.search(text)
    if match is None:
        return None
    name = match.group(1).strip()
    return name or None


def extract_experience_years(text: str) -> int | None:
    """Return the integer immediately preceding "years"/"yrs", if any."""
    match = _YEARS_PATTERN.search(text)
    return int(match.group(1)) if match else None


def heuristic_extract(question: OnboardingQuestion, answer: str) -> dict[str, Any]:
    """Build a profile update for *question* from the raw *answer*.

    Name and experience answers get pattern extraction; every other field
    stores the trimmed answer.
    """
    field = question.target_field
    value: Any = answer.strip()
    if field == "name":
        value = extract_name(answer) or value
    elif field == "experience_years":
        years = extract_experience_years(answer)
        if years is not None:
            value = years
    return {field: value}


def fallback_bio(profile: dict[str, Any]) -> str:
    """Fill the bio template from whatever the draft already knows."""
    return BIO_TEMPLATE.format(
        name=profile.get("name") or "Artisan",
        craft_type=profile.get("craft_type") or "traditional crafts",
        experience=profile.get("experience_years") or "many",
    )


def fallback_reply(user_input: str, context: str = "general") -> str:
    """Keyword-driven assistant reply for when the model is unavailable."""
    if context != "artisan_onboarding":
        return _GENERAL_REPLY

    text = user_input.lower()
    for keywords, reply in _ONBOARDING_REPLIES:
        if any(keyword in text for keyword in keywords):
            return reply
    return _ONBOARDING_DEFAULT_REPLY


def to_hashtag(text: str) -> str | None:
    """Turn "blue pottery" or "#bluePottery" into "#BluePottery"."""
    words = _HASHTAG_WORD.findall(text)
    if not words:
        return None
    return "#" + "".join(word[0].upper() + word[1:] for word in words)


def _joined(items: list[str]) -> str:
    items = [item.strip() for item in items if item and item.strip()]
    if len(items) < 2:
        return "".join(items)
    return f"{', '.join(items[:-1])} and {items[-1]}"


def fallback_description(craft: dict[str, Any]) -> CraftDescription:
    """Fill the description templates from the listing's basic details."""
    title = (craft.get("title") or "").strip() or "This piece"
    craft_type = (craft.get("craft_type") or "").strip() or "traditional craft"
    materials = _joined(craft.get("materials") or [])
    techniques = _joined(craft.get("techniques") or [])

    description = DESCRIPTION_TEMPLATE.format(
        title=title,
        craft_type=craft_type.lower(),
        made_from=f", made from {materials}" if materials else "",
        made_with=f" using {techniques}" if techniques else "",
    )
    artisan = craft.get("artisan_name")
    story = f"{artisan} made this piece by hand." if artisan else ""
    context = craft.get("cultural_context") or CONTEXT_TEMPLATE.format(
        craft_type=craft_type[0].upper() + craft_type[1:]
    )

    tags = [craft_type.lower(), *(m.lower() for m in craft.get("materials") or []), "handmade"]
    return CraftDescription(
        description=description,
        story=story,
        cultural_context=context,
        suggested_tags=list(dict.fromkeys(tag.strip() for tag in tags if tag.strip())),
    )


def fallback_captions(description: str, craft_type: str | None = None) -> CaptionSuggestions:
    """Three template captions around the first sentence of *description*."""
    summary = description.strip().split(". ")[0].rstrip(".")
    if len(summary) > _CAPTION_SUMMARY_LIMIT:
        summary = summary[:_CAPTION_SUMMARY_LIMIT].rsplit(" ", 1)[0] + "..."
    elif summary:
        summary += "."

    hashtags = list(_DEFAULT_HASHTAGS)
    craft_tag = to_hashtag(craft_type or "")
    if craft_tag and craft_tag not in hashtags:
        hashtags.insert(0, craft_tag)
    return CaptionSuggestions(
        captions=[template.format(summary=summary).strip() for template in _CAPTION_TEMPLATES],
        hashtags=hashtags,
    )
