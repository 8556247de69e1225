"""Single-recording onboarding.

The artisan introduces themselves once; name, craft, location and bio are
extracted from that one transcript and the profile is stored as onboarded.
"""

import logging
from typing import Any

from craftstory.core.exceptions import NoSpeechDetectedError
from craftstory.core.languages import require_language
from craftstory.services.audio.capture import AudioPayload
from craftstory.services.extraction import heuristics
from craftstory.services.extraction.base import BaseExtractor
from craftstory.services.storage.profile_store import BaseProfileStore
from craftstory.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


def _heuristic_profile(transcript: str) -> dict[str, Any]:
    profile: dict[str, Any] = {"name": heuristics.extract_name(transcript) or "Artisan"}
    years = heuristics.extract_experience_years(transcript)
    if years is not None:
        profile["experience_years"] = years
    profile["bio"] = heuristics.fallback_bio(profile)
    return profile


async def quick_onboard(
    profile_id: str,
    audio: AudioPayload,
    language: str,
    stt: BaseSTT,
    extractor: BaseExtractor,
    store: BaseProfileStore,
) -> tuple[str, dict[str, Any]]:
    """Transcribe one introduction and store the extracted profile.

    Returns:
        ``(transcript, profile)``; the profile is returned even when the
        store write failed.

    Raises:
        UnsupportedLanguageError: If *language* is not supported.
        NoSpeechDetectedError: If transcription fails or yields no text.
    """
    config = require_language(language)
    try:
        transcript = (await stt.transcribe(audio, config.speech_code)).strip()
    except Exception as exc:
        logger.warning("Quick onboarding transcription failed: %s", exc)
        raise NoSpeechDetectedError(
            detail="Could not understand the recording. Please try again."
        ) from exc
    if not transcript:
        raise NoSpeechDetectedError()

    try:
        extracted = await extractor.extract_profile(transcript, config.code)
        profile: dict[str, Any] = extracted.model_dump()
    except Exception as exc:
        logger.warning("Profile extraction failed, using heuristics: %s", exc)
        profile = _heuristic_profile(transcript)

    profile.update(
        {
            "language": config.code,
            "languages": [config.code],
            "is_onboarded": True,
        }
    )

    try:
        await store.upsert(profile_id, profile)
    except Exception as exc:
        logger.warning("Profile write failed for %s (non-fatal): %s", profile_id, exc)

    return transcript, profile
