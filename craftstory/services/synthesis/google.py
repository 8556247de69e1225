"""Google Cloud Text-to-Speech provider.

Uses ``TextToSpeechAsyncClient`` from google-cloud-texttospeech. The client
is created on first use so that importing this module never requires
credentials.
"""

import logging

from google.api_core.exceptions import GoogleAPIError
from google.cloud import texttospeech

from craftstory.core.config import get_settings
from craftstory.core.exceptions import SynthesisError
from craftstory.core.languages import get_language_config
from craftstory.services.audio.capture import AudioPayload
from craftstory.services.synthesis.base import BaseTTS

logger = logging.getLogger(__name__)

_MIME_TYPES = {
    "MP3": "audio/mpeg",
    "OGG_OPUS": "audio/ogg",
    "LINEAR16": "audio/wav",
}


class GoogleTTS(BaseTTS):
    """Text-to-speech via Google Cloud.

    Args:
        voice_gender: SSML voice gender name (NEUTRAL, FEMALE, MALE).
        audio_encoding: Output encoding name (MP3, OGG_OPUS, LINEAR16).
    """

    def __init__(
        self,
        voice_gender: str | None = None,
        audio_encoding: str | None = None,
    ) -> None:
        settings = get_settings()
        self._voice_gender = (voice_gender or settings.google_tts_voice_gender).upper()
        self._audio_encoding = (audio_encoding or settings.google_tts_audio_encoding).upper()
        self._client: texttospeech.TextToSpeechAsyncClient | None = None

    def _get_client(self) -> texttospeech.TextToSpeechAsyncClient:
        if self._client is None:
            self._client = texttospeech.TextToSpeechAsyncClient()
        return self._client

    @staticmethod
    def _voice_language(language: str) -> str:
        """Resolve "hi" to its TTS code "hi-IN"; BCP-47 tags pass through."""
        config = get_language_config(language)
        return config.tts_code if config else language

    async def synthesize(self, text: str, language: str, **kwargs) -> AudioPayload:
        """Synthesize *text* and return the encoded audio."""
        if not text or not text.strip():
            raise SynthesisError("Cannot synthesize empty text")

        encoding = self._audio_encoding if self._audio_encoding in _MIME_TYPES else "MP3"
        try:
            response = await self._get_client().synthesize_speech(
                input=texttospeech.SynthesisInput(text=text),
                voice=texttospeech.VoiceSelectionParams(
                    language_code=self._voice_language(language),
                    ssml_gender=texttospeech.SsmlVoiceGender[self._voice_gender],
                ),
                audio_config=texttospeech.AudioConfig(
                    audio_encoding=texttospeech.AudioEncoding[encoding],
                    speaking_rate=kwargs.get("speaking_rate", 1.0),
                ),
            )
        except GoogleAPIError as exc:
            logger.warning("Google TTS API error: %s", exc)
            raise SynthesisError(f"Google TTS failed: {exc}") from exc
        except Exception as exc:
            logger.error("Unexpected Google TTS error: %s", exc)
            raise SynthesisError(f"Google TTS failed: {exc}") from exc

        audio_content = getattr(response, "audio_content", None) or b""
        if not audio_content:
            raise SynthesisError("No audio content received")
        return AudioPayload(data=audio_content, mime_type=_MIME_TYPES[encoding])
