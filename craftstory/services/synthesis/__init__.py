"""Text-to-speech providers behind the ``BaseTTS`` interface."""

from craftstory.core.config import Settings, get_settings

from .base import BaseTTS

__all__ = ["BaseTTS", "create_tts"]


def create_tts(settings: Settings | None = None) -> BaseTTS | None:
    """Build the synthesizer named by ``settings.tts_provider``.

    Returns None for "none"; question prompts and assistant replies are
    then sent without audio.
    """
    settings = settings or get_settings()
    provider = settings.tts_provider.lower()
    if provider == "none":
        return None
    if provider == "google":
        from .google import GoogleTTS

        return GoogleTTS(
            voice_gender=settings.google_tts_voice_gender,
            audio_encoding=settings.google_tts_audio_encoding,
        )
    raise ValueError(f"Unknown TTS provider: {settings.tts_provider!r}")
