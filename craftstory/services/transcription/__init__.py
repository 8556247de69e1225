"""Speech-to-text providers behind the ``BaseSTT`` interface."""

from craftstory.core.config import Settings, get_settings

from .base import BaseSTT

__all__ = ["BaseSTT", "create_stt"]


def create_stt(settings: Settings | None = None) -> BaseSTT:
    """Build the transcriber named by ``settings.stt_provider``.

    "whisper" and "local" both mean the in-process faster-whisper model.
    """
    settings = settings or get_settings()
    provider = settings.stt_provider.lower()
    if provider in ("whisper", "local"):
        from .whisper import WhisperSTT

        return WhisperSTT(settings=settings)
    raise ValueError(f"Unknown STT provider: {settings.stt_provider!r}")
