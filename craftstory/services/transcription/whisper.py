"""Whisper STT implementation using faster-whisper.

Decodes browser recordings (webm/opus, wav, mp3) straight from memory.
The WhisperModel is loaded lazily and cached at module level to avoid
repeated initialization overhead.
"""

import asyncio
import io
import logging

from faster_whisper import WhisperModel

from craftstory.core.config import get_settings
from craftstory.core.exceptions import TranscriptionError
from craftstory.services.audio.capture import AudioPayload
from craftstory.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)

_model_cache: WhisperModel | None = None


def _whisper_language(language: str) -> str | None:
    """Map "hi-IN" / "hi" to the ISO 639-1 code Whisper expects."""
    primary = language.split("-")[0].strip().lower()
    return primary or None


class WhisperSTT(BaseSTT):
    """Speech-to-text provider using faster-whisper (CTranslate2).

    Args:
        model_size: Whisper model size (tiny, base, small, medium, large-v3).
        device: Computation device ("cpu" or "cuda").
        compute_type: CTranslate2 compute type ("int8", "float16", etc.).
        settings: Optional Settings instance (defaults to get_settings()).
    """

    def __init__(
        self,
        model_size: str | None = None,
        device: str | None = None,
        compute_type: str | None = None,
        settings=None,
    ) -> None:
        self._settings = settings or get_settings()
        self._model_size = model_size or self._settings.whisper_model
        self._device = device or self._settings.whisper_device
        self._compute_type = compute_type or self._settings.whisper_compute_type

    def _get_model(self) -> WhisperModel:
        """Return the cached WhisperModel, loading it on first use."""
        global _model_cache  # noqa: PLW0603
        if _model_cache is None:
            logger.info(
                "Loading Whisper model: %s (device=%s, compute=%s)",
                self._model_size,
                self._device,
                self._compute_type,
            )
            _model_cache = WhisperModel(
                self._model_size,
                device=self._device,
                compute_type=self._compute_type,
            )
        return _model_cache

    def _run_transcription(
        self,
        audio: bytes,
        language: str | None = None,
        beam_size: int = 5,
        vad_filter: bool = True,
    ) -> list:
        """Run synchronous transcription (CPU-bound).

        Must be called via asyncio.to_thread(). The segment iterator is
        materialized into a list inside this function to avoid CTranslate2
        thread-safety issues.
        """
        model = self._get_model()
        segments_iter, _info = model.transcribe(
            io.BytesIO(audio),
            language=language,
            beam_size=beam_size,
            vad_filter=vad_filter,
        )
        # Materialize the generator in the same thread to avoid
        # CTranslate2 cross-thread issues.
        return list(segments_iter)

    async def transcribe(self, audio: AudioPayload, language: str, **kwargs) -> str:
        """Transcribe an encoded recording.

        Args:
            audio: Encoded recording from the browser.
            language: Short code or BCP-47 speech code.
            **kwargs: Optional keys: beam_size, vad_filter.

        Returns:
            Space-joined segment text (empty if nothing was recognized).
        """
        try:
            segments = await asyncio.to_thread(
                self._run_transcription,
                audio.data,
                language=_whisper_language(language),
                beam_size=kwargs.get("beam_size", 5),
                vad_filter=kwargs.get("vad_filter", True),
            )
        except Exception as exc:
            raise TranscriptionError(detail=f"Whisper transcription failed: {exc}") from exc

        text = " ".join(seg.text.strip() for seg in segments if seg.text.strip())
        logger.debug("Transcribed %d bytes (%s) -> %d chars", audio.size, audio.mime_type, len(text))
        return text
