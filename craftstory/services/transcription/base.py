"""
Abstract base class for Speech-to-Text providers.

All STT implementations must implement this interface, enabling
provider-agnostic transcription in the onboarding flow and assistant.
"""

from abc import ABC, abstractmethod

from craftstory.services.audio.capture import AudioPayload


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe(self, audio: AudioPayload, language: str, **kwargs) -> str:
        """Transcribe an encoded recording to plain text.

        Args:
            audio: Encoded recording (webm/opus, wav, mp3, ...).
            language: Language tag, either a short code ("hi") or a
                BCP-47 speech code ("hi-IN").
            **kwargs: Provider-specific options (beam_size, etc.).

        Returns:
            The transcript. May be empty when no speech was recognized;
            callers decide whether that counts as a failure.

        Raises:
            TranscriptionError: If the provider fails.
        """
