"""
Abstract base class for Text-to-Speech providers.

Question prompts and assistant replies are spoken back to the artisan;
the flow treats every synthesis failure as "no audio" and carries on.
"""

from abc import ABC, abstractmethod

from craftstory.services.audio.capture import AudioPayload


class BaseTTS(ABC):
    """Interface that every TTS provider must implement."""

    @abstractmethod
    async def synthesize(self, text: str, language: str, **kwargs) -> AudioPayload:
        """Render *text* as speech.

        Args:
            text: Text to speak.
            language: BCP-47 voice language ("hi-IN") or short code.
            **kwargs: Provider-specific options.

        Returns:
            Encoded audio payload.

        Raises:
            SynthesisError: If the text is empty or the provider fails.
        """
