"""Multilingual voice assistant conversations.

A ``ConversationSession`` keeps an append-only list of
``ConversationMessage`` entries. Assistant replies come from the extractor
(``ExtractionError`` falls back to a keyword reply) and carry synthesized
audio when speech synthesis is available.
"""

import asyncio
import logging
from uuid import uuid4

from craftstory.core.exceptions import ConversationNotFoundError, NoSpeechDetectedError
from craftstory.core.languages import require_language
from craftstory.core.models import ConversationMessage
from craftstory.services.audio.capture import AudioPayload
from craftstory.services.extraction import heuristics
from craftstory.services.extraction.base import BaseExtractor
from craftstory.services.synthesis.base import BaseTTS
from craftstory.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)

GREETINGS = {
    "en": (
        "Hello! I'm your AI assistant. I'm here to help you with your craft story. "
        "How can I assist you today?"
    ),
    "hi": (
        "नमस्ते! मैं आपका AI सहायक हूँ। मैं आपकी शिल्प कहानी में आपकी मदद करने के लिए "
        "यहाँ हूँ। आज मैं आपकी कैसे सहायता कर सकता हूँ?"
    ),
    "ta": (
        "வணக்கம்! நான் உங்கள் AI உதவியாளர். உங்கள் கைவினைக் கதையில் உங்களுக்கு உதவ நான் "
        "இங்கே இருக்கிறேன். இன்று நான் உங்களுக்கு எப்படி உதவ முடியும்?"
    ),
    "bn": (
        "নমস্কার! আমি আপনার AI সহায়ক। আমি আপনার কারুশিল্পের গল্পে সাহায্য করতে এখানে আছি। "
        "আজ আমি আপনাকে কীভাবে সাহায্য করতে পারি?"
    ),
}


def greeting_for(language: str) -> str:
    return GREETINGS.get(language, GREETINGS["en"])


class ConversationSession:
    """One assistant conversation.

    Args:
        language: Short language code for replies and speech.
        context: "artisan_onboarding", "product_description" or "general".
        extractor: Produces assistant replies.
        stt: Transcribes spoken user turns.
        tts: Optional synthesizer for assistant audio.
    """

    def __init__(
        self,
        language: str,
        context: str,
        extractor: BaseExtractor,
        stt: BaseSTT,
        tts: BaseTTS | None = None,
        session_id: str | None = None,
    ) -> None:
        self.id = session_id or uuid4().hex
        self.language = require_language(language).code
        self.context = context
        self.messages: list[ConversationMessage] = []
        self._extractor = extractor
        self._stt = stt
        self._tts = tts
        self._lock = asyncio.Lock()

    async def greet(self) -> ConversationMessage:
        """Append the localized greeting."""
        return await self._append_assistant(greeting_for(self.language))

    async def respond(self, text: str) -> ConversationMessage:
        """Append the user's message and the assistant's reply; return the reply."""
        text = text.strip()
        if not text:
            raise NoSpeechDetectedError()

        async with self._lock:
            history = list(self.messages)
            self.messages.append(ConversationMessage(type="user", text=text))
            try:
                reply = await self._extractor.reply(text, self.context, history, self.language)
            except Exception as exc:
                logger.warning("Assistant reply failed, using fallback: %s", exc)
                reply = heuristics.fallback_reply(text, self.context)
            return await self._append_assistant(reply)

    async def respond_to_audio(self, audio: AudioPayload) -> ConversationMessage:
        """Transcribe a spoken user turn, then :meth:`respond` to it.

        Raises:
            NoSpeechDetectedError: If transcription fails or yields no text.
        """
        config = require_language(self.language)
        try:
            transcript = await self._stt.transcribe(audio, config.speech_code)
        except Exception as exc:
            logger.warning("Assistant transcription failed: %s", exc)
            raise NoSpeechDetectedError(
                detail="Could not understand the recording. Please try again."
            ) from exc
        return await self.respond(transcript or "")

    def clear(self) -> None:
        self.messages.clear()

    async def change_language(self, language: str) -> ConversationMessage:
        """Switch language and restart the conversation with a new greeting."""
        self.language = require_language(language).code
        self.clear()
        return await self.greet()

    async def _append_assistant(self, text: str) -> ConversationMessage:
        message = ConversationMessage(type="assistant", text=text, audio_url=await self._speak(text))
        self.messages.append(message)
        return message

    async def _speak(self, text: str) -> str | None:
        if self._tts is None:
            return None
        try:
            audio = await self._tts.synthesize(text, require_language(self.language).tts_code)
        except Exception as exc:
            logger.debug("Assistant audio unavailable: %s", exc)
            return None
        return audio.to_data_uri()


class ConversationRegistry:
    """Tracks live assistant conversations by ID."""

    def __init__(
        self,
        extractor: BaseExtractor,
        stt: BaseSTT,
        tts: BaseTTS | None = None,
    ) -> None:
        self._extractor = extractor
        self._stt = stt
        self._tts = tts
        self._sessions: dict[str, ConversationSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    async def create(self, language: str, context: str = "general") -> ConversationSession:
        """Start a conversation and greet the user."""
        session = ConversationSession(
            language=language,
            context=context,
            extractor=self._extractor,
            stt=self._stt,
            tts=self._tts,
        )
        await session.greet()
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> ConversationSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise ConversationNotFoundError(session_id)
        return session

    def discard(self, session_id: str) -> None:
        """End a conversation; its messages are dropped with it."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise ConversationNotFoundError(session_id)
        session.clear()
        logger.info("Conversation %s ended", session_id)
