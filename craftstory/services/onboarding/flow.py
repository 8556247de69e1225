"""Guided voice onboarding state machine.

One ``OnboardingFlow`` drives a single artisan through
``intro -> questions -> complete``:

- intro: the first non-empty transcript is turned into a question list by
  the extractor, or the fixed four-question list when that fails.
- questions: each answer yields a profile update from the extractor, or
  from the heuristics when the extractor fails or returns nothing. A
  clarifying follow-up may be inserted right after the answered question.
- complete: reached once every question is answered; a bio is generated
  (template fallback) and the final profile is written.

Collaborator failures never escape a turn except for transcription: a
failed or blank transcript raises ``NoSpeechDetectedError`` and leaves the
flow exactly where it was. Persistence and speech synthesis are
best-effort.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from craftstory.core.exceptions import FlowCompletedError, NoSpeechDetectedError
from craftstory.core.languages import get_language_config
from craftstory.core.models import OnboardingQuestion, OnboardingStage
from craftstory.services.audio.capture import AudioCapture, AudioPayload
from craftstory.services.extraction import heuristics
from craftstory.services.extraction.base import BaseExtractor
from craftstory.services.storage.profile_store import BaseProfileStore
from craftstory.services.synthesis.base import BaseTTS
from craftstory.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


@dataclass
class TurnResult:
    """Outcome of one submitted answer.

    ``question`` is the question now awaiting an answer (None once complete).
    ``discarded`` is set when the flow was abandoned while the turn was in
    flight; nothing was applied in that case.
    """

    stage: OnboardingStage
    transcript: str
    question: OnboardingQuestion | None = None
    follow_up: bool = False
    profile_update: dict[str, Any] = field(default_factory=dict)
    question_audio: AudioPayload | None = None
    discarded: bool = False


class OnboardingFlow:
    """Single-writer state for one onboarding session.

    Args:
        profile_id: Profile document the answers are written to.
        language: Short language code ("en", "hi", ...).
        stt: Transcription adapter.
        extractor: Structured-extraction adapter.
        store: Profile store adapter.
        tts: Optional speech synthesizer for question prompts.
    """

    def __init__(
        self,
        profile_id: str,
        language: str,
        stt: BaseSTT,
        extractor: BaseExtractor,
        store: BaseProfileStore,
        tts: BaseTTS | None = None,
        flow_id: str | None = None,
    ) -> None:
        self.id = flow_id or uuid4().hex
        self.profile_id = profile_id
        self.language = language
        self.stage = OnboardingStage.intro
        self.questions: list[OnboardingQuestion] = []
        self.current_index = 0
        self.profile: dict[str, Any] = {}
        self.capture = AudioCapture()

        self._stt = stt
        self._extractor = extractor
        self._store = store
        self._tts = tts
        self._lock = asyncio.Lock()
        self._abandoned = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_complete(self) -> bool:
        return self.stage == OnboardingStage.complete

    @property
    def is_abandoned(self) -> bool:
        return self._abandoned

    @property
    def current_question(self) -> OnboardingQuestion | None:
        if self.stage != OnboardingStage.questions:
            return None
        return self.questions[self.current_index]

    def abandon(self) -> None:
        """Stop the flow; any in-flight turn result is discarded."""
        self._abandoned = True
        self.capture.abort()
        logger.info("Onboarding flow %s abandoned at stage %s", self.id, self.stage)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def start_recording(self, mime_type: str = "audio/webm") -> None:
        """Open the flow's single recording slot."""
        self._ensure_open()
        self.capture.start(mime_type)

    async def finish_recording(self) -> TurnResult:
        """Stop the active recording and submit it as the next answer."""
        self._ensure_open()
        audio = self.capture.stop()
        return await self.submit_audio(audio)

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    async def submit_audio(self, audio: AudioPayload) -> TurnResult:
        """Transcribe *audio* and apply it as the next answer.

        Raises:
            FlowCompletedError: If the flow already completed.
            NoSpeechDetectedError: If transcription fails or yields no text.
        """
        async with self._lock:
            self._ensure_open()
            config = get_language_config(self.language)
            speech_code = config.speech_code if config else self.language
            try:
                transcript = await self._stt.transcribe(audio, speech_code)
            except Exception as exc:
                logger.warning("Transcription failed for flow %s: %s", self.id, exc)
                raise NoSpeechDetectedError(
                    detail="Could not understand the recording. Please try again."
                ) from exc
            if self._abandoned:
                return TurnResult(stage=self.stage, transcript=transcript or "", discarded=True)
            return await self._apply(transcript)

    async def submit_transcript(self, text: str) -> TurnResult:
        """Apply an already transcribed (or typed) answer.

        Raises:
            FlowCompletedError: If the flow already completed.
            NoSpeechDetectedError: If *text* is blank.
        """
        async with self._lock:
            self._ensure_open()
            return await self._apply(text)

    def _ensure_open(self) -> None:
        if self.is_complete:
            raise FlowCompletedError(self.id)

    async def _apply(self, transcript: str | None) -> TurnResult:
        transcript = (transcript or "").strip()
        if not transcript:
            raise NoSpeechDetectedError()
        if self._abandoned:
            return TurnResult(stage=self.stage, transcript=transcript, discarded=True)

        if self.stage == OnboardingStage.intro:
            return await self._start_questions(transcript)
        return await self._answer(transcript)

    async def _start_questions(self, transcript: str) -> TurnResult:
        try:
            questions = await self._extractor.generate_questions(transcript, self.language)
        except Exception as exc:
            logger.warning("Question generation failed, using default questions: %s", exc)
            questions = []
        if not questions:
            questions = heuristics.default_questions(self.language)

        if self._abandoned:
            return TurnResult(stage=self.stage, transcript=transcript, discarded=True)

        self.questions = questions
        self.current_index = 0
        self.stage = OnboardingStage.questions
        logger.info("Flow %s started with %d questions", self.id, len(questions))

        question = self.current_question
        return TurnResult(
            stage=self.stage,
            transcript=transcript,
            question=question,
            question_audio=await self._speak(question),
        )

    async def _answer(self, transcript: str) -> TurnResult:
        question = self.questions[self.current_index]

        next_question = None
        update: dict[str, Any] = {}
        try:
            processed = await self._extractor.process_answer(
                question, transcript, self.language, dict(self.profile)
            )
            update = processed.profile_update
            next_question = processed.next_question
        except Exception as exc:
            logger.warning("Answer extraction failed for '%s', using heuristics: %s", question.id, exc)
        if not update:
            update = heuristics.heuristic_extract(question, transcript)

        adds_follow_up = next_question is not None and not question.is_follow_up
        finishes = not adds_follow_up and all(
            q.answered for q in self.questions if q is not question
        )
        bio = ""
        if finishes and not self._abandoned:
            bio = await self._write_bio({**self.profile, **update})

        if self._abandoned:
            return TurnResult(stage=self.stage, transcript=transcript, discarded=True)

        self.profile.update(update)
        question.answered = True
        question.answer_text = transcript
        await self._persist(update)

        if adds_follow_up:
            follow_up = next_question.model_copy(
                update={
                    "id": f"{question.id}_follow_up",
                    "answered": False,
                    "answer_text": None,
                    "is_follow_up": True,
                }
            )
            self.current_index += 1
            self.questions.insert(self.current_index, follow_up)
            return TurnResult(
                stage=self.stage,
                transcript=transcript,
                question=follow_up,
                follow_up=True,
                profile_update=update,
                question_audio=await self._speak(follow_up),
            )

        if finishes:
            await self._complete(bio)
            return TurnResult(stage=self.stage, transcript=transcript, profile_update=update)

        pending = [i for i, q in enumerate(self.questions) if not q.answered]
        later = [i for i in pending if i > self.current_index]
        self.current_index = later[0] if later else pending[0]
        question = self.current_question
        return TurnResult(
            stage=self.stage,
            transcript=transcript,
            question=question,
            profile_update=update,
            question_audio=await self._speak(question),
        )

    async def _write_bio(self, profile: dict[str, Any]) -> str:
        try:
            return await self._extractor.generate_bio(profile, self.language)
        except Exception as exc:
            logger.warning("Bio generation failed, using template: %s", exc)
            return heuristics.fallback_bio(profile)

    async def _complete(self, bio: str) -> None:
        self.profile.update({"bio": bio, "language": self.language, "is_onboarded": True})
        self.stage = OnboardingStage.complete
        logger.info("Onboarding flow %s complete for profile %s", self.id, self.profile_id)

        # No retry: a failed final write leaves the profile in memory only.
        await self._persist(dict(self.profile))

    async def _persist(self, update: dict[str, Any]) -> None:
        try:
            await self._store.upsert(self.profile_id, update)
        except Exception as exc:
            logger.warning(
                "Profile write failed for %s (non-fatal): %s", self.profile_id, exc
            )

    async def _speak(self, question: OnboardingQuestion | None) -> AudioPayload | None:
        if self._tts is None or question is None:
            return None
        config = get_language_config(self.language)
        try:
            return await self._tts.synthesize(
                question.prompt_translated, config.tts_code if config else self.language
            )
        except Exception as exc:
            logger.debug("Question playback unavailable: %s", exc)
            return None
