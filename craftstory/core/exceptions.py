"""
CraftStory exception hierarchy.

All application-specific exceptions inherit from CraftStoryError,
enabling centralized error handling in the API middleware layer.
"""

from datetime import UTC, datetime


class CraftStoryError(Exception):
    """Base exception for all CraftStory errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "CRAFTSTORY_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class CaptureError(CraftStoryError):
    """Raised when recorded audio is missing, empty, or cannot be decoded."""

    def __init__(self, detail: str = "Could not capture audio. Please try recording again.") -> None:
        super().__init__(detail=detail, code="CAPTURE_ERROR", status_code=400)


class RecordingAlreadyActiveError(CraftStoryError):
    """Raised when trying to start a recording while one is already active."""

    def __init__(self) -> None:
        super().__init__(
            detail="A recording is already active",
            code="RECORDING_ALREADY_ACTIVE",
            status_code=409,
        )


class UnsupportedLanguageError(CraftStoryError):
    """Raised when a language code is not in the supported languages table."""

    def __init__(self, language: str) -> None:
        super().__init__(
            detail=f"Unsupported language: {language}",
            code="UNSUPPORTED_LANGUAGE",
            status_code=400,
        )


class TranscriptionError(CraftStoryError):
    """Raised when STT processing fails."""

    def __init__(self, detail: str = "Transcription failed") -> None:
        super().__init__(
            detail=detail,
            code="TRANSCRIPTION_ERROR",
            status_code=500,
        )


class NoSpeechDetectedError(CraftStoryError):
    """Raised when a recording yields no usable transcript."""

    def __init__(
        self,
        detail: str = "No speech detected. Please speak clearly and try again.",
    ) -> None:
        super().__init__(detail=detail, code="NO_SPEECH_DETECTED", status_code=422)


class ExtractionError(CraftStoryError):
    """Raised when the generative model fails or returns unusable output."""

    def __init__(self, detail: str = "Extraction failed") -> None:
        super().__init__(detail=detail, code="EXTRACTION_ERROR", status_code=502)


class SynthesisError(CraftStoryError):
    """Raised when text-to-speech synthesis fails."""

    def __init__(self, detail: str = "Speech synthesis failed") -> None:
        super().__init__(detail=detail, code="SYNTHESIS_ERROR", status_code=502)


class PersistenceError(CraftStoryError):
    """Raised when the profile store rejects or fails a write."""

    def __init__(self, detail: str = "Failed to save profile") -> None:
        super().__init__(detail=detail, code="PERSISTENCE_ERROR", status_code=500)


class ProfileNotFoundError(CraftStoryError):
    """Raised when an artisan profile ID does not exist."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(
            detail=f"Profile not found: {profile_id}",
            code="PROFILE_NOT_FOUND",
            status_code=404,
        )


class FlowNotFoundError(CraftStoryError):
    """Raised when an onboarding flow ID is unknown or already discarded."""

    def __init__(self, flow_id: str) -> None:
        super().__init__(
            detail=f"Onboarding flow not found: {flow_id}",
            code="FLOW_NOT_FOUND",
            status_code=404,
        )


class FlowCompletedError(CraftStoryError):
    """Raised when an answer is submitted to a flow that already completed."""

    def __init__(self, flow_id: str) -> None:
        super().__init__(
            detail=f"Onboarding flow {flow_id} is already complete; start a new flow",
            code="FLOW_COMPLETED",
            status_code=409,
        )


class ConversationNotFoundError(CraftStoryError):
    """Raised when an assistant conversation ID is unknown."""

    def __init__(self, conversation_id: str) -> None:
        super().__init__(
            detail=f"Conversation not found: {conversation_id}",
            code="CONVERSATION_NOT_FOUND",
            status_code=404,
        )
