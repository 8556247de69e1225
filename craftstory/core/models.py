"""
Pydantic v2 models shared by the service and API layers.

Domain: OnboardingQuestion, ProcessedAnswer, ArtisanBio, CraftDescription,
        CaptionSuggestions, ConversationMessage
API:    Health, Languages, Flows, Turns, Profiles, Speech, Crafts, Conversations
"""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Literal
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, Field, model_validator

from craftstory.core.utils import camel_to_snake

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


class LanguageResponse(BaseModel):
    """One entry of GET /languages."""

    code: str
    name: str
    native_name: str
    speech_code: str
    tts_code: str
    region: str


# ---------------------------------------------------------------------------
# Onboarding domain
# ---------------------------------------------------------------------------


class OnboardingStage(StrEnum):
    """Stages of a guided voice onboarding flow."""

    intro = "intro"
    questions = "questions"
    complete = "complete"


class OnboardingQuestion(BaseModel):
    """A single onboarding question slot.

    Accepts the camelCase / short keys a generative model tends to emit
    (``question``, ``questionTranslated``, ``field``) as aliases.
    """

    id: str = ""
    prompt_text: str = Field(
        validation_alias=AliasChoices("prompt_text", "promptText", "question"),
    )
    prompt_translated: str = Field(
        default="",
        validation_alias=AliasChoices(
            "prompt_translated", "promptTranslated", "questionTranslated"
        ),
    )
    target_field: str = Field(
        validation_alias=AliasChoices("target_field", "targetField", "field"),
    )
    required: bool = True
    answered: bool = False
    answer_text: str | None = Field(
        default=None,
        validation_alias=AliasChoices("answer_text", "answerText", "answer"),
    )
    is_follow_up: bool = False

    @model_validator(mode="after")
    def _fill_defaults(self) -> "OnboardingQuestion":
        self.target_field = camel_to_snake(self.target_field)
        if not self.prompt_translated:
            self.prompt_translated = self.prompt_text
        if not self.id:
            self.id = self.target_field
        return self


class ProcessedAnswer(BaseModel):
    """Extraction result for one answered question."""

    next_question: OnboardingQuestion | None = None
    profile_update: dict[str, Any] = Field(default_factory=dict)


class ArtisanBio(BaseModel):
    """Structured profile extracted from a free-form introduction."""

    name: str = "Artisan"
    craft_type: str = "Traditional Craft"
    location: str = "Unknown Location"
    bio: str = "A skilled artisan preserving traditional craft techniques."
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)


class CraftDescription(BaseModel):
    """Marketplace copy for one craft piece."""

    description: str
    myth: str = ""
    story: str = ""
    cultural_context: str = ""
    suggested_tags: list[str] = Field(default_factory=list)


class CaptionSuggestions(BaseModel):
    """Social media caption options for one craft piece."""

    captions: list[str] = Field(default_factory=list)
    hashtags: list[str] = Field(default_factory=list)
    posting_time: str | None = None


class FlowCreate(BaseModel):
    """POST /onboarding/flows request body."""

    profile_id: str = Field(min_length=1)
    language: str | None = None


class FlowResponse(BaseModel):
    """Snapshot of an onboarding flow."""

    flow_id: str
    profile_id: str
    language: str
    stage: OnboardingStage
    current_question: OnboardingQuestion | None = None
    current_question_index: int = 0
    questions: list[OnboardingQuestion] = Field(default_factory=list)
    profile: dict[str, Any] = Field(default_factory=dict)
    recording_active: bool = False


class AudioAnswerRequest(BaseModel):
    """Audio submitted as a ``data:<mime>;base64,...`` URI."""

    audio_data: str = Field(min_length=1)


class RecordingStartRequest(BaseModel):
    """Optional MIME type of the chunks that will follow."""

    mime_type: str = "audio/webm"


class RecordingStatusResponse(BaseModel):
    """State of a flow's recording slot."""

    flow_id: str
    active: bool
    buffered_bytes: int = 0


class TranscriptAnswerRequest(BaseModel):
    """Typed answer, used by the manual (keyboard) fallback mode."""

    text: str


class TurnResponse(BaseModel):
    """Outcome of one recorded answer."""

    flow_id: str
    stage: OnboardingStage
    transcript: str
    question: OnboardingQuestion | None = None
    follow_up: bool = False
    profile_update: dict[str, Any] = Field(default_factory=dict)
    profile: dict[str, Any] = Field(default_factory=dict)
    question_audio: str | None = None
    discarded: bool = False


class QuickOnboardRequest(BaseModel):
    """POST /onboarding/quick: one recording, one extracted profile."""

    profile_id: str = Field(min_length=1)
    audio_data: str = Field(min_length=1)
    language: str = "en"


class QuickOnboardResponse(BaseModel):
    """Profile extracted from a single introduction recording."""

    success: bool = True
    transcript: str
    profile: dict[str, Any]


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


class ProfileResponse(BaseModel):
    """Stored artisan profile document."""

    id: str
    data: dict[str, Any] = Field(default_factory=dict)
    is_onboarded: bool = False
    created_at: datetime
    updated_at: datetime


class DeleteProfileResponse(BaseModel):
    """DELETE /profiles/{id} response."""

    id: str
    deleted: bool = True


# ---------------------------------------------------------------------------
# Speech
# ---------------------------------------------------------------------------


class TranscribeRequest(BaseModel):
    """POST /speech/transcribe request body."""

    audio_data: str = Field(min_length=1)
    language: str = "en"


class TranscribeResponse(BaseModel):
    """Plain transcript for a recording."""

    transcript: str


class SynthesizeRequest(BaseModel):
    """POST /speech/synthesize request body."""

    text: str = Field(min_length=1)
    language: str = "en"


class SynthesizeResponse(BaseModel):
    """Synthesized audio as a data URI."""

    audio_data: str


# ---------------------------------------------------------------------------
# Craft listings
# ---------------------------------------------------------------------------


class CraftDescribeRequest(BaseModel):
    """POST /crafts/describe request body."""

    title: str = Field(min_length=1)
    craft_type: str | None = None
    materials: list[str] = Field(default_factory=list)
    techniques: list[str] = Field(default_factory=list)
    cultural_context: str | None = None
    artisan_name: str | None = None
    language: str = "en"


class CraftDescribeResponse(CraftDescription):
    """Generated copy; ``generated`` is False when the template was used."""

    generated: bool = True


class CaptionRequest(BaseModel):
    """POST /crafts/captions request body."""

    description: str = Field(min_length=1)
    tone: Literal["storytelling", "educational", "inspirational"] = "storytelling"
    craft_type: str | None = None
    language: str = "en"


class CaptionResponse(CaptionSuggestions):
    generated: bool = True


# ---------------------------------------------------------------------------
# Assistant conversations
# ---------------------------------------------------------------------------


class ConversationMessage(BaseModel):
    """One entry in an assistant conversation (append-only)."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    type: Literal["user", "assistant"]
    text: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    audio_url: str | None = None


class ConversationCreate(BaseModel):
    """POST /conversations request body."""

    language: str = "en"
    context: str = "general"


class ConversationResponse(BaseModel):
    """Current state of an assistant conversation."""

    id: str
    language: str
    context: str
    messages: list[ConversationMessage] = Field(default_factory=list)


class MessageRequest(BaseModel):
    """User turn: either typed text or a recorded audio data URI."""

    text: str | None = None
    audio_data: str | None = None

    @model_validator(mode="after")
    def _one_input(self) -> "MessageRequest":
        if bool(self.text) == bool(self.audio_data):
            raise ValueError("Provide exactly one of 'text' or 'audio_data'")
        return self


class LanguageChangeRequest(BaseModel):
    """PUT /conversations/{id}/language request body."""

    language: str
