"""Standalone speech endpoints: transcribe a recording, synthesize text."""

from fastapi import APIRouter, Depends

from craftstory.api.deps import get_stt, get_tts
from craftstory.core.exceptions import SynthesisError
from craftstory.core.languages import require_language
from craftstory.core.models import (
    SynthesizeRequest,
    SynthesizeResponse,
    TranscribeRequest,
    TranscribeResponse,
)
from craftstory.services.audio.capture import AudioPayload
from craftstory.services.synthesis.base import BaseTTS
from craftstory.services.transcription.base import BaseSTT

router = APIRouter(prefix="/speech", tags=["speech"])


@router.post("/transcribe", response_model=TranscribeResponse)
async def transcribe(body: TranscribeRequest, stt: BaseSTT = Depends(get_stt)):
    """Transcribe a recording; an empty transcript is returned as-is."""
    config = require_language(body.language)
    audio = AudioPayload.from_data_uri(body.audio_data)
    transcript = await stt.transcribe(audio, config.speech_code)
    return TranscribeResponse(transcript=transcript.strip())


@router.post("/synthesize", response_model=SynthesizeResponse)
async def synthesize(body: SynthesizeRequest, tts: BaseTTS | None = Depends(get_tts)):
    """Synthesize speech and return it as a data URI."""
    config = require_language(body.language)
    if tts is None:
        raise SynthesisError("Speech synthesis is disabled")
    audio = await tts.synthesize(body.text, config.tts_code)
    return SynthesizeResponse(audio_data=audio.to_data_uri())
