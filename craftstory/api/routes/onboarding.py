"""
Onboarding REST endpoints.

Flows live in the ``FlowRegistry`` on ``app.state``; every turn is handled
by the flow itself, so these handlers only translate between HTTP and
``OnboardingFlow``.
"""

from fastapi import APIRouter, Depends, Request, Response, status

from craftstory.api.deps import get_extractor, get_flows, get_profile_store, get_stt
from craftstory.core.models import (
    AudioAnswerRequest,
    FlowCreate,
    FlowResponse,
    QuickOnboardRequest,
    QuickOnboardResponse,
    RecordingStartRequest,
    RecordingStatusResponse,
    TranscriptAnswerRequest,
    TurnResponse,
)
from craftstory.services.audio.capture import AudioPayload
from craftstory.services.extraction.base import BaseExtractor
from craftstory.services.onboarding import FlowRegistry, OnboardingFlow, TurnResult, quick_onboard
from craftstory.services.storage.profile_store import BaseProfileStore
from craftstory.services.transcription.base import BaseSTT

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


def _flow_response(flow: OnboardingFlow) -> FlowResponse:
    return FlowResponse(
        flow_id=flow.id,
        profile_id=flow.profile_id,
        language=flow.language,
        stage=flow.stage,
        current_question=flow.current_question,
        current_question_index=flow.current_index,
        questions=flow.questions,
        profile=flow.profile,
        recording_active=flow.capture.is_active,
    )


def _turn_response(flow: OnboardingFlow, result: TurnResult) -> TurnResponse:
    return TurnResponse(
        flow_id=flow.id,
        stage=result.stage,
        transcript=result.transcript,
        question=result.question,
        follow_up=result.follow_up,
        profile_update=result.profile_update,
        profile=flow.profile,
        question_audio=result.question_audio.to_data_uri() if result.question_audio else None,
        discarded=result.discarded,
    )


def _recording_status(flow: OnboardingFlow) -> RecordingStatusResponse:
    return RecordingStatusResponse(
        flow_id=flow.id,
        active=flow.capture.is_active,
        buffered_bytes=flow.capture.buffered_bytes,
    )


@router.post("/flows", response_model=FlowResponse, status_code=status.HTTP_201_CREATED)
async def create_flow(body: FlowCreate, flows: FlowRegistry = Depends(get_flows)):
    """Start a new onboarding flow in the intro stage."""
    flow = flows.create(body.profile_id, body.language)
    return _flow_response(flow)


@router.get("/flows/{flow_id}", response_model=FlowResponse)
async def get_flow(flow_id: str, flows: FlowRegistry = Depends(get_flows)):
    """Return the current state of a flow."""
    return _flow_response(flows.get(flow_id))


@router.delete("/flows/{flow_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_flow(flow_id: str, flows: FlowRegistry = Depends(get_flows)):
    """Abandon a flow; an answer still being processed is discarded."""
    flows.discard(flow_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/flows/{flow_id}/answer", response_model=TurnResponse)
async def submit_audio_answer(
    flow_id: str,
    body: AudioAnswerRequest,
    flows: FlowRegistry = Depends(get_flows),
):
    """Submit a whole recorded answer as a data URI."""
    flow = flows.get(flow_id)
    audio = AudioPayload.from_data_uri(body.audio_data)
    result = await flow.submit_audio(audio)
    return _turn_response(flow, result)


@router.post("/flows/{flow_id}/transcript", response_model=TurnResponse)
async def submit_transcript_answer(
    flow_id: str,
    body: TranscriptAnswerRequest,
    flows: FlowRegistry = Depends(get_flows),
):
    """Submit a typed answer (manual mode)."""
    flow = flows.get(flow_id)
    result = await flow.submit_transcript(body.text)
    return _turn_response(flow, result)


@router.post("/flows/{flow_id}/recording/start", response_model=RecordingStatusResponse)
async def start_recording(
    flow_id: str,
    body: RecordingStartRequest | None = None,
    flows: FlowRegistry = Depends(get_flows),
):
    """Open the flow's recording slot for streamed chunks."""
    flow = flows.get(flow_id)
    flow.start_recording(body.mime_type if body else "audio/webm")
    return _recording_status(flow)


@router.post("/flows/{flow_id}/recording/chunk", response_model=RecordingStatusResponse)
async def add_recording_chunk(
    flow_id: str,
    request: Request,
    flows: FlowRegistry = Depends(get_flows),
):
    """Append a raw encoded audio chunk (request body bytes)."""
    flow = flows.get(flow_id)
    flow.capture.add_chunk(await request.body())
    return _recording_status(flow)


@router.post("/flows/{flow_id}/recording/stop", response_model=TurnResponse)
async def stop_recording(flow_id: str, flows: FlowRegistry = Depends(get_flows)):
    """Stop the recording and submit it as the next answer."""
    flow = flows.get(flow_id)
    result = await flow.finish_recording()
    return _turn_response(flow, result)


@router.delete("/flows/{flow_id}/recording", response_model=RecordingStatusResponse)
async def abort_recording(flow_id: str, flows: FlowRegistry = Depends(get_flows)):
    """Discard the active recording without submitting it."""
    flow = flows.get(flow_id)
    flow.capture.abort()
    return _recording_status(flow)


@router.post("/quick", response_model=QuickOnboardResponse)
async def quick_onboarding(
    body: QuickOnboardRequest,
    stt: BaseSTT = Depends(get_stt),
    extractor: BaseExtractor = Depends(get_extractor),
    store: BaseProfileStore = Depends(get_profile_store),
):
    """Onboard from a single introduction recording."""
    audio = AudioPayload.from_data_uri(body.audio_data)
    transcript, profile = await quick_onboard(
        body.profile_id, audio, body.language, stt=stt, extractor=extractor, store=store
    )
    return QuickOnboardResponse(transcript=transcript, profile=profile)
