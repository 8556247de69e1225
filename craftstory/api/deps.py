"""FastAPI dependencies resolving the services stored on ``app.state``."""

from fastapi import Request

from craftstory.services.assistant import ConversationRegistry
from craftstory.services.extraction.base import BaseExtractor
from craftstory.services.onboarding.registry import FlowRegistry
from craftstory.services.storage.profile_store import BaseProfileStore
from craftstory.services.synthesis.base import BaseTTS
from craftstory.services.transcription.base import BaseSTT


def get_flows(request: Request) -> FlowRegistry:
    return request.app.state.flows


def get_conversations(request: Request) -> ConversationRegistry:
    return request.app.state.conversations


def get_stt(request: Request) -> BaseSTT:
    return request.app.state.stt


def get_tts(request: Request) -> BaseTTS | None:
    return request.app.state.tts


def get_extractor(request: Request) -> BaseExtractor:
    return request.app.state.extractor


def get_profile_store(request: Request) -> BaseProfileStore:
    return request.app.state.profile_store
