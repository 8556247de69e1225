"""Integration test fixtures for CraftStory.

Provides an async HTTP client against an app whose speech adapters and LLM
are mocked, while extraction, flows, conversations and profile storage
run for real on an in-memory SQLite database.
"""

import base64

import pytest
from httpx import ASGITransport, AsyncClient

from craftstory.api.app import create_app
from craftstory.services.assistant import ConversationRegistry
from craftstory.services.extraction import ProfileExtractor
from craftstory.services.onboarding import FlowRegistry
from craftstory.services.storage import SQLProfileStore, database


@pytest.fixture
def app(mock_llm, mock_stt, mock_tts):
    """Create an application wired to mocked speech and LLM providers."""
    application = create_app()
    extractor = ProfileExtractor(mock_llm)
    store = SQLProfileStore()

    application.state.stt = mock_stt
    application.state.tts = mock_tts
    application.state.extractor = extractor
    application.state.profile_store = store
    application.state.flows = FlowRegistry(
        stt=mock_stt, extractor=extractor, store=store, tts=mock_tts
    )
    application.state.conversations = ConversationRegistry(
        extractor=extractor, stt=mock_stt, tts=mock_tts
    )
    return application


@pytest.fixture
async def async_client(app, db_engine):
    """AsyncClient backed by the in-memory test engine.

    Injects the test engine into the database module so that all routes
    use the same in-memory SQLite with tables already created.
    """
    database._engine = db_engine
    database._session_factory = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    database.reset_engine()


@pytest.fixture
def audio_data_uri(sample_audio):
    """The sample recording encoded the way the browser uploads it."""
    encoded = base64.b64encode(sample_audio.data).decode("ascii")
    return f"data:audio/webm;codecs=opus;base64,{encoded}"
