"""Shared pytest fixtures for the CraftStory test suite.

Provides mock adapters (LLM, STT, TTS, extractor, profile store), a sample
audio payload, and in-memory SQLite database fixtures.
"""

from unittest.mock import AsyncMock

import pytest

from craftstory.services.audio.capture import AudioPayload

# ---------------------------------------------------------------------------
# Provider Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm():
    """Mock LLM provider; ``generate`` returns an empty JSON object by default."""
    from craftstory.services.llm.base import BaseLLM

    llm = AsyncMock(spec=BaseLLM)
    llm.generate.return_value = "{}"
    llm.chat.return_value = "That's wonderful! How long have you been weaving?"
    return llm


@pytest.fixture
def mock_stt():
    """Mock STT provider returning a short introduction."""
    from craftstory.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = "My name is Priya, I make pottery"
    return stt


@pytest.fixture
def mock_tts():
    """Mock TTS provider returning a tiny MP3 payload."""
    from craftstory.services.synthesis.base import BaseTTS

    tts = AsyncMock(spec=BaseTTS)
    tts.synthesize.return_value = AudioPayload(data=b"ID3fake-mp3", mime_type="audio/mpeg")
    return tts


@pytest.fixture
def mock_extractor():
    """Mock structured-extraction adapter with no default behaviour."""
    from craftstory.services.extraction.base import BaseExtractor

    return AsyncMock(spec=BaseExtractor)


@pytest.fixture
def mock_store():
    """Mock profile store that accepts every write."""
    from craftstory.services.storage.profile_store import BaseProfileStore

    return AsyncMock(spec=BaseProfileStore)


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_audio():
    """A small webm-looking payload (EBML magic bytes + filler)."""
    return AudioPayload(data=b"\x1a\x45\xdf\xa3" + b"\x00" * 64, mime_type="audio/webm")


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with tables, dispose after test."""
    from sqlalchemy.ext.asyncio import create_async_engine

    from craftstory.services.storage.database import init_db

    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Yield an AsyncSession bound to the test engine; rolls back after test."""
    from sqlalchemy.ext.asyncio import async_sessionmaker

    factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def repository(db_session):
    """Return a ProfileRepository bound to the test session."""
    from craftstory.services.storage.repository import ProfileRepository

    return ProfileRepository(db_session)


@pytest.fixture
def use_test_db(db_engine):
    """Point ``get_session()`` at the in-memory engine for the test's duration."""
    from craftstory.services.storage import database

    database._engine = db_engine
    database._session_factory = None
    yield db_engine
    database.reset_engine()
