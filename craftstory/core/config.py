"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """CraftStory application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        llm_provider: Which LLM backend to use ("claude" or "ollama").
        stt_provider: STT backend ("whisper" / "local" for faster-whisper).
        tts_provider: TTS backend ("google" or "none" to disable audio prompts).
        database_url: Async SQLAlchemy connection string for the profile store.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- LLM Provider ---
    # Drives question generation, answer extraction, bios and assistant replies
    llm_provider: str = "ollama"

    # Claude (Anthropic API) settings
    claude_api_key: str = ""  # Required when llm_provider="claude"
    claude_model: str = "claude-sonnet-4-20250514"

    # Ollama (local LLM) settings
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # --- Speech-to-text ---
    stt_provider: str = "whisper"
    whisper_model: str = "base"  # Model size: tiny, base, small, medium, large-v3
    whisper_device: str = "cpu"
    whisper_compute_type: str = "int8"

    # --- Text-to-speech ---
    tts_provider: str = "google"
    google_tts_voice_gender: str = "NEUTRAL"
    google_tts_audio_encoding: str = "MP3"  # MP3, OGG_OPUS, LINEAR16

    # --- Onboarding ---
    default_language: str = "en"

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    cors_origins: list[str] = [
        "http://localhost:3000",  # Next.js front end
    ]

    # --- Storage ---
    database_url: str = "sqlite+aiosqlite:///data/craftstory.db"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
