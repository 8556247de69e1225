"""Supported languages and their speech / synthesis codes."""

from dataclasses import dataclass

from craftstory.core.exceptions import UnsupportedLanguageError


@dataclass(frozen=True)
class LanguageConfig:
    """One supported language.

    Attributes:
        code: Short code used across the API ("en", "hi", ...).
        speech_code: BCP-47 tag handed to speech-to-text.
        tts_code: BCP-47 tag handed to text-to-speech.
    """

    code: str
    name: str
    native_name: str
    speech_code: str
    tts_code: str
    region: str


LANGUAGES: tuple[LanguageConfig, ...] = (
    LanguageConfig("en", "English", "English", "en-US", "en-US", "India"),
    LanguageConfig("hi", "Hindi", "हिन्दी", "hi-IN", "hi-IN", "North India"),
    LanguageConfig("bn", "Bengali", "বাংলা", "bn-IN", "bn-IN", "West Bengal"),
    LanguageConfig("te", "Telugu", "తెలుగు", "te-IN", "te-IN", "Telangana"),
    LanguageConfig("mr", "Marathi", "मराठी", "mr-IN", "mr-IN", "Maharashtra"),
    LanguageConfig("ta", "Tamil", "தமிழ்", "ta-IN", "ta-IN", "Tamil Nadu"),
    LanguageConfig("ur", "Urdu", "اردو", "ur-IN", "ur-IN", "North India"),
    LanguageConfig("gu", "Gujarati", "ગુજરાતી", "gu-IN", "gu-IN", "Gujarat"),
    LanguageConfig("kn", "Kannada", "ಕನ್ನಡ", "kn-IN", "kn-IN", "Karnataka"),
    LanguageConfig("or", "Odia", "ଓଡ଼ିଆ", "or-IN", "or-IN", "Odisha"),
    LanguageConfig("ml", "Malayalam", "മലയാളം", "ml-IN", "ml-IN", "Kerala"),
    LanguageConfig("pa", "Punjabi", "ਪੰਜਾਬੀ", "pa-IN", "pa-IN", "Punjab"),
)

_BY_CODE = {lang.code: lang for lang in LANGUAGES}


def get_language_config(code: str) -> LanguageConfig | None:
    """Return the config for *code*, or None when unsupported."""
    return _BY_CODE.get(code)


def require_language(code: str) -> LanguageConfig:
    """Return the config for *code* or raise :class:`UnsupportedLanguageError`."""
    config = get_language_config(code)
    if config is None:
        raise UnsupportedLanguageError(code)
    return config
