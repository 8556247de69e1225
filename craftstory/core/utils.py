"""Shared utility functions for CraftStory.

Generative models are asked for bare JSON but regularly wrap it in prose or
markdown fences. ``extract_json`` never raises: callers branch on the typed
``ParsedJSON`` / ``Unparsed`` result and fall back when nothing usable came back.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Literal

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")

_DELIMITERS = {"object": ("{", "}"), "array": ("[", "]")}


@dataclass(frozen=True)
class ParsedJSON:
    """Model output that contained a well-formed JSON value."""

    data: Any


@dataclass(frozen=True)
class Unparsed:
    """Model output with no usable JSON; ``raw`` keeps the text for logging."""

    raw: str
    reason: str = "no JSON found"


ParseResult = ParsedJSON | Unparsed


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences wrapping JSON from LLM responses."""
    text = text.strip()
    if text.startswith("```"):
        text = re.sub(r"^```\w*\n?", "", text)
        text = re.sub(r"\n?```$", "", text)
    return text.strip()


def extract_json(text: str | None, kind: Literal["object", "array"] = "object") -> ParseResult:
    """Pull a JSON object (or array) out of free-form model output.

    The widest span between the first opening and the last closing delimiter
    is tried first. If that span is not valid JSON, the text is scanned for
    the first position where a complete value of the requested kind decodes.

    Args:
        text: Raw model output, possibly with explanatory prose around the JSON.
        kind: ``"object"`` for ``{...}`` or ``"array"`` for ``[...]``.

    Returns:
        ``ParsedJSON`` with the decoded value, or ``Unparsed`` with the raw text.
    """
    if not text or not text.strip():
        return Unparsed(raw=text or "", reason="empty output")

    opener, closer = _DELIMITERS[kind]
    expected_type = dict if kind == "object" else list
    cleaned = strip_code_fences(text)

    start = cleaned.find(opener)
    end = cleaned.rfind(closer)
    if start == -1 or end <= start:
        return Unparsed(raw=text, reason=f"no JSON {kind} found")

    try:
        data = json.loads(cleaned[start : end + 1])
        if isinstance(data, expected_type):
            return ParsedJSON(data=data)
    except json.JSONDecodeError:
        pass

    decoder = json.JSONDecoder()
    position = start
    while position != -1:
        try:
            data, _ = decoder.raw_decode(cleaned, position)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, expected_type):
            return ParsedJSON(data=data)
        position = cleaned.find(opener, position + 1)

    return Unparsed(raw=text, reason=f"malformed JSON {kind}")


def camel_to_snake(name: str) -> str:
    """Convert ``craftType`` style keys to ``craft_type``."""
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Return a shallow copy of *data* with snake_case keys."""
    return {camel_to_snake(str(key)): value for key, value in data.items()}
