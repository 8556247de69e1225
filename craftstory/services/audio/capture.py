"""Audio capture for voice answers.

The browser records with ``MediaRecorder`` and either uploads the whole clip
as a data URI or streams chunks while the user speaks. ``AudioCapture``
accumulates streamed chunks for one flow and enforces a single active
recording at a time.
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass

from craftstory.core.exceptions import CaptureError, RecordingAlreadyActiveError

logger = logging.getLogger(__name__)

_DATA_URI = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[\w-]+=[\w.-]+)*)(;base64)?,", re.I)

DEFAULT_MIME_TYPE = "audio/webm"


@dataclass(frozen=True)
class AudioPayload:
    """Encoded audio plus its MIME type."""

    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE

    def __post_init__(self) -> None:
        if not self.data:
            raise CaptureError("Recording is empty. Please try recording again.")

    @classmethod
    def from_data_uri(cls, uri: str) -> "AudioPayload":
        """Decode a ``data:audio/webm;base64,...`` URI.

        A bare base64 string without the ``data:`` prefix is also accepted.

        Raises:
            CaptureError: If the URI or its base64 body is malformed or empty.
        """
        uri = uri.strip()
        mime_type = DEFAULT_MIME_TYPE
        body = uri
        if uri.startswith("data:"):
            match = _DATA_URI.match(uri)
            if match is None:
                raise CaptureError("Malformed audio data URI")
            mime_type = match.group("mime") or DEFAULT_MIME_TYPE
            body = uri[match.end():]

        try:
            data = base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise CaptureError("Audio data is not valid base64") from exc

        return cls(data=data, mime_type=mime_type.lower())

    def to_data_uri(self) -> str:
        """Encode back to a data URI suitable for an ``<audio>`` element."""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    @property
    def size(self) -> int:
        return len(self.data)


class AudioCapture:
    """Accumulates streamed audio chunks for a single recording.

    Args:
        max_bytes: Upper bound on buffered audio; larger recordings are rejected.
    """

    def __init__(self, max_bytes: int = 10 * 1024 * 1024) -> None:
        self._max_bytes = max_bytes
        self._buffer = bytearray()
        self._mime_type = DEFAULT_MIME_TYPE
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def buffered_bytes(self) -> int:
        return len(self._buffer)

    def start(self, mime_type: str = DEFAULT_MIME_TYPE) -> None:
        """Begin a new recording.

        Raises:
            RecordingAlreadyActiveError: If a recording is already in progress.
        """
        if self._active:
            raise RecordingAlreadyActiveError()
        self._buffer.clear()
        self._mime_type = mime_type
        self._active = True

    def add_chunk(self, data: bytes) -> None:
        """Append raw encoded bytes to the active recording."""
        if not self._active:
            raise CaptureError("No active recording. Start recording first.")
        if len(self._buffer) + len(data) > self._max_bytes:
            self.abort()
            raise CaptureError("Recording is too long. Please keep answers shorter.")
        self._buffer.extend(data)

    def stop(self) -> AudioPayload:
        """Finish the recording and return its payload.

        Raises:
            CaptureError: If no recording is active or nothing was captured.
        """
        if not self._active:
            raise CaptureError("No active recording to stop.")
        self._active = False
        data = bytes(self._buffer)
        self._buffer.clear()
        return AudioPayload(data=data, mime_type=self._mime_type)

    def abort(self) -> None:
        """Discard the active recording without submitting it."""
        if self._active:
            logger.debug("Discarding %d buffered audio bytes", len(self._buffer))
        self._buffer.clear()
        self._active = False
