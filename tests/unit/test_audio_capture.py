"""Unit tests for AudioPayload decoding and the per-flow AudioCapture buffer."""

import base64

import pytest

from craftstory.core.exceptions import CaptureError, RecordingAlreadyActiveError
from craftstory.services.audio.capture import AudioCapture, AudioPayload


class TestAudioPayload:
    """Data URI decoding."""

    def test_from_data_uri(self):
        encoded = base64.b64encode(b"webm-bytes").decode()
        payload = AudioPayload.from_data_uri(f"data:audio/webm;codecs=opus;base64,{encoded}")
        assert payload.data == b"webm-bytes"
        assert payload.mime_type == "audio/webm"

    def test_bare_base64(self):
        payload = AudioPayload.from_data_uri(base64.b64encode(b"abc").decode())
        assert payload.data == b"abc"
        assert payload.mime_type == "audio/webm"

    def test_round_trip_data_uri(self):
        payload = AudioPayload(data=b"\x00\x01", mime_type="audio/mpeg")
        assert payload.to_data_uri() == "data:audio/mpeg;base64,AAE="

    def test_invalid_base64(self):
        with pytest.raises(CaptureError):
            AudioPayload.from_data_uri("data:audio/webm;base64,@@not-base64@@")

    def test_malformed_uri(self):
        with pytest.raises(CaptureError):
            AudioPayload.from_data_uri("data:;;;")

    def test_empty_audio(self):
        with pytest.raises(CaptureError):
            AudioPayload.from_data_uri("data:audio/webm;base64,")

    def test_size(self):
        assert AudioPayload(data=b"1234").size == 4


class TestAudioCapture:
    """One recording at a time; abort discards audio."""

    def test_start_chunk_stop(self):
        capture = AudioCapture()
        capture.start("audio/ogg")
        capture.add_chunk(b"ab")
        capture.add_chunk(b"cd")

        payload = capture.stop()

        assert payload == AudioPayload(data=b"abcd", mime_type="audio/ogg")
        assert capture.is_active is False
        assert capture.buffered_bytes == 0

    def test_second_start_rejected(self):
        capture = AudioCapture()
        capture.start()
        with pytest.raises(RecordingAlreadyActiveError):
            capture.start()

    def test_chunk_without_start(self):
        with pytest.raises(CaptureError):
            AudioCapture().add_chunk(b"x")

    def test_stop_without_start(self):
        with pytest.raises(CaptureError):
            AudioCapture().stop()

    def test_stop_with_nothing_recorded(self):
        capture = AudioCapture()
        capture.start()
        with pytest.raises(CaptureError):
            capture.stop()
        assert capture.is_active is False

    def test_abort_discards(self):
        capture = AudioCapture()
        capture.start()
        capture.add_chunk(b"secret")

        capture.abort()

        assert capture.is_active is False
        assert capture.buffered_bytes == 0
        capture.start()  # slot is free again

    def test_too_long_recording(self):
        capture = AudioCapture(max_bytes=4)
        capture.start()
        capture.add_chunk(b"abc")
        with pytest.raises(CaptureError):
            capture.add_chunk(b"de")
        assert capture.is_active is False
