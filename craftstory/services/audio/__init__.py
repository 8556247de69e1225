"""
Audio module - recording payloads and per-flow capture buffers.
"""

from craftstory.services.audio.capture import AudioCapture, AudioPayload

__all__ = ["AudioCapture", "AudioPayload"]
