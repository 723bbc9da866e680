"""
Audio Recorder Module
Captures audio from microphone and stores it in a memory buffer.
"""

import logging
from collections import deque
from typing import List, Optional, Union

import numpy as np
import sounddevice as sd

from voicetype.exceptions import AudioError
from voicetype.interfaces import AudioConfig, AudioSource, ChunkListener

logger = logging.getLogger(__name__)


# Blocks per second delivered to the callback (~100 ms chunks)
BLOCKS_PER_SECOND = 10


def resolve_input_device(device: Optional[Union[str, int]]) -> Optional[Union[str, int]]:
    """
    Check that a configured input device exists.

    Returns:
        The device if it can be found, otherwise None (system default).
    """
    if device is None or device == "":
        return None
    if isinstance(device, str) and device.isdigit():
        device = int(device)
    try:
        sd.query_devices(device, kind="input")
    except (ValueError, sd.PortAudioError) as e:
        logger.warning(f"Input device {device!r} not available, using system default: {e}")
        return None
    return device


class AudioRecorder(AudioSource):
    """Records 16-bit PCM from the microphone to a memory buffer."""

    def __init__(self):
        self.buffer: deque = deque()
        self.stream: Optional[sd.InputStream] = None
        self.sample_rate = 16000
        self.channels = 1
        self._listeners: List[ChunkListener] = []
        self._is_recording = False

    def add_chunk_listener(self, listener: ChunkListener) -> None:
        self._listeners.append(listener)

    def _audio_callback(self, indata: np.ndarray, frames: int,
                        time_info, status) -> None:
        """Callback for audio stream - buffers the chunk and fans it out."""
        if status:
            logger.debug(f"Audio callback status: {status}")
        chunk = indata.astype("<i2", copy=False).tobytes()
        self.buffer.append(chunk)
        for listener in self._listeners:
            try:
                listener(chunk)
            except Exception:
                # Keep capturing; a broken listener must not kill the stream
                logger.exception("Audio chunk listener failed")

    def start_capture(self, config: AudioConfig) -> None:
        """
        Begin capturing audio.

        Args:
            config: Device, sample rate and channel count

        Raises:
            AudioError: If already capturing or the device cannot be opened
        """
        if self._is_recording:
            raise AudioError("Audio capture is already running")

        self.buffer.clear()
        self.sample_rate = config.sample_rate
        self.channels = config.channels
        device = resolve_input_device(config.device)

        try:
            self.stream = sd.InputStream(
                samplerate=config.sample_rate,
                channels=config.channels,
                dtype='int16',
                blocksize=max(config.sample_rate // BLOCKS_PER_SECOND, 1),
                device=device,
                callback=self._audio_callback
            )
            self.stream.start()
        except (sd.PortAudioError, ValueError) as e:
            self._close_stream()
            raise AudioError(f"Failed to open audio input: {e}") from e

        self._is_recording = True
        logger.debug(f"Audio capture started (sample_rate={config.sample_rate}, device={device})")

    def stop_capture(self) -> bytes:
        """
        Stop capturing.

        Returns:
            All captured PCM as bytes.

        Raises:
            AudioError: If not capturing
        """
        if not self._is_recording:
            raise AudioError("Audio capture is not running")

        self._is_recording = False
        try:
            self.stream.stop()
        except sd.PortAudioError as e:
            raise AudioError(f"Failed to stop audio input: {e}") from e
        finally:
            self._close_stream()

        return b"".join(self.buffer)

    def _close_stream(self) -> None:
        if self.stream is not None:
            try:
                self.stream.close()
            except sd.PortAudioError as e:
                logger.warning(f"Failed to close audio stream: {e}")
            self.stream = None
