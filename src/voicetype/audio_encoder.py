"""
Audio Encoder Module
Encodes captured PCM for upload to an STT endpoint.
"""

import io

import numpy as np
from scipy.io import wavfile

from voicetype.exceptions import AudioError


SUPPORTED_FORMATS = ("wav", "pcm")


class AudioEncoder:
    """Encodes 16-bit signed mono PCM. Stateless."""

    def __init__(self, sample_rate: int = 16000, channels: int = 1):
        """
        Initialize encoder.

        Args:
            sample_rate: Sample rate of the PCM in Hz
            channels: Interleaved channel count of the PCM
        """
        self.sample_rate = sample_rate
        self.channels = channels

    def encode(self, pcm: bytes, target_format: str = "wav") -> bytes:
        """
        Encode raw PCM.

        Args:
            pcm: 16-bit little-endian signed PCM
            target_format: "wav" for a WAV file, "pcm" to pass the bytes through

        Returns:
            Encoded audio bytes.

        Raises:
            AudioError: If the format is unsupported or the buffer is not whole samples
        """
        if target_format not in SUPPORTED_FORMATS:
            raise AudioError(
                f"Unsupported audio format '{target_format}'. "
                f"Supported: {', '.join(SUPPORTED_FORMATS)}"
            )

        frame_size = 2 * self.channels
        if len(pcm) % frame_size:
            raise AudioError(
                f"PCM buffer length {len(pcm)} is not a multiple of the {frame_size}-byte frame size"
            )

        if target_format == "pcm":
            return bytes(pcm)

        audio_data = np.frombuffer(pcm, dtype="<i2")
        if self.channels > 1:
            audio_data = audio_data.reshape(-1, self.channels)

        # Encode as WAV in memory
        wav_buffer = io.BytesIO()
        wavfile.write(wav_buffer, self.sample_rate, audio_data)
        wav_buffer.seek(0)

        return wav_buffer.getvalue()
