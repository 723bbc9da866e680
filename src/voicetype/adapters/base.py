"""
STT Adapter - Base Classes

Each speech-to-text provider implements STTAdapter. Adapters raise VoiceType
errors with a classification so that retry and notification logic never has
to know which provider produced a failure.
"""

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.io import wavfile

from voicetype.exceptions import AudioError


CONNECTION_TEST_TIMEOUT = 5.0


@dataclass(frozen=True)
class TranscriptionOptions:
    """Per-request options sent alongside the audio."""

    model: str
    language: Optional[str] = None  # None = let the provider auto-detect
    temperature: Optional[float] = None
    audio_format: str = "wav"
    sample_rate: int = 16000


@dataclass(frozen=True)
class TranscriptionResult:
    """Text returned by a provider."""

    text: str
    language: Optional[str] = None


def wrap_pcm_as_wav(pcm: bytes, sample_rate: int = 16000) -> bytes:
    """
    Wrap raw 16-bit mono PCM in a WAV container.

    Every adapter uploads WAV. Audio that is already a WAV file is returned
    unchanged.
    """
    if pcm[:4] == b"RIFF":
        return pcm
    if len(pcm) % 2:
        raise AudioError("PCM buffer length must be a multiple of 2 bytes")
    samples = np.frombuffer(pcm, dtype="<i2")
    wav_buffer = io.BytesIO()
    wavfile.write(wav_buffer, sample_rate, samples)
    return wav_buffer.getvalue()


class STTAdapter(ABC):
    """
    Abstract base class for speech-to-text providers.

    - OpenAI-compatible servers: multipart upload to /v1/audio/transcriptions
    - Ollama: base64 WAV in a chat request
    - Groq: the groq SDK
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Short provider identifier, e.g. "openai" or "ollama"."""
        pass

    @abstractmethod
    def transcribe(self, audio: bytes, options: TranscriptionOptions) -> TranscriptionResult:
        """
        Transcribe encoded audio.

        Args:
            audio: Encoded audio payload
            options: Model, language and sampling options

        Returns:
            TranscriptionResult with whitespace-stripped text.

        Raises:
            NetworkError: If the endpoint cannot be reached or rejects credentials
            ServiceError: If the endpoint answers with an error or a malformed body
        """
        pass

    @abstractmethod
    def test_connection(self) -> bool:
        """
        Check that the endpoint answers, once.

        Returns:
            True if the endpoint answered; never raises.
        """
        pass
