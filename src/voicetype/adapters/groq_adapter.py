"""
Groq Adapter
Sends audio to Groq's hosted Whisper models through the groq SDK.
"""

import logging
from typing import Optional

import groq
from groq import Groq

from voicetype.adapters.base import (
    CONNECTION_TEST_TIMEOUT,
    STTAdapter,
    TranscriptionOptions,
    TranscriptionResult,
    wrap_pcm_as_wav,
)
from voicetype.error_handling import classify_error, error_from_classification
from voicetype.exceptions import ConfigurationError, ServiceError

logger = logging.getLogger(__name__)


class GroqAdapter(STTAdapter):
    """Transcribes audio using Groq Whisper API."""

    def __init__(self, api_key: Optional[str], timeout: float = 30.0):
        """
        Initialize adapter with Groq API key.

        Args:
            api_key: Groq API key
            timeout: Per-request timeout in seconds

        Raises:
            ConfigurationError: If no API key is given
        """
        if not api_key:
            raise ConfigurationError("An API key is required for Groq (VOICETYPE_API_KEY)")
        self.api_key = api_key
        self.timeout = timeout
        # RetryingTranscriber owns the retry policy
        self.client = Groq(api_key=api_key, timeout=timeout, max_retries=0)

    @property
    def provider_name(self) -> str:
        return "groq"

    def transcribe(self, audio: bytes, options: TranscriptionOptions) -> TranscriptionResult:
        kwargs = {
            "file": ("audio.wav", wrap_pcm_as_wav(audio, options.sample_rate)),
            "model": options.model,
            "response_format": "json",
        }
        if options.language:
            kwargs["language"] = options.language
        if options.temperature is not None:
            kwargs["temperature"] = options.temperature

        try:
            transcription = self.client.audio.transcriptions.create(**kwargs)
        except groq.APIStatusError as e:
            raise error_from_classification(
                classify_error(e), f"Groq API error: {e.status_code}"
            ) from e
        except groq.APIError as e:
            raise error_from_classification(
                classify_error(e), f"Failed to reach Groq: {e}"
            ) from e

        text = transcription if isinstance(transcription, str) else getattr(transcription, "text", None)
        if not isinstance(text, str):
            raise ServiceError("Invalid response format from Groq")
        return TranscriptionResult(text=text.strip(), language=getattr(transcription, "language", None))

    def test_connection(self) -> bool:
        try:
            self.client.with_options(timeout=CONNECTION_TEST_TIMEOUT).models.list()
            return True
        except groq.APIError as e:
            logger.warning(f"Groq connection test failed: {e}")
            return False
