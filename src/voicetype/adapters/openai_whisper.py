"""
OpenAI Whisper Adapter
Talks to any server exposing the OpenAI /v1/audio/transcriptions API.
"""

import logging
import re
from typing import Optional

import httpx

from voicetype.adapters.base import (
    CONNECTION_TEST_TIMEOUT,
    STTAdapter,
    TranscriptionOptions,
    TranscriptionResult,
    wrap_pcm_as_wav,
)
from voicetype.error_handling import classify_error, error_from_classification
from voicetype.exceptions import ServiceError

logger = logging.getLogger(__name__)


_TRANSCRIPTIONS_PATH = re.compile(r"/v1/audio/transcriptions.*$")


class OpenAIWhisperAdapter(STTAdapter):
    """Transcribes audio with an OpenAI-compatible Whisper endpoint."""

    def __init__(
        self,
        endpoint_url: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize adapter.

        Args:
            endpoint_url: Full transcription URL (ending in /v1/audio/transcriptions)
            api_key: Bearer token, if the server requires one
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.endpoint_url = endpoint_url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @property
    def provider_name(self) -> str:
        return "openai"

    def _headers(self) -> dict:
        if self.api_key:
            return {"Authorization": f"Bearer {self.api_key}"}
        return {}

    def _client(self, timeout: float) -> httpx.Client:
        return httpx.Client(timeout=timeout, transport=self._transport)

    def transcribe(self, audio: bytes, options: TranscriptionOptions) -> TranscriptionResult:
        wav = wrap_pcm_as_wav(audio, options.sample_rate)
        data = {"model": options.model, "response_format": "json"}
        if options.language:
            data["language"] = options.language
        if options.temperature is not None:
            data["temperature"] = str(options.temperature)

        try:
            with self._client(self.timeout) as client:
                response = client.post(
                    self.endpoint_url,
                    headers=self._headers(),
                    data=data,
                    files={"file": ("audio.wav", wav, "audio/wav")},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise error_from_classification(
                classify_error(e), f"OpenAI Whisper API error: {status}"
            ) from e
        except httpx.HTTPError as e:
            raise error_from_classification(
                classify_error(e), f"Failed to reach {self.endpoint_url}: {e}"
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise ServiceError("Invalid response format from OpenAI Whisper server") from e

        if not isinstance(body, dict) or not isinstance(body.get("text"), str):
            raise ServiceError("Invalid response format from OpenAI Whisper server")

        return TranscriptionResult(text=body["text"].strip(), language=body.get("language"))

    def test_connection(self) -> bool:
        base_url = _TRANSCRIPTIONS_PATH.sub("", self.endpoint_url)
        try:
            with self._client(CONNECTION_TEST_TIMEOUT) as client:
                response = client.get(f"{base_url}/v1/models", headers=self._headers())
                response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning(f"OpenAI Whisper connection test failed: {e}")
            return False
