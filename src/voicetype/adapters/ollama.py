"""
Ollama Adapter
Sends audio to an audio-capable chat model served by Ollama.
"""

import base64
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


_API_PATH = re.compile(r"/api(/.*)?$")


class OllamaAdapter(STTAdapter):
    """Transcribes audio with an Ollama server's /api/chat endpoint."""

    def __init__(
        self,
        endpoint_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize adapter.

        Args:
            endpoint_url: Ollama server URL (e.g. http://localhost:11434)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = _API_PATH.sub("", endpoint_url.rstrip("/"))
        self.timeout = timeout
        self._transport = transport

    @property
    def provider_name(self) -> str:
        return "ollama"

    def _client(self, timeout: float) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=timeout, transport=self._transport)

    def transcribe(self, audio: bytes, options: TranscriptionOptions) -> TranscriptionResult:
        wav = wrap_pcm_as_wav(audio, options.sample_rate)

        prompt = "Transcribe this audio."
        if options.language:
            prompt = f"Transcribe this audio in {options.language}."

        payload = {
            "model": options.model,
            "messages": [
                {
                    "role": "user",
                    "content": prompt,
                    "audio": [base64.b64encode(wav).decode("ascii")],
                }
            ],
            "stream": False,
        }
        if options.temperature is not None:
            payload["options"] = {"temperature": options.temperature}

        try:
            with self._client(self.timeout) as client:
                response = client.post("/api/chat", json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = f"Ollama API error: {status}"
            if status == 404:
                message = f"Model '{options.model}' not found on Ollama server"
            raise error_from_classification(classify_error(e), message) from e
        except httpx.HTTPError as e:
            raise error_from_classification(
                classify_error(e), f"Failed to reach Ollama at {self.base_url}: {e}"
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise ServiceError("Invalid response format from Ollama server") from e

        message = body.get("message") if isinstance(body, dict) else None
        if not isinstance(message, dict) or not isinstance(message.get("content"), str):
            raise ServiceError("Invalid response format from Ollama server")

        return TranscriptionResult(text=message["content"].strip())

    def test_connection(self) -> bool:
        try:
            with self._client(CONNECTION_TEST_TIMEOUT) as client:
                response = client.get("/api/tags")
                response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning(f"Ollama connection test failed: {e}")
            return False
