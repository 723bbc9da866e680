"""
Transcriber Module
Sends audio to the configured STT endpoint with bounded exponential-backoff retry.
"""

import logging
import time
from typing import Callable, Optional

from voicetype.adapters.base import STTAdapter, TranscriptionOptions, TranscriptionResult
from voicetype.adapters.factory import create_adapter
from voicetype.error_handling import classify_error

logger = logging.getLogger(__name__)


DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_DELAY = 1.0


class RetryingTranscriber:
    """Transcribes audio through a provider adapter, retrying network failures."""

    def __init__(
        self,
        endpoint_url: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        adapter_factory: Callable[..., STTAdapter] = create_adapter,
    ):
        """
        Initialize transcriber.

        Args:
            endpoint_url: STT endpoint URL; decides which adapter is used
            api_key: Optional API key passed to the adapter
            timeout: Per-request timeout in seconds, enforced by the adapter
            max_retries: Retries after the first attempt (default 3, so 4 attempts)
            initial_delay: Delay before the first retry in seconds; doubles each retry
            adapter_factory: Builds the adapter from (endpoint_url, api_key, timeout)
        """
        self.endpoint_url = endpoint_url
        self.api_key = api_key
        self.timeout = timeout
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self._adapter_factory = adapter_factory

    def _create_adapter(self) -> STTAdapter:
        return self._adapter_factory(self.endpoint_url, api_key=self.api_key, timeout=self.timeout)

    def backoff_delay(self, retry: int) -> float:
        """Delay in seconds before retry number `retry` (1-based)."""
        return self.initial_delay * (2 ** (retry - 1))

    def transcribe(self, audio: bytes, options: TranscriptionOptions) -> TranscriptionResult:
        """
        Transcribe audio to text.

        Only network-classified failures (other than rejected credentials) are
        retried. Everything else propagates on the first failure.

        Args:
            audio: Encoded audio payload
            options: Model, language and sampling options

        Returns:
            TranscriptionResult from the adapter.

        Raises:
            VoiceTypeError: The last error raised by the adapter, unchanged
            ConfigurationError: If the endpoint URL matches no provider
        """
        adapter = self._create_adapter()
        retry = 0
        while True:
            try:
                return adapter.transcribe(audio, options)
            except Exception as e:
                classification = classify_error(e)
                if not classification.is_retryable:
                    raise
                if retry >= self.max_retries:
                    logger.warning(
                        f"Transcription failed after {retry + 1} attempts via {adapter.provider_name}: {e}"
                    )
                    raise
                retry += 1
                delay = self.backoff_delay(retry)
                logger.warning(
                    f"Network error ({classification.kind.value}), "
                    f"retry {retry}/{self.max_retries} in {delay:g}s"
                )
                time.sleep(delay)

    def test_connection(self) -> bool:
        """
        Check the endpoint once, without retries.

        Returns:
            True if the endpoint answered.

        Raises:
            ConfigurationError: If the endpoint URL matches no provider
        """
        adapter = self._create_adapter()
        logger.info(f"Testing connection to {adapter.provider_name} endpoint {self.endpoint_url}")
        return adapter.test_connection()
