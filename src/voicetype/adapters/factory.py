"""
Adapter Factory
Picks the STT adapter that matches the shape of the endpoint URL.
"""

from typing import Optional
from urllib.parse import urlparse

from voicetype.adapters.base import STTAdapter
from voicetype.exceptions import ConfigurationError


def create_adapter(endpoint_url: str, api_key: Optional[str] = None, timeout: float = 30.0) -> STTAdapter:
    """
    Create the adapter for an endpoint URL.

    Selection rules, checked in order:
    - host api.groq.com -> GroqAdapter (API key required)
    - "localhost:11434" or "ollama" in the URL -> OllamaAdapter
    - "/v1/audio/transcriptions" in the URL -> OpenAIWhisperAdapter

    Args:
        endpoint_url: STT endpoint URL
        api_key: Optional API key
        timeout: Per-request timeout in seconds

    Returns:
        STTAdapter for the endpoint.

    Raises:
        ConfigurationError: If the URL is empty, not http(s), or matches no provider
    """
    url = (endpoint_url or "").strip()
    if not url:
        raise ConfigurationError("Endpoint URL cannot be empty")

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError("Endpoint URL must start with http:// or https://")

    lowered = url.lower()

    # Import adapters lazily so an unused provider's SDK is never loaded
    if (parsed.hostname or "").lower() == "api.groq.com":
        from voicetype.adapters.groq_adapter import GroqAdapter
        return GroqAdapter(api_key=api_key, timeout=timeout)

    if "localhost:11434" in lowered or "ollama" in lowered:
        from voicetype.adapters.ollama import OllamaAdapter
        return OllamaAdapter(url, timeout=timeout)

    if "/v1/audio/transcriptions" in lowered:
        from voicetype.adapters.openai_whisper import OpenAIWhisperAdapter
        return OpenAIWhisperAdapter(url, api_key=api_key, timeout=timeout)

    raise ConfigurationError(f"Unsupported STT provider URL: {url}")
