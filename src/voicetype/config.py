"""
Configuration Module
Loads and validates settings from environment variables.
"""

import json
import os
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv


DEFAULT_ENDPOINT_URL = "http://localhost:8000/v1/audio/transcriptions"
DEFAULT_MODEL = "whisper-large-v3"

# Supported encodings for the captured audio
VALID_AUDIO_FORMATS = ["wav", "pcm"]

VALID_SAMPLE_RATES = [8000, 16000, 22050, 44100, 48000]

URL_PATTERN = re.compile(r"^https?://[a-zA-Z0-9.-]+(:[0-9]{1,5})?(/.*)?$")
MODEL_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9._-]+$")

LOCALHOST_NAMES = ("localhost", "127.0.0.1", "::1")

MAX_RECOMMENDED_TIMEOUT = 120.0


def is_localhost(url: str) -> bool:
    """Check whether a URL points at the local machine."""
    hostname = urlparse(url).hostname or ""
    return hostname in LOCALHOST_NAMES or hostname.endswith(".localhost")


@dataclass
class Config:
    """Application configuration from environment variables."""

    # STT endpoint
    endpoint_url: str = DEFAULT_ENDPOINT_URL
    model: str = DEFAULT_MODEL
    language: Optional[str] = "en"  # None = let the service auto-detect
    timeout: float = 30.0  # Per HTTP call, seconds
    temperature: Optional[float] = None
    api_key: Optional[str] = None

    # Audio
    sample_rate: int = 16000
    audio_format: str = "wav"
    input_device: Optional[str] = None  # None = system default

    # Voice commands
    command_mode: bool = False
    custom_commands: Dict[str, str] = field(default_factory=dict)

    # Silence-triggered auto-stop
    auto_stop: bool = False
    silence_threshold: float = 0.005
    silence_duration_ms: int = 3000

    # Surfaces
    notifications_enabled: bool = True
    history_enabled: bool = True
    history_max_entries: int = 50
    hotkey: Optional[str] = None  # Platform default if not set

    @classmethod
    def from_env(cls) -> "Config":
        """
        Load configuration from environment variables.

        Environment Variables:
            VOICETYPE_ENDPOINT_URL: Optional. STT endpoint URL
                (default: http://localhost:8000/v1/audio/transcriptions).
            VOICETYPE_MODEL: Optional. Model name sent to the endpoint (default: whisper-large-v3).
            VOICETYPE_LANGUAGE: Optional. Language hint (default: en, empty = auto-detect).
            VOICETYPE_TIMEOUT: Optional. Per-request timeout in seconds (default: 30).
            VOICETYPE_TEMPERATURE: Optional. Sampling temperature passed to the model.
            VOICETYPE_API_KEY: Optional. API key; falls back to GROQ_API_KEY then OPENAI_API_KEY.
            VOICETYPE_SAMPLE_RATE: Optional. Capture sample rate in Hz (default: 16000).
            VOICETYPE_AUDIO_FORMAT: Optional. Upload encoding: wav or pcm (default: wav).
            VOICETYPE_INPUT_DEVICE: Optional. Input device name or index (default: system default).
            VOICETYPE_COMMAND_MODE: Optional. Turn spoken phrases like "new line" into keystrokes (default: false).
            VOICETYPE_CUSTOM_COMMANDS: Optional. JSON object of extra phrase -> command id mappings.
            VOICETYPE_AUTO_STOP: Optional. Stop recording after a pause in speech (default: false).
            VOICETYPE_SILENCE_THRESHOLD: Optional. RMS level below which audio is silence (default: 0.005).
            VOICETYPE_SILENCE_DURATION_MS: Optional. Silence needed to auto-stop, in ms (default: 3000).
            VOICETYPE_NOTIFICATIONS: Optional. Show desktop notifications (default: true).
            VOICETYPE_HISTORY_ENABLED: Optional. Keep transcription history (default: true).
            VOICETYPE_HISTORY_MAX: Optional. Maximum history entries (default: 50).
            VOICETYPE_HOTKEY: Optional. Toggle hotkey (e.g., "ctrl+shift+v"). Platform default if not set.

        Returns:
            Config instance with loaded values.

        Raises:
            ValueError: If a value cannot be parsed.
        """
        load_dotenv()

        # Parse boolean environment variables
        def parse_bool(value: str, default: bool) -> bool:
            if not value:
                return default
            return value.lower() in ("true", "1", "yes")

        def parse_optional_float(value: Optional[str]) -> Optional[float]:
            if value is None or value.strip() == "":
                return None
            return float(value)

        custom_commands_raw = os.environ.get("VOICETYPE_CUSTOM_COMMANDS", "").strip()
        custom_commands: Dict[str, str] = {}
        if custom_commands_raw:
            try:
                custom_commands = json.loads(custom_commands_raw)
            except json.JSONDecodeError as e:
                raise ValueError(f"VOICETYPE_CUSTOM_COMMANDS must be a JSON object: {e}") from e
            if not isinstance(custom_commands, dict):
                raise ValueError("VOICETYPE_CUSTOM_COMMANDS must be a JSON object")

        api_key = (
            os.environ.get("VOICETYPE_API_KEY")
            or os.environ.get("GROQ_API_KEY")
            or os.environ.get("OPENAI_API_KEY")
        )

        return cls(
            endpoint_url=os.environ.get("VOICETYPE_ENDPOINT_URL", DEFAULT_ENDPOINT_URL).strip(),
            model=os.environ.get("VOICETYPE_MODEL", DEFAULT_MODEL).strip(),
            language=os.environ.get("VOICETYPE_LANGUAGE", "en").strip() or None,
            timeout=float(os.environ.get("VOICETYPE_TIMEOUT", "30")),
            temperature=parse_optional_float(os.environ.get("VOICETYPE_TEMPERATURE")),
            api_key=api_key or None,
            sample_rate=int(os.environ.get("VOICETYPE_SAMPLE_RATE", "16000")),
            audio_format=os.environ.get("VOICETYPE_AUDIO_FORMAT", "wav").lower(),
            input_device=os.environ.get("VOICETYPE_INPUT_DEVICE") or None,
            command_mode=parse_bool(os.environ.get("VOICETYPE_COMMAND_MODE", ""), False),
            custom_commands={str(k): str(v) for k, v in custom_commands.items()},
            auto_stop=parse_bool(os.environ.get("VOICETYPE_AUTO_STOP", ""), False),
            silence_threshold=float(os.environ.get("VOICETYPE_SILENCE_THRESHOLD", "0.005")),
            silence_duration_ms=int(os.environ.get("VOICETYPE_SILENCE_DURATION_MS", "3000")),
            notifications_enabled=parse_bool(os.environ.get("VOICETYPE_NOTIFICATIONS", "true"), True),
            history_enabled=parse_bool(os.environ.get("VOICETYPE_HISTORY_ENABLED", "true"), True),
            history_max_entries=int(os.environ.get("VOICETYPE_HISTORY_MAX", "50")),
            hotkey=os.environ.get("VOICETYPE_HOTKEY") or None,
        )

    def validate(self) -> List[str]:
        """
        Validate configuration values.

        Returns:
            List of warning messages (empty if no warnings).

        Raises:
            ValueError: If configuration values are invalid.
        """
        warnings = []

        if not self.endpoint_url:
            raise ValueError("VOICETYPE_ENDPOINT_URL cannot be empty")

        if not URL_PATTERN.match(self.endpoint_url):
            raise ValueError(
                f"VOICETYPE_ENDPOINT_URL is not a valid http(s) URL. Got: {self.endpoint_url}"
            )

        if self.endpoint_url.startswith("http://") and not is_localhost(self.endpoint_url):
            warnings.append(
                "Using HTTP (non-HTTPS) for a remote endpoint is not recommended"
            )

        # Model names end up in URLs and request bodies; keep them path-safe
        if not self.model or not MODEL_NAME_PATTERN.match(self.model):
            raise ValueError(
                "VOICETYPE_MODEL must use only letters, numbers, dots, underscores, and hyphens. "
                f"Got: {self.model!r}"
            )

        if "api.groq.com" in self.endpoint_url.lower() and not self.api_key:
            raise ValueError(
                "An API key is required for the Groq endpoint.\n"
                "Set it in your .env file or export it:\n"
                "  export VOICETYPE_API_KEY=your_key_here"
            )

        if self.timeout <= 0:
            raise ValueError("VOICETYPE_TIMEOUT must be positive")

        if self.timeout > MAX_RECOMMENDED_TIMEOUT:
            warnings.append(
                f"Long request timeout ({self.timeout:g}s); a failed request with retries "
                "may keep the app busy for several minutes"
            )

        if self.temperature is not None and not 0.0 <= self.temperature <= 1.0:
            raise ValueError("VOICETYPE_TEMPERATURE must be between 0 and 1")

        if self.sample_rate <= 0:
            raise ValueError("VOICETYPE_SAMPLE_RATE must be positive")

        if self.sample_rate not in VALID_SAMPLE_RATES:
            warnings.append(
                f"Unusual sample rate {self.sample_rate}. "
                f"Common values are: {VALID_SAMPLE_RATES}"
            )

        if self.audio_format not in VALID_AUDIO_FORMATS:
            raise ValueError(
                f"VOICETYPE_AUDIO_FORMAT must be one of: {', '.join(VALID_AUDIO_FORMATS)}. "
                f"Got: {self.audio_format}"
            )

        if not 0.0 < self.silence_threshold <= 1.0:
            raise ValueError("VOICETYPE_SILENCE_THRESHOLD must be in (0, 1]")

        if self.silence_duration_ms <= 0:
            raise ValueError("VOICETYPE_SILENCE_DURATION_MS must be positive")

        if self.history_max_entries <= 0:
            raise ValueError("VOICETYPE_HISTORY_MAX must be positive")

        if self.custom_commands and not self.command_mode:
            warnings.append(
                "VOICETYPE_CUSTOM_COMMANDS is set but VOICETYPE_COMMAND_MODE is off; "
                "custom phrases will be ignored"
            )

        return warnings
