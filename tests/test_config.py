"""
Tests for the Configuration Module

Comprehensive tests for Config class including:
- Loading from environment variables
- Validation of all configuration values
- Property-based tests for configuration ranges
"""

from unittest.mock import patch

import pytest
from hypothesis import given, strategies as st

from voicetype.config import (
    DEFAULT_ENDPOINT_URL,
    DEFAULT_MODEL,
    Config,
    is_localhost,
)


@pytest.fixture
def no_dotenv():
    """Keep a developer's .env file out of the test environment."""
    with patch("voicetype.config.load_dotenv"):
        yield


class TestConfigFromEnv:
    """Tests for Config.from_env() environment loading."""

    def test_defaults(self, clean_env, no_dotenv):
        config = Config.from_env()

        assert config.endpoint_url == DEFAULT_ENDPOINT_URL
        assert config.model == DEFAULT_MODEL
        assert config.language == "en"
        assert config.timeout == 30.0
        assert config.temperature is None
        assert config.api_key is None
        assert config.sample_rate == 16000
        assert config.audio_format == "wav"
        assert config.input_device is None
        assert config.command_mode is False
        assert config.custom_commands == {}
        assert config.auto_stop is False
        assert config.silence_threshold == 0.005
        assert config.silence_duration_ms == 3000
        assert config.notifications_enabled is True
        assert config.history_enabled is True
        assert config.history_max_entries == 50
        assert config.hotkey is None

    def test_reads_all_variables(self, clean_env, no_dotenv):
        clean_env.setenv("VOICETYPE_ENDPOINT_URL", " http://localhost:11434 ")
        clean_env.setenv("VOICETYPE_MODEL", "gemma3n")
        clean_env.setenv("VOICETYPE_LANGUAGE", "de")
        clean_env.setenv("VOICETYPE_TIMEOUT", "12.5")
        clean_env.setenv("VOICETYPE_TEMPERATURE", "0.2")
        clean_env.setenv("VOICETYPE_SAMPLE_RATE", "48000")
        clean_env.setenv("VOICETYPE_AUDIO_FORMAT", "PCM")
        clean_env.setenv("VOICETYPE_INPUT_DEVICE", "USB Mic")
        clean_env.setenv("VOICETYPE_COMMAND_MODE", "yes")
        clean_env.setenv("VOICETYPE_AUTO_STOP", "1")
        clean_env.setenv("VOICETYPE_SILENCE_THRESHOLD", "0.02")
        clean_env.setenv("VOICETYPE_SILENCE_DURATION_MS", "1500")
        clean_env.setenv("VOICETYPE_NOTIFICATIONS", "false")
        clean_env.setenv("VOICETYPE_HISTORY_ENABLED", "false")
        clean_env.setenv("VOICETYPE_HISTORY_MAX", "10")
        clean_env.setenv("VOICETYPE_HOTKEY", "ctrl+alt+d")

        config = Config.from_env()

        assert config.endpoint_url == "http://localhost:11434"
        assert config.model == "gemma3n"
        assert config.language == "de"
        assert config.timeout == 12.5
        assert config.temperature == 0.2
        assert config.sample_rate == 48000
        assert config.audio_format == "pcm"
        assert config.input_device == "USB Mic"
        assert config.command_mode is True
        assert config.auto_stop is True
        assert config.silence_threshold == 0.02
        assert config.silence_duration_ms == 1500
        assert config.notifications_enabled is False
        assert config.history_enabled is False
        assert config.history_max_entries == 10
        assert config.hotkey == "ctrl+alt+d"

    def test_empty_language_means_auto_detect(self, clean_env, no_dotenv):
        clean_env.setenv("VOICETYPE_LANGUAGE", "")
        assert Config.from_env().language is None

    def test_api_key_fallbacks(self, clean_env, no_dotenv):
        clean_env.setenv("OPENAI_API_KEY", "sk-openai")
        assert Config.from_env().api_key == "sk-openai"

        clean_env.setenv("GROQ_API_KEY", "gsk-groq")
        assert Config.from_env().api_key == "gsk-groq"

        clean_env.setenv("VOICETYPE_API_KEY", "own-key")
        assert Config.from_env().api_key == "own-key"

    def test_custom_commands_json(self, clean_env, no_dotenv):
        clean_env.setenv("VOICETYPE_CUSTOM_COMMANDS", '{"go back": "undo", "next field": "tab"}')
        assert Config.from_env().custom_commands == {"go back": "undo", "next field": "tab"}

    def test_custom_commands_invalid_json(self, clean_env, no_dotenv):
        clean_env.setenv("VOICETYPE_CUSTOM_COMMANDS", "{not json")
        with pytest.raises(ValueError, match="VOICETYPE_CUSTOM_COMMANDS"):
            Config.from_env()

    def test_custom_commands_must_be_object(self, clean_env, no_dotenv):
        clean_env.setenv("VOICETYPE_CUSTOM_COMMANDS", '["undo"]')
        with pytest.raises(ValueError, match="JSON object"):
            Config.from_env()

    def test_non_numeric_timeout(self, clean_env, no_dotenv):
        clean_env.setenv("VOICETYPE_TIMEOUT", "soon")
        with pytest.raises(ValueError):
            Config.from_env()

    def test_loads_dotenv(self, clean_env):
        with patch("voicetype.config.load_dotenv") as mock_load:
            Config.from_env()
        mock_load.assert_called_once()


class TestConfigValidate:
    """Tests for Config.validate()."""

    def test_defaults_are_valid(self):
        assert Config().validate() == []

    def test_empty_url(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            Config(endpoint_url="").validate()

    @pytest.mark.parametrize("url", ["localhost:8000", "ftp://host/x", "http://", "not a url"])
    def test_invalid_url(self, url):
        with pytest.raises(ValueError, match="not a valid http"):
            Config(endpoint_url=url).validate()

    def test_remote_http_warns(self):
        warnings = Config(endpoint_url="http://stt.example.com/v1/audio/transcriptions").validate()
        assert any("HTTPS" in w for w in warnings)

    def test_remote_https_ok(self):
        assert Config(endpoint_url="https://stt.example.com/v1/audio/transcriptions").validate() == []

    @pytest.mark.parametrize("model", ["", "../etc/passwd", "model name", "a/b"])
    def test_invalid_model(self, model):
        with pytest.raises(ValueError, match="VOICETYPE_MODEL"):
            Config(model=model).validate()

    def test_groq_requires_key(self):
        config = Config(endpoint_url="https://api.groq.com/openai/v1/audio/transcriptions")
        with pytest.raises(ValueError, match="API key is required"):
            config.validate()

    def test_groq_with_key(self):
        config = Config(
            endpoint_url="https://api.groq.com/openai/v1/audio/transcriptions", api_key="gsk"
        )
        assert config.validate() == []

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError, match="VOICETYPE_TIMEOUT"):
            Config(timeout=0).validate()

    def test_long_timeout_warns(self):
        assert any("timeout" in w for w in Config(timeout=300).validate())

    @pytest.mark.parametrize("temperature", [-0.1, 1.5])
    def test_temperature_range(self, temperature):
        with pytest.raises(ValueError, match="VOICETYPE_TEMPERATURE"):
            Config(temperature=temperature).validate()

    def test_sample_rate_must_be_positive(self):
        with pytest.raises(ValueError, match="VOICETYPE_SAMPLE_RATE"):
            Config(sample_rate=0).validate()

    def test_unusual_sample_rate_warns(self):
        assert any("sample rate" in w for w in Config(sample_rate=12345).validate())

    def test_audio_format(self):
        with pytest.raises(ValueError, match="VOICETYPE_AUDIO_FORMAT"):
            Config(audio_format="mp3").validate()

    @pytest.mark.parametrize("threshold", [0.0, -0.5, 1.01])
    def test_silence_threshold_range(self, threshold):
        with pytest.raises(ValueError, match="VOICETYPE_SILENCE_THRESHOLD"):
            Config(silence_threshold=threshold).validate()

    def test_silence_duration(self):
        with pytest.raises(ValueError, match="VOICETYPE_SILENCE_DURATION_MS"):
            Config(silence_duration_ms=0).validate()

    def test_history_max(self):
        with pytest.raises(ValueError, match="VOICETYPE_HISTORY_MAX"):
            Config(history_max_entries=0).validate()

    def test_custom_commands_without_command_mode_warns(self):
        warnings = Config(custom_commands={"go back": "undo"}).validate()
        assert any("COMMAND_MODE" in w for w in warnings)
        assert Config(custom_commands={"go back": "undo"}, command_mode=True).validate() == []


class TestIsLocalhost:

    def test_local_names(self):
        assert is_localhost("http://localhost:8000/x")
        assert is_localhost("http://127.0.0.1:11434")
        assert is_localhost("http://stt.localhost/x")

    def test_remote(self):
        assert not is_localhost("http://example.com")


class TestConfigProperties:
    """Property-based tests for numeric ranges."""

    @given(st.floats(min_value=0.0001, max_value=1.0))
    def test_valid_thresholds_accepted(self, threshold):
        Config(silence_threshold=threshold).validate()

    @given(st.integers(min_value=1, max_value=600000))
    def test_positive_durations_accepted(self, duration):
        Config(silence_duration_ms=duration).validate()

    @given(st.floats(min_value=0.0, max_value=1.0))
    def test_valid_temperatures_accepted(self, temperature):
        Config(temperature=temperature).validate()
