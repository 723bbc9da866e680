"""
Pytest configuration and fixtures for voicetype tests.

IMPORTANT: This file sets up mocks for hardware-facing modules BEFORE any test
imports happen, so the suite runs on headless machines without PortAudio or
a display server.
"""

import io
import sys
from functools import lru_cache
from unittest.mock import MagicMock

import numpy as np
from scipy.io import wavfile


def _setup_global_mocks():
    """
    Set up mocks for modules that may not be available during testing.

    - sounddevice raises OSError at import when the PortAudio library is missing
    - pynput raises ImportError at import when no display server is reachable
    """
    try:
        import sounddevice  # noqa: F401
    except (ImportError, OSError):
        mock_sd = MagicMock()
        # Must be a real exception class so `except sd.PortAudioError` works
        mock_sd.PortAudioError = type("PortAudioError", (Exception,), {})
        sys.modules['sounddevice'] = mock_sd

    try:
        import pynput.keyboard  # noqa: F401
    except Exception:
        mock_pynput = MagicMock()
        sys.modules['pynput'] = mock_pynput
        sys.modules['pynput.keyboard'] = mock_pynput.keyboard


# Run mocks setup immediately when conftest is loaded
_setup_global_mocks()


import pytest


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (may require hardware)"
    )
    config.addinivalue_line(
        "markers", "requires_microphone: skip unless an audio input device is present"
    )


# =============================================================================
# LOGGING PROTECTION
# =============================================================================

import logging

@pytest.fixture(autouse=True)
def _protect_logging_handlers():
    """
    Protect logging handlers from being corrupted by mocks.

    Some tests use MagicMock which can inadvertently replace logging handler
    attributes (like 'level') with MagicMock objects, causing TypeError when
    Python's logging module tries to compare log levels.
    """
    def _fix_handler_levels():
        """Ensure all logging handlers have integer levels."""
        for handler in logging.root.handlers[:]:
            if not isinstance(handler.level, int):
                handler.level = logging.NOTSET
        for name in list(logging.Logger.manager.loggerDict.keys()):
            logger = logging.getLogger(name)
            for handler in logger.handlers[:]:
                if not isinstance(handler.level, int):
                    handler.level = logging.NOTSET

    _fix_handler_levels()
    yield
    _fix_handler_levels()


# =============================================================================
# CACHED TEST DATA GENERATION
# =============================================================================

@lru_cache(maxsize=16)
def create_test_pcm(duration_sec: float = 1.0, sample_rate: int = 16000,
                    amplitude: float = 0.5) -> bytes:
    """
    Create 16-bit mono PCM of a 440 Hz tone (cached for performance).

    Args:
        duration_sec: Duration of audio in seconds.
        sample_rate: Sample rate in Hz.
        amplitude: Peak amplitude in [0, 1]; 0 gives digital silence.

    Returns:
        Raw little-endian PCM bytes.
    """
    t = np.linspace(0, duration_sec, int(sample_rate * duration_sec), endpoint=False)
    audio_data = (np.sin(2 * np.pi * 440 * t) * 32767 * amplitude).astype("<i2")
    return audio_data.tobytes()


@lru_cache(maxsize=16)
def create_test_audio(duration_sec: float = 1.0, sample_rate: int = 16000) -> bytes:
    """Create valid WAV audio bytes (cached for performance)."""
    samples = np.frombuffer(create_test_pcm(duration_sec, sample_rate), dtype="<i2")
    wav_buffer = io.BytesIO()
    wavfile.write(wav_buffer, sample_rate, samples)
    wav_buffer.seek(0)
    return wav_buffer.getvalue()


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def test_pcm():
    """Provide cached PCM bytes (1 second duration)."""
    return create_test_pcm(1.0, 16000)


@pytest.fixture
def test_audio():
    """Provide cached WAV bytes (1 second duration)."""
    return create_test_audio(1.0, 16000)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every VOICETYPE_* and provider key variable for a single test."""
    import os
    for name in list(os.environ):
        if name.startswith("VOICETYPE_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return monkeypatch


# =============================================================================
# HARDWARE DETECTION FIXTURES
# =============================================================================

@pytest.fixture(scope="session")
def has_microphone() -> bool:
    """Check if a microphone is available."""
    try:
        import sounddevice as sd
        devices = sd.query_devices()
        input_devices = [d for d in devices if d['max_input_channels'] > 0]
        return len(input_devices) > 0
    except Exception:
        return False


@pytest.fixture(autouse=True)
def _auto_skip_by_marker(request, has_microphone):
    """Automatically skip tests based on markers."""
    if request.node.get_closest_marker("requires_microphone") and not has_microphone:
        pytest.skip("No microphone available")
