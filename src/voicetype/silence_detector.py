"""
Silence Detector Module
Watches the captured PCM stream and signals once the speaker has gone quiet.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

logger = logging.getLogger(__name__)


DEFAULT_THRESHOLD = 0.005
DEFAULT_DURATION_MS = 3000


def compute_rms(chunk: bytes) -> float:
    """
    Root-mean-square amplitude of a 16-bit little-endian PCM chunk.

    Samples are normalized to [-1, 1]. A trailing odd byte is ignored and an
    empty chunk has an RMS of 0.
    """
    usable = len(chunk) - (len(chunk) % 2)
    if usable == 0:
        return 0.0
    samples = np.frombuffer(chunk[:usable], dtype="<i2").astype(np.float64) / 32768.0
    return float(np.sqrt(np.mean(samples * samples)))


@dataclass
class SilenceDetectorState:
    """Per-session detector fields, cleared by SilenceDetector.reset()."""

    has_speech: bool = False
    silence_started_at: Optional[float] = None
    emitted: bool = False


class SilenceDetector:
    """Emits a single silence signal after speech is followed by a long pause."""

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        duration_ms: int = DEFAULT_DURATION_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize silence detector.

        Args:
            threshold: RMS level at or above which a chunk counts as speech
            duration_ms: How long the silence must last before signalling
            clock: Source of timestamps in seconds (monotonic by default)
        """
        self.threshold = threshold
        self.duration_ms = duration_ms
        self._clock = clock
        self._state = SilenceDetectorState()
        self._callbacks: List[Callable[[], None]] = []
        self._lock = threading.Lock()

    def on_silence(self, callback: Callable[[], None]) -> None:
        """Register a callback fired when silence is detected."""
        self._callbacks.append(callback)

    def process_chunk(self, chunk: bytes, now: Optional[float] = None) -> bool:
        """
        Feed one captured chunk to the detector.

        Chunks must be fed in capture order.

        Args:
            chunk: Raw 16-bit signed mono PCM
            now: Timestamp of the chunk in seconds; read from the clock if None

        Returns:
            True if this chunk triggered the silence signal.
        """
        if now is None:
            now = self._clock()
        rms = compute_rms(chunk)

        with self._lock:
            state = self._state
            if rms >= self.threshold:
                state.has_speech = True
                state.silence_started_at = None
                state.emitted = False
                return False

            # Quiet before any speech never starts the timer
            if not state.has_speech:
                return False

            if state.silence_started_at is None:
                state.silence_started_at = now
                return False

            if state.emitted:
                return False

            elapsed_ms = (now - state.silence_started_at) * 1000.0
            if elapsed_ms < self.duration_ms:
                return False

            state.emitted = True
            callbacks = list(self._callbacks)

        logger.debug(f"Silence detected after {elapsed_ms:.0f} ms")
        for callback in callbacks:
            callback()
        return True

    def reset(self) -> None:
        """Clear all session state. Call at the start of every recording."""
        with self._lock:
            self._state = SilenceDetectorState()

    @property
    def state(self) -> SilenceDetectorState:
        """Copy of the current session state."""
        with self._lock:
            return SilenceDetectorState(
                has_speech=self._state.has_speech,
                silence_started_at=self._state.silence_started_at,
                emitted=self._state.emitted,
            )
