"""
Collaborator Interfaces

Abstract base classes for the pieces the recording orchestrator drives but
does not own: audio capture, state display and user notifications.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union


class RecordingState(Enum):
    """Recording lifecycle states."""
    IDLE = "idle"
    RECORDING = "recording"
    PROCESSING = "processing"


@dataclass(frozen=True)
class AudioConfig:
    """Capture settings passed to an AudioSource."""

    device: Optional[Union[str, int]] = None  # None = system default
    sample_rate: int = 16000
    channels: int = 1
    format: str = "wav"  # Encoding sent to the STT endpoint


ChunkListener = Callable[[bytes], None]


class AudioSource(ABC):
    """Produces 16-bit signed mono PCM while capturing."""

    @abstractmethod
    def add_chunk_listener(self, listener: ChunkListener) -> None:
        """Register a callback receiving each captured chunk in arrival order."""
        pass

    @abstractmethod
    def start_capture(self, config: AudioConfig) -> None:
        """
        Begin capturing.

        Raises:
            AudioError: If the device cannot be opened
        """
        pass

    @abstractmethod
    def stop_capture(self) -> bytes:
        """
        Stop capturing.

        Returns:
            All PCM captured since start_capture().
        """
        pass


class StatusDisplay(ABC):
    """Shows the current recording state (tray icon, console, ...)."""

    @abstractmethod
    def on_state_change(self, state: RecordingState) -> None:
        """
        Show a new state.

        Called on every transition, from whichever thread made it. Exceptions
        are logged by the orchestrator and otherwise ignored.
        """
        pass


class Notifier(ABC):
    """Shows one-off messages to the user. Fire-and-forget."""

    @abstractmethod
    def notify(self, title: str, body: str) -> None:
        """
        Show a message without blocking the caller.

        Args:
            title: Short headline, e.g. "Connection Failed"
            body: One or two sentences telling the user what to do
        """
        pass
