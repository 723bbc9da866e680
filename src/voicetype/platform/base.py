"""
Platform Abstraction - Base Classes

This module defines the abstract base class for simulating keystrokes in the
focused application. Each platform (macOS, Windows, Linux) implements it
with platform-appropriate code.
"""

from abc import ABC, abstractmethod
from typing import FrozenSet


# Command identifiers produced by the command parser
COMMAND_IDS: FrozenSet[str] = frozenset({
    "newline",
    "return",
    "tab",
    "space",
    "backspace",
    "delete",
    "escape",
    "selectAll",
    "undo",
    "redo",
    "copy",
    "paste",
    "cut",
})


class KeystrokeSimulatorBase(ABC):
    """
    Abstract base class for keystroke simulation.

    Each platform implements this to paste the clipboard and send editing
    keystrokes to the active application:
    - macOS: AppleScript via osascript
    - Windows/Linux: pynput keyboard controller
    """

    def supports(self, command: str) -> bool:
        """Whether a command identifier can be sent on this platform."""
        return command in COMMAND_IDS

    @abstractmethod
    def simulate_paste(self) -> None:
        """
        Send the platform paste shortcut (Cmd+V / Ctrl+V).

        Raises:
            OutputError: If the keystroke cannot be sent, e.g. missing
                accessibility permission
        """
        pass

    @abstractmethod
    def press_command(self, command: str) -> None:
        """
        Send the keystroke for a command identifier.

        Args:
            command: One of COMMAND_IDS

        Raises:
            OutputError: If the keystroke cannot be sent
            ValueError: If the command is not supported
        """
        pass
