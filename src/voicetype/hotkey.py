"""
Hotkey Module
Global toggle hotkey via pynput.
"""

import logging
import threading
from typing import Callable, Optional

from pynput import keyboard

from voicetype.exceptions import HotkeyError

logger = logging.getLogger(__name__)


MODIFIER_NAMES = {
    "cmd": "<cmd>",
    "command": "<cmd>",
    "super": "<cmd>",
    "win": "<cmd>",
    "ctrl": "<ctrl>",
    "control": "<ctrl>",
    "shift": "<shift>",
    "alt": "<alt>",
    "option": "<alt>",
}

SPECIAL_KEYS = {"space", "enter", "tab", "esc"} | {f"f{i}" for i in range(1, 13)}


def parse_hotkey(hotkey: str) -> str:
    """
    Convert a hotkey like "ctrl+shift+v" to pynput's "<ctrl>+<shift>+v".

    Raises:
        HotkeyError: If the hotkey is empty or has no non-modifier key
    """
    parts = [part.strip().lower() for part in (hotkey or "").split("+") if part.strip()]
    if not parts:
        raise HotkeyError("Hotkey cannot be empty")

    converted = []
    for part in parts:
        if part in MODIFIER_NAMES:
            converted.append(MODIFIER_NAMES[part])
        elif part in SPECIAL_KEYS:
            converted.append(f"<{part}>")
        elif len(part) == 1:
            converted.append(part)
        else:
            raise HotkeyError(f"Unknown key '{part}' in hotkey '{hotkey}'")

    if all(part in MODIFIER_NAMES for part in parts):
        raise HotkeyError(f"Hotkey '{hotkey}' needs a non-modifier key")
    return "+".join(converted)


def describe_hotkey(hotkey: str) -> str:
    """Human-readable form, e.g. "Ctrl+Shift+V"."""
    return "+".join(part.strip().capitalize() for part in hotkey.split("+"))


class HotkeyListener:
    """Calls on_activate on a worker thread each time the hotkey is pressed."""

    def __init__(self, hotkey: str, on_activate: Callable[[], None]):
        """
        Initialize listener.

        Args:
            hotkey: Hotkey like "ctrl+shift+v"
            on_activate: Called on a worker thread for every activation

        Raises:
            HotkeyError: If the hotkey cannot be parsed
        """
        self.hotkey = hotkey
        self.on_activate = on_activate
        self._pynput_hotkey = parse_hotkey(hotkey)
        self._listener: Optional[keyboard.GlobalHotKeys] = None

    def _handle_activate(self) -> None:
        # Keep the key listener thread free while recording is processed
        threading.Thread(target=self.on_activate, daemon=True).start()

    def start(self) -> None:
        """
        Start listening for the hotkey.

        Raises:
            HotkeyError: If the listener cannot be started
        """
        try:
            self._listener = keyboard.GlobalHotKeys({self._pynput_hotkey: self._handle_activate})
            self._listener.start()
        except Exception as e:
            self._listener = None
            raise HotkeyError(
                f"Failed to start hotkey listener: {e}\n"
                "On macOS: Grant Accessibility permission in System Settings.\n"
                "On Linux: Ensure you have X11 or proper Wayland permissions."
            ) from e
        logger.info(f"Hotkey listener started ({self.description})")

    def stop(self) -> None:
        """Stop listening and clean up."""
        if self._listener is not None:
            self._listener.stop()
            self._listener = None

    @property
    def description(self) -> str:
        return describe_hotkey(self.hotkey)
