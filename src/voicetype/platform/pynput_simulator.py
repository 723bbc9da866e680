"""
pynput Keystroke Simulator

Shared keyboard-controller implementation for Windows and Linux (X11).
"""

import logging
from typing import Dict, Optional, Sequence, Tuple, Union

from pynput.keyboard import Controller, Key

from voicetype.platform.base import KeystrokeSimulatorBase
from voicetype.exceptions import OutputError

logger = logging.getLogger(__name__)


KeyLike = Union[Key, str]

# Command identifier -> (modifiers, key)
KEY_COMBOS: Dict[str, Tuple[Sequence[KeyLike], KeyLike]] = {
    "newline": ((), Key.enter),
    "return": ((), Key.enter),
    "tab": ((), Key.tab),
    "space": ((), Key.space),
    "backspace": ((), Key.backspace),
    "delete": ((), Key.delete),
    "escape": ((), Key.esc),
    "selectAll": ((Key.ctrl,), "a"),
    "undo": ((Key.ctrl,), "z"),
    "redo": ((Key.ctrl, Key.shift), "z"),
    "copy": ((Key.ctrl,), "c"),
    "paste": ((Key.ctrl,), "v"),
    "cut": ((Key.ctrl,), "x"),
}


class PynputKeystrokeSimulator(KeystrokeSimulatorBase):
    """Sends keystrokes with a pynput keyboard controller."""

    key_combos = KEY_COMBOS

    def __init__(self, keyboard: Optional[Controller] = None):
        """
        Initialize simulator.

        Args:
            keyboard: Keyboard controller; created if None
        """
        self._keyboard = keyboard if keyboard is not None else Controller()

    def _press_combo(self, modifiers: Sequence[KeyLike], key: KeyLike) -> None:
        pressed = []
        try:
            for modifier in modifiers:
                self._keyboard.press(modifier)
                pressed.append(modifier)
            self._keyboard.press(key)
            self._keyboard.release(key)
        except Exception as e:
            raise OutputError(f"Failed to send keystroke: {e}") from e
        finally:
            # Never leave a modifier held down
            for modifier in reversed(pressed):
                try:
                    self._keyboard.release(modifier)
                except Exception as e:
                    logger.warning(f"Failed to release {modifier}: {e}")

    def simulate_paste(self) -> None:
        self._press_combo(*self.key_combos["paste"])

    def press_command(self, command: str) -> None:
        if command not in self.key_combos:
            raise ValueError(f"Unsupported command: {command}")
        self._press_combo(*self.key_combos[command])
