"""
Linux Keystroke Simulator

Sends paste and editing keystrokes to the active application.

On X11: Uses pynput with xdotool as fallback.
On Wayland: Uses wtype (pynput and xdotool cannot inject input there).
"""

import logging
import os
import shutil
import subprocess
from typing import Dict, List, Optional, Tuple

from pynput.keyboard import Controller

from voicetype.platform.pynput_simulator import PynputKeystrokeSimulator
from voicetype.exceptions import OutputError

logger = logging.getLogger(__name__)


# Command identifier -> xdotool key spec
XDOTOOL_KEYS: Dict[str, str] = {
    "newline": "Return",
    "return": "Return",
    "tab": "Tab",
    "space": "space",
    "backspace": "BackSpace",
    "delete": "Delete",
    "escape": "Escape",
    "selectAll": "ctrl+a",
    "undo": "ctrl+z",
    "redo": "ctrl+shift+z",
    "copy": "ctrl+c",
    "paste": "ctrl+v",
    "cut": "ctrl+x",
}

# Command identifier -> (wtype modifiers, key). Plain keys use -k, letters -P/-p
WTYPE_KEYS: Dict[str, Tuple[Tuple[str, ...], str]] = {
    "newline": ((), "Return"),
    "return": ((), "Return"),
    "tab": ((), "Tab"),
    "space": ((), "space"),
    "backspace": ((), "BackSpace"),
    "delete": ((), "Delete"),
    "escape": ((), "Escape"),
    "selectAll": (("ctrl",), "a"),
    "undo": (("ctrl",), "z"),
    "redo": (("ctrl", "shift"), "z"),
    "copy": (("ctrl",), "c"),
    "paste": (("ctrl",), "v"),
    "cut": (("ctrl",), "x"),
}


def get_display_server() -> str:
    """
    Get the current display server type.

    Returns:
        "wayland", "x11", or "unknown"
    """
    session_type = os.environ.get("XDG_SESSION_TYPE", "").lower()
    if session_type == "wayland":
        return "wayland"
    elif session_type == "x11":
        return "x11"
    elif os.environ.get("WAYLAND_DISPLAY"):
        return "wayland"
    elif os.environ.get("DISPLAY"):
        return "x11"
    return "unknown"


def is_tool_available(tool_name: str) -> bool:
    """
    Check if a command-line tool is available in PATH.

    Args:
        tool_name: Name of the tool to check (e.g., "xdotool", "wtype")

    Returns:
        True if the tool is available, False otherwise.
    """
    return shutil.which(tool_name) is not None


def wtype_args(command: str) -> List[str]:
    """Build the wtype argument list for a command identifier."""
    modifiers, key = WTYPE_KEYS[command]
    if not modifiers:
        return ["wtype", "-k", key]
    args = ["wtype"]
    for modifier in modifiers:
        args.extend(["-M", modifier])
    args.extend(["-P", key, "-p", key])
    for modifier in reversed(modifiers):
        args.extend(["-m", modifier])
    return args


class LinuxKeystrokeSimulator(PynputKeystrokeSimulator):
    """
    Sends keystrokes on Linux.

    Supports both X11 and Wayland display servers with appropriate fallbacks:
    - X11: pynput (primary), xdotool (fallback)
    - Wayland: wtype
    """

    def __init__(self, keyboard: Optional[Controller] = None):
        self._display_server = get_display_server()
        self._has_xdotool = is_tool_available("xdotool")
        self._has_wtype = is_tool_available("wtype")

        # pynput may fail to connect to a display (e.g. pure Wayland)
        try:
            super().__init__(keyboard)
        except Exception as e:
            logger.warning(f"Could not initialize pynput keyboard controller: {e}")
            self._keyboard = None

        logger.debug(
            f"LinuxKeystrokeSimulator initialized: display_server={self._display_server}, "
            f"xdotool={self._has_xdotool}, wtype={self._has_wtype}, "
            f"pynput={'available' if self._keyboard else 'unavailable'}"
        )

    def simulate_paste(self) -> None:
        self.press_command("paste")

    def press_command(self, command: str) -> None:
        if command not in XDOTOOL_KEYS:
            raise ValueError(f"Unsupported command: {command}")

        if self._display_server == "wayland":
            if not self._has_wtype:
                raise OutputError(
                    "Cannot send keystrokes on Wayland: wtype is not installed. "
                    "Please install wtype: https://github.com/atx/wtype"
                )
            self._run(wtype_args(command), "wtype")
            return

        # On X11, try pynput first, then xdotool as fallback
        if self._keyboard is not None:
            try:
                super().press_command(command)
                return
            except OutputError as e:
                if not self._has_xdotool:
                    raise
                logger.warning(f"pynput keystroke failed, trying xdotool fallback: {e}")

        if self._has_xdotool:
            self._run(["xdotool", "key", "--clearmodifiers", XDOTOOL_KEYS[command]], "xdotool")
            return

        raise OutputError(
            "Failed to send keystroke: pynput unavailable and xdotool not found. "
            "Please install xdotool: sudo apt install xdotool"
        )

    def _run(self, cmd: List[str], tool: str) -> None:
        try:
            result = subprocess.run(cmd, capture_output=True, timeout=5)
            if result.returncode != 0:
                raise OutputError(f"{tool} failed: {result.stderr.decode('utf-8')}")
        except subprocess.TimeoutExpired:
            raise OutputError(f"{tool} timed out")
        except FileNotFoundError:
            raise OutputError(f"{tool} not found")
