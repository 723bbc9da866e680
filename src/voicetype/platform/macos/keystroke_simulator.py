"""
macOS Keystroke Simulator

Sends paste and editing keystrokes through AppleScript (System Events).
"""

import subprocess

from voicetype.platform.base import KeystrokeSimulatorBase
from voicetype.exceptions import OutputError


# Command identifier -> System Events clause
KEYSTROKE_MAP = {
    "newline": "key code 36",  # Return
    "return": "key code 36",
    "tab": "key code 48",
    "space": "key code 49",
    "backspace": "key code 51",
    "delete": "key code 117",  # Forward delete
    "escape": "key code 53",
    "selectAll": 'keystroke "a" using command down',
    "undo": 'keystroke "z" using command down',
    "redo": 'keystroke "z" using {command down, shift down}',
    "copy": 'keystroke "c" using command down',
    "paste": 'keystroke "v" using command down',
    "cut": 'keystroke "x" using command down',
}

ACCESSIBILITY_HINT = (
    "Grant Accessibility access to your terminal in "
    "System Settings > Privacy & Security > Accessibility"
)


class MacOSKeystrokeSimulator(KeystrokeSimulatorBase):
    """Sends keystrokes to the active app on macOS."""

    def _run_system_events(self, clause: str) -> None:
        script = f'tell application "System Events" to {clause}'
        try:
            subprocess.run(
                ['osascript', '-e', script],
                check=True,
                capture_output=True,
                timeout=10
            )
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode() if e.stderr else str(e)
            raise OutputError(f"Failed to send keystroke: {stderr.strip()}. {ACCESSIBILITY_HINT}")
        except subprocess.TimeoutExpired:
            raise OutputError("Keystroke operation timed out")
        except FileNotFoundError:
            raise OutputError("osascript not found - this module requires macOS")

    def simulate_paste(self) -> None:
        self._run_system_events(KEYSTROKE_MAP["paste"])

    def press_command(self, command: str) -> None:
        if command not in KEYSTROKE_MAP:
            raise ValueError(f"Unsupported command: {command}")
        self._run_system_events(KEYSTROKE_MAP[command])
