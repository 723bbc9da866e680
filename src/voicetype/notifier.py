"""
Notifier Module
Desktop notifications and console state display.
"""

import logging
import shutil
import subprocess
import threading

from voicetype.interfaces import Notifier, RecordingState, StatusDisplay
from voicetype.platform import get_platform

logger = logging.getLogger(__name__)


def _escape_applescript(text: str) -> str:
    # Handle backslash first, then quotes
    return text.replace('\\', '\\\\').replace('"', '\\"')


def build_notification_command(title: str, body: str, platform: str):
    """
    Build the command that shows a desktop notification.

    Returns:
        Argument list, or None if the platform has no supported notifier.
    """
    if platform == "macos":
        script = (
            f'display notification "{_escape_applescript(body)}" '
            f'with title "{_escape_applescript(title)}"'
        )
        return ["osascript", "-e", script]
    if platform == "linux" and shutil.which("notify-send"):
        return ["notify-send", "--app-name=VoiceType", title, body]
    return None


class DesktopNotifier(Notifier):
    """Shows desktop notifications without blocking the caller."""

    def __init__(self, enabled: bool = True):
        """
        Initialize notifier.

        Args:
            enabled: If False, notifications are only logged
        """
        self.enabled = enabled
        self._platform = get_platform()

    def notify(self, title: str, body: str) -> None:
        logger.info(f"Notification: {title}: {body}")
        print(f"[{title}] {body}")
        if not self.enabled:
            return

        cmd = build_notification_command(title, body, self._platform)
        if cmd is None:
            return

        def show():
            try:
                subprocess.run(cmd, capture_output=True, timeout=2)
            except (OSError, subprocess.SubprocessError) as e:
                logger.debug(f"Desktop notification failed: {e}")
        threading.Thread(target=show, daemon=True).start()


STATE_MESSAGES = {
    RecordingState.RECORDING: "[Recording] Started... Speak now.",
    RecordingState.PROCESSING: "[Transcribing] Sending audio to STT endpoint...",
    RecordingState.IDLE: "[Ready] Waiting for hotkey.",
}


class ConsoleStatusDisplay(StatusDisplay):
    """Prints recording state changes to the console."""

    def on_state_change(self, state: RecordingState) -> None:
        logger.debug(f"State changed: {state.value}")
        print(STATE_MESSAGES[state])
