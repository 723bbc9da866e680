"""
Delivery Module
Inserts transcribed text into the focused application through the clipboard,
always putting the user's previous clipboard content back afterwards.
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Sequence

import pyperclip

from voicetype.command_parser import CommandSegment, Segment, TextSegment
from voicetype.exceptions import OutputError
from voicetype.platform.base import KeystrokeSimulatorBase

logger = logging.getLogger(__name__)


DEFAULT_PASTE_DELAY = 0.05
DEFAULT_RESTORE_DELAY = 0.2


class Clipboard:
    """System clipboard access via pyperclip."""

    def read_text(self) -> str:
        """
        Get current clipboard content.

        Returns:
            Current clipboard text content ("" if empty)

        Raises:
            OutputError: If clipboard read fails
        """
        try:
            return pyperclip.paste() or ""
        except Exception as e:
            raise OutputError(f"Failed to read clipboard: {e}") from e

    def write_text(self, text: str) -> None:
        """
        Copy text to system clipboard.

        Raises:
            OutputError: If clipboard write fails
        """
        try:
            pyperclip.copy(text)
        except Exception as e:
            raise OutputError(f"Failed to copy to clipboard: {e}") from e


class DeliveryTransaction:
    """
    Pastes text and sends command keystrokes to the active application.

    Every delivery runs inside a clipboard snapshot: the previous clipboard
    text is read first and written back on every exit path, including when
    the keystroke simulator raises. Not safe to run concurrently with itself.
    """

    def __init__(
        self,
        clipboard: Clipboard,
        keystrokes: KeystrokeSimulatorBase,
        paste_delay: float = DEFAULT_PASTE_DELAY,
        restore_delay: float = DEFAULT_RESTORE_DELAY,
    ):
        """
        Initialize delivery.

        Args:
            clipboard: Clipboard to borrow
            keystrokes: Platform keystroke simulator
            paste_delay: Wait after writing the clipboard, before pasting (seconds)
            restore_delay: Wait after pasting, before restoring (seconds)
        """
        self.clipboard = clipboard
        self.keystrokes = keystrokes
        self.paste_delay = paste_delay
        self.restore_delay = restore_delay

    @contextmanager
    def snapshot(self) -> Iterator[str]:
        """
        Borrow the clipboard for the duration of the block.

        The saved text is restored whether the block succeeds or raises. A
        failure to restore is reported only if the block itself succeeded, so
        it never hides the original error.

        Raises:
            OutputError: If the clipboard cannot be read (nothing is written)
        """
        saved = self.clipboard.read_text()
        try:
            yield saved
        except BaseException:
            try:
                self.clipboard.write_text(saved)
            except OutputError as restore_error:
                logger.error(f"Clipboard restore failed: {restore_error}")
            raise
        else:
            self.clipboard.write_text(saved)

    def deliver(self, text: str) -> None:
        """
        Paste text into the active application.

        Blank text is ignored without touching the clipboard.

        Raises:
            OutputError: If the clipboard or the paste keystroke fails
        """
        if not text or not text.strip():
            return
        self.apply([TextSegment(text)])

    def apply(self, segments: Sequence[Segment]) -> None:
        """
        Deliver parsed segments in order inside one clipboard snapshot.

        Text segments are pasted (blank ones skipped); command segments are
        sent as keystrokes. Commands this platform cannot send are skipped
        with a warning.

        The snapshot covers copy and cut too, so whatever they put on the
        clipboard is replaced by the saved text once the segments are done.

        Raises:
            OutputError: If the clipboard or a keystroke fails
        """
        actions = [
            segment for segment in segments
            if isinstance(segment, CommandSegment) or segment.value.strip()
        ]
        if not actions:
            return

        with self.snapshot():
            for segment in actions:
                if isinstance(segment, TextSegment):
                    self._paste(segment.value)
                elif self.keystrokes.supports(segment.command):
                    self.keystrokes.press_command(segment.command)
                else:
                    logger.warning(f"Skipping unknown command: {segment.command}")

    def _paste(self, text: str) -> None:
        self.clipboard.write_text(text)
        time.sleep(self.paste_delay)
        self.keystrokes.simulate_paste()
        # Let the target app read the clipboard before it is restored
        time.sleep(self.restore_delay)
