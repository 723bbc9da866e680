"""
Tests for the Delivery Module

Verifies that the clipboard is always restored, that blank text never
touches the clipboard, and that segments are delivered in order.
"""

import unittest
from unittest.mock import MagicMock, patch

import pytest

from voicetype.command_parser import CommandSegment, TextSegment
from voicetype.delivery import Clipboard, DeliveryTransaction
from voicetype.exceptions import OutputError
from voicetype.platform.base import KeystrokeSimulatorBase


class FakeClipboard:
    """In-memory clipboard that records every read and write."""

    def __init__(self, content="previous", fail_read=False, fail_write_after=None):
        self.content = content
        self.fail_read = fail_read
        self.fail_write_after = fail_write_after
        self.reads = 0
        self.writes = []

    def read_text(self):
        self.reads += 1
        if self.fail_read:
            raise OutputError("clipboard locked")
        return self.content

    def write_text(self, text):
        if self.fail_write_after is not None and len(self.writes) >= self.fail_write_after:
            raise OutputError("clipboard write failed")
        self.writes.append(text)
        self.content = text


class RecordingKeystrokes(KeystrokeSimulatorBase):
    """Keystroke simulator that records what it was asked to send."""

    def __init__(self, clipboard, fail_paste=False):
        self.clipboard = clipboard
        self.fail_paste = fail_paste
        self.events = []

    def simulate_paste(self):
        if self.fail_paste:
            raise OutputError("paste blocked")
        self.events.append(("paste", self.clipboard.content))

    def press_command(self, command):
        self.events.append(("command", command))


class SelectionKeystrokes(RecordingKeystrokes):
    """Puts a selection on the clipboard for copy and cut, like a real app."""

    def __init__(self, clipboard, selection):
        super().__init__(clipboard)
        self.selection = selection

    def press_command(self, command):
        super().press_command(command)
        if command in ("copy", "cut"):
            self.clipboard.content = self.selection


@patch("voicetype.delivery.time.sleep")
class TestDeliver(unittest.TestCase):
    """Tests for DeliveryTransaction.deliver()."""

    def setUp(self):
        self.clipboard = FakeClipboard("previous")
        self.keystrokes = RecordingKeystrokes(self.clipboard)
        self.delivery = DeliveryTransaction(self.clipboard, self.keystrokes)

    def test_pastes_and_restores(self, mock_sleep):
        self.delivery.deliver("hello world")

        self.assertEqual(self.keystrokes.events, [("paste", "hello world")])
        self.assertEqual(self.clipboard.writes, ["hello world", "previous"])
        self.assertEqual(self.clipboard.content, "previous")

    def test_waits_before_and_after_paste(self, mock_sleep):
        delivery = DeliveryTransaction(self.clipboard, self.keystrokes, paste_delay=0.1, restore_delay=0.3)
        delivery.deliver("hi")
        self.assertEqual([c.args[0] for c in mock_sleep.call_args_list], [0.1, 0.3])

    def test_empty_text_touches_nothing(self, mock_sleep):
        self.delivery.deliver("")
        self.assertEqual(self.clipboard.reads, 0)
        self.assertEqual(self.clipboard.writes, [])
        self.assertEqual(self.keystrokes.events, [])

    def test_whitespace_text_touches_nothing(self, mock_sleep):
        self.delivery.deliver("   \n")
        self.assertEqual(self.clipboard.reads, 0)
        self.assertEqual(self.clipboard.writes, [])

    def test_restores_when_paste_fails(self, mock_sleep):
        keystrokes = RecordingKeystrokes(self.clipboard, fail_paste=True)
        delivery = DeliveryTransaction(self.clipboard, keystrokes)

        with self.assertRaises(OutputError) as ctx:
            delivery.deliver("hello")

        self.assertEqual(str(ctx.exception), "paste blocked")
        self.assertEqual(self.clipboard.content, "previous")
        self.assertEqual(self.clipboard.writes[-1], "previous")

    def test_read_failure_writes_nothing(self, mock_sleep):
        clipboard = FakeClipboard(fail_read=True)
        delivery = DeliveryTransaction(clipboard, RecordingKeystrokes(clipboard))

        with self.assertRaises(OutputError):
            delivery.deliver("hello")

        self.assertEqual(clipboard.writes, [])

    def test_restore_failure_does_not_mask_original_error(self, mock_sleep):
        clipboard = FakeClipboard("previous", fail_write_after=1)
        keystrokes = RecordingKeystrokes(clipboard, fail_paste=True)
        delivery = DeliveryTransaction(clipboard, keystrokes)

        with self.assertRaises(OutputError) as ctx:
            delivery.deliver("hello")

        self.assertEqual(str(ctx.exception), "paste blocked")

    def test_restore_failure_after_success_is_raised(self, mock_sleep):
        clipboard = FakeClipboard("previous", fail_write_after=1)
        delivery = DeliveryTransaction(clipboard, RecordingKeystrokes(clipboard))

        with self.assertRaises(OutputError) as ctx:
            self.assertIsNone(delivery.deliver("hello"))

        self.assertEqual(str(ctx.exception), "clipboard write failed")

    def test_empty_previous_clipboard_restored(self, mock_sleep):
        clipboard = FakeClipboard("")
        delivery = DeliveryTransaction(clipboard, RecordingKeystrokes(clipboard))
        delivery.deliver("text")
        self.assertEqual(clipboard.content, "")


@patch("voicetype.delivery.time.sleep")
class TestApply(unittest.TestCase):
    """Tests for DeliveryTransaction.apply() with command segments."""

    def setUp(self):
        self.clipboard = FakeClipboard("previous")
        self.keystrokes = RecordingKeystrokes(self.clipboard)
        self.delivery = DeliveryTransaction(self.clipboard, self.keystrokes)

    def test_segments_in_order_with_single_snapshot(self, mock_sleep):
        self.delivery.apply([
            TextSegment("hello "),
            CommandSegment("newline"),
            TextSegment("world"),
        ])

        self.assertEqual(self.keystrokes.events, [
            ("paste", "hello "),
            ("command", "newline"),
            ("paste", "world"),
        ])
        self.assertEqual(self.clipboard.reads, 1)
        self.assertEqual(self.clipboard.content, "previous")

    def test_blank_text_segments_skipped(self, mock_sleep):
        self.delivery.apply([CommandSegment("selectAll"), TextSegment(" "), CommandSegment("copy")])
        self.assertEqual(self.keystrokes.events, [("command", "selectAll"), ("command", "copy")])

    def test_only_commands_still_restore(self, mock_sleep):
        self.delivery.apply([CommandSegment("undo")])
        self.assertEqual(self.clipboard.writes, ["previous"])
        mock_sleep.assert_not_called()

    def test_unknown_command_skipped(self, mock_sleep):
        with self.assertLogs("voicetype.delivery", level="WARNING") as logs:
            self.delivery.apply([CommandSegment("launchRockets"), TextSegment("ok")])

        self.assertEqual(self.keystrokes.events, [("paste", "ok")])
        self.assertIn("launchRockets", logs.output[0])

    def test_copy_and_cut_results_are_overwritten_by_restore(self, mock_sleep):
        keystrokes = SelectionKeystrokes(self.clipboard, selection="selected words")
        delivery = DeliveryTransaction(self.clipboard, keystrokes)

        delivery.apply([CommandSegment("selectAll"), CommandSegment("copy")])
        self.assertEqual(self.clipboard.content, "previous")

        delivery.apply([CommandSegment("cut")])
        self.assertEqual(self.clipboard.content, "previous")
        self.assertEqual(self.clipboard.writes, ["previous", "previous"])

    def test_nothing_to_do(self, mock_sleep):
        self.delivery.apply([TextSegment("  ")])
        self.delivery.apply([])
        self.assertEqual(self.clipboard.reads, 0)
        self.assertEqual(self.clipboard.writes, [])


class TestClipboard(unittest.TestCase):
    """Tests for the pyperclip-backed Clipboard."""

    @patch("voicetype.delivery.pyperclip")
    def test_read(self, mock_pyperclip):
        mock_pyperclip.paste.return_value = "abc"
        self.assertEqual(Clipboard().read_text(), "abc")

    @patch("voicetype.delivery.pyperclip")
    def test_read_none_is_empty(self, mock_pyperclip):
        mock_pyperclip.paste.return_value = None
        self.assertEqual(Clipboard().read_text(), "")

    @patch("voicetype.delivery.pyperclip")
    def test_write(self, mock_pyperclip):
        Clipboard().write_text("abc")
        mock_pyperclip.copy.assert_called_once_with("abc")

    @patch("voicetype.delivery.pyperclip")
    def test_errors_wrapped(self, mock_pyperclip):
        mock_pyperclip.paste.side_effect = RuntimeError("no clipboard")
        mock_pyperclip.copy.side_effect = RuntimeError("no clipboard")
        with pytest.raises(OutputError, match="Failed to read clipboard"):
            Clipboard().read_text()
        with pytest.raises(OutputError, match="Failed to copy to clipboard"):
            Clipboard().write_text("x")


class TestKeystrokeMock(unittest.TestCase):

    @patch("voicetype.delivery.time.sleep")
    def test_works_with_mock_simulator(self, mock_sleep):
        clipboard = FakeClipboard("saved")
        keystrokes = MagicMock()
        keystrokes.supports.return_value = True
        DeliveryTransaction(clipboard, keystrokes).apply([CommandSegment("tab")])
        keystrokes.press_command.assert_called_once_with("tab")
        self.assertEqual(clipboard.content, "saved")
