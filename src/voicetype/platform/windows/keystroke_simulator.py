"""
Windows Keystroke Simulator

Sends paste and editing keystrokes with pynput.
"""

from pynput.keyboard import Key

from voicetype.platform.pynput_simulator import KEY_COMBOS, PynputKeystrokeSimulator


class WindowsKeystrokeSimulator(PynputKeystrokeSimulator):
    """Sends keystrokes to the active app on Windows."""

    # Windows apps expect Ctrl+Y for redo
    key_combos = {**KEY_COMBOS, "redo": ((Key.ctrl,), "y")}
