"""
Platform Abstraction Layer

Detects the current platform and creates the matching keystroke simulator.
Platform modules are imported lazily so that, e.g., pynput is not needed to
run on macOS.
"""

import sys

from voicetype.platform.base import COMMAND_IDS, KeystrokeSimulatorBase
from voicetype.exceptions import PlatformNotSupportedError


PLATFORM_ERROR_MESSAGES = {
    "macos": (
        "Keystroke simulation failed. Grant Accessibility access in "
        "System Settings > Privacy & Security > Accessibility."
    ),
    "windows": "Keystroke simulation failed. Make sure pynput is installed.",
    "linux": (
        "Keystroke simulation failed. On X11 install xdotool; "
        "on Wayland install wtype."
    ),
    "unknown": (
        "Platform not supported. VoiceType supports macOS, Windows, and Linux."
    ),
}

DEFAULT_HOTKEYS = {
    "macos": "cmd+shift+v",
    "windows": "ctrl+shift+v",
    "linux": "ctrl+shift+v",
}


def get_platform() -> str:
    """
    Detect the current platform.

    Returns:
        "macos", "windows", "linux", or "unknown"
    """
    if sys.platform == "darwin":
        return "macos"
    elif sys.platform == "win32":
        return "windows"
    elif sys.platform.startswith("linux"):
        return "linux"
    return "unknown"


def get_platform_error_message(platform: str = None) -> str:
    """Get the troubleshooting hint for a platform (current one if None)."""
    platform = platform or get_platform()
    return PLATFORM_ERROR_MESSAGES.get(platform, PLATFORM_ERROR_MESSAGES["unknown"])


def get_default_hotkey() -> str:
    """
    Get the default toggle hotkey for the current platform.

    Returns:
        Hotkey like "cmd+shift+v", or "ctrl+shift+v" on unknown platforms
    """
    return DEFAULT_HOTKEYS.get(get_platform(), "ctrl+shift+v")


def create_keystroke_simulator() -> KeystrokeSimulatorBase:
    """
    Create the keystroke simulator for the current platform.

    Returns:
        Platform-specific KeystrokeSimulatorBase implementation.

    Raises:
        PlatformNotSupportedError: If the platform is not supported
    """
    platform = get_platform()

    if platform == "macos":
        from voicetype.platform.macos.keystroke_simulator import MacOSKeystrokeSimulator
        return MacOSKeystrokeSimulator()
    elif platform == "windows":
        from voicetype.platform.windows.keystroke_simulator import WindowsKeystrokeSimulator
        return WindowsKeystrokeSimulator()
    elif platform == "linux":
        from voicetype.platform.linux.keystroke_simulator import LinuxKeystrokeSimulator
        return LinuxKeystrokeSimulator()

    raise PlatformNotSupportedError(
        f"Platform '{sys.platform}' is not supported. "
        "Supported platforms: macOS, Windows, Linux"
    )


__all__ = [
    "COMMAND_IDS",
    "KeystrokeSimulatorBase",
    "PLATFORM_ERROR_MESSAGES",
    "create_keystroke_simulator",
    "get_default_hotkey",
    "get_platform",
    "get_platform_error_message",
]
