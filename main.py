"""
VoiceType - Hotkey Dictation

Main application entry point.
Wires the hotkey, audio capture, transcription and text delivery together.
"""

import argparse
import logging
import os
import signal
import sys
import time
from typing import Optional

from voicetype.adapters import TranscriptionOptions
from voicetype.audio_encoder import AudioEncoder
from voicetype.audio_recorder import AudioRecorder
from voicetype.command_parser import CommandParser
from voicetype.config import Config
from voicetype.delivery import Clipboard, DeliveryTransaction
from voicetype.exceptions import (
    ConfigurationError,
    HotkeyError,
    PlatformNotSupportedError,
    StorageError,
)
from voicetype.hotkey import HotkeyListener
from voicetype.interfaces import AudioConfig, RecordingState
from voicetype.notifier import ConsoleStatusDisplay, DesktopNotifier
from voicetype.orchestrator import RecordingOrchestrator
from voicetype.platform import create_keystroke_simulator, get_default_hotkey, get_platform
from voicetype.silence_detector import SilenceDetector
from voicetype.storage import HistoryStore
from voicetype.transcriber import RetryingTranscriber


# Configure logging
logger = logging.getLogger(__name__)


class VoiceTypeApp:
    """Main application class coordinating all modules."""

    def __init__(self, config: Config):
        """
        Initialize all components.

        Args:
            config: Validated application configuration.

        Raises:
            PlatformNotSupportedError: If keystrokes cannot be simulated here
            HotkeyError: If the configured hotkey is invalid
        """
        platform = get_platform()
        logger.info(f"Platform detected: {platform}")

        self.config = config
        self.notifier = DesktopNotifier(enabled=config.notifications_enabled)
        self.display = ConsoleStatusDisplay()

        self.transcriber = RetryingTranscriber(
            endpoint_url=config.endpoint_url,
            api_key=config.api_key,
            timeout=config.timeout,
        )

        self.recorder = AudioRecorder()
        self.audio_config = AudioConfig(
            device=config.input_device,
            sample_rate=config.sample_rate,
            format=config.audio_format,
        )

        self.keystrokes = create_keystroke_simulator()
        logger.info(f"Keystroke simulator initialized: {type(self.keystrokes).__name__}")

        silence_detector = None
        if config.auto_stop:
            silence_detector = SilenceDetector(
                threshold=config.silence_threshold,
                duration_ms=config.silence_duration_ms,
            )

        command_parser = CommandParser(config.custom_commands) if config.command_mode else None

        history = None
        if config.history_enabled:
            try:
                history = HistoryStore(max_entries=config.history_max_entries)
            except StorageError as e:
                # History is optional; keep dictating without it
                logger.warning(f"History disabled: {e}")

        self.orchestrator = RecordingOrchestrator(
            audio_source=self.recorder,
            encoder=AudioEncoder(sample_rate=config.sample_rate),
            transcriber=self.transcriber,
            delivery=DeliveryTransaction(Clipboard(), self.keystrokes),
            display=self.display,
            notifier=self.notifier,
            options=TranscriptionOptions(
                model=config.model,
                language=config.language,
                temperature=config.temperature,
                audio_format=config.audio_format,
                sample_rate=config.sample_rate,
            ),
            audio_config=self.audio_config,
            command_parser=command_parser,
            silence_detector=silence_detector,
            history=history,
        )

        self.hotkey = HotkeyListener(
            config.hotkey or get_default_hotkey(),
            on_activate=self.orchestrator.toggle,
        )

        self._running = False

    @property
    def is_running(self) -> bool:
        """Whether the application is running."""
        return self._running

    def test_connection(self) -> bool:
        """
        Check the configured endpoint once and notify the result.

        Returns:
            True if the endpoint answered.
        """
        try:
            ok = self.transcriber.test_connection()
        except ConfigurationError as e:
            self.notifier.notify("Error", str(e))
            return False

        if ok:
            self.notifier.notify("Connection OK", f"Reached {self.config.endpoint_url}")
        else:
            self.notifier.notify(
                "Connection Failed",
                "Cannot connect to STT endpoint. Is your service running?",
            )
        return ok

    def run(self) -> None:
        """Start the hotkey listener and wait until stopped."""
        self._running = True
        self.hotkey.start()
        self._print_banner()

        while self._running:
            time.sleep(0.1)

    def _print_banner(self) -> None:
        """Print welcome message and instructions."""
        hotkey = self.hotkey.description
        config = self.config

        print("=" * 55)
        print("  VoiceType - Hotkey Dictation")
        print("=" * 55)
        print()
        print(f"  Platform: {get_platform()}")
        print(f"  Endpoint: {config.endpoint_url}")
        print(f"  Model: {config.model}")
        print(f"  Hotkey: {hotkey} (press to start, press again to stop)")
        if config.auto_stop:
            print(f"  Auto-stop after {config.silence_duration_ms / 1000:g}s of silence")
        if config.command_mode:
            print("  Voice commands: on (say \"new line\", \"select all\", ...)")
        print()
        print("  The transcribed text is pasted at the cursor;")
        print("  your clipboard is restored afterwards.")
        print("  Press Ctrl+C to exit")
        print("=" * 55)
        print()

    def stop(self) -> None:
        """Stop the application gracefully."""
        if not self._running:
            return

        self._running = False
        self.hotkey.stop()

        # Finish an in-progress recording so the microphone is released
        if self.orchestrator.state is RecordingState.RECORDING:
            self.orchestrator.stop()

        print("\nVoiceType stopped. Goodbye!")


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for the application.

    Args:
        debug: If True, enable debug-level logging
    """
    level = logging.DEBUG if debug else logging.INFO
    format_str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=format_str,
        datefmt=date_format
    )

    # Also log to file if in debug mode
    if debug:
        file_handler = logging.FileHandler("voicetype.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(format_str, datefmt=date_format))
        logging.getLogger().addHandler(file_handler)


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Hotkey dictation into any application.")
    parser.add_argument("--debug", action="store_true",
                        help="Enable debug logging (also written to voicetype.log)")
    parser.add_argument("--test-connection", action="store_true",
                        help="Check that the STT endpoint is reachable and exit")
    parser.add_argument("--history", nargs="?", const=20, type=int, metavar="N",
                        help="Print the N most recent transcriptions (default 20) and exit")
    parser.add_argument("--search", metavar="TEXT",
                        help="Print saved transcriptions containing TEXT and exit")
    parser.add_argument("--clear-history", action="store_true",
                        help="Delete all saved transcriptions and exit")
    return parser.parse_args(argv)


def print_records(records) -> None:
    for record in records:
        stamp = record.timestamp.strftime("%Y-%m-%d %H:%M")
        print(f"  #{record.id}  {stamp}  {record.text}")


def run_history_command(args: argparse.Namespace, config: Config) -> int:
    """
    List, search or clear saved transcriptions.

    Returns:
        Process exit code.
    """
    try:
        store = HistoryStore(max_entries=config.history_max_entries)
        if args.clear_history:
            store.clear()
            print("History cleared.")
            return 0
        if args.search is not None:
            records = store.search(args.search, limit=args.history or 20)
            print(f"{len(records)} match(es) for '{args.search}':")
        else:
            records = store.get_recent(limit=args.history)
            print(f"Showing {len(records)} of {store.count()} saved transcriptions:")
    except StorageError as e:
        print(f"Error: {e}")
        logger.error(f"History error: {e}")
        return 1

    print_records(records)
    return 0


def main(argv: Optional[list] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    debug_mode = args.debug or os.environ.get("VOICETYPE_DEBUG", "").lower() in ("true", "1", "yes")
    setup_logging(debug=debug_mode)

    logger.info("VoiceType starting...")

    # Load and validate configuration
    try:
        config = Config.from_env()
        warnings = config.validate()
        for warning in warnings:
            print(f"Warning: {warning}")
            logger.warning(warning)
    except ValueError as e:
        print(f"Error: {e}")
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    if args.history is not None or args.search is not None or args.clear_history:
        sys.exit(run_history_command(args, config))

    # Create application with validated config
    try:
        app = VoiceTypeApp(config=config)
    except (HotkeyError, PlatformNotSupportedError) as e:
        print(f"Error: {e}")
        logger.error(f"Initialization error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"Error: Failed to initialize application: {e}")
        logger.exception(f"Unexpected initialization error: {e}")
        sys.exit(1)

    if args.test_connection:
        sys.exit(0 if app.test_connection() else 1)

    # Set up signal handlers for graceful shutdown
    def signal_handler(sig, frame):
        logger.info("Received shutdown signal")
        app.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    # Run the application
    try:
        logger.info("VoiceType running")
        app.run()
    except HotkeyError as e:
        print(f"Error: {e}")
        logger.error(f"Hotkey listener error: {e}")
        app.stop()
        sys.exit(1)
    except Exception as e:
        print(f"Fatal error: {e}")
        logger.exception(f"Fatal error during execution: {e}")
        app.stop()
        sys.exit(1)


if __name__ == "__main__":
    main()
