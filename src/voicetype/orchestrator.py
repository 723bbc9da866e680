"""
Recording Orchestrator
State machine that sequences capture, encoding, transcription and delivery.

    IDLE --start()--> RECORDING --stop()--> PROCESSING --(always)--> IDLE

A failed start() goes straight back to IDLE. Only one transition runs at a
time: a start()/stop()/toggle() call that arrives while another is in
progress is ignored, never queued.
"""

import logging
import threading
from typing import Optional

from voicetype.adapters.base import TranscriptionOptions
from voicetype.audio_encoder import AudioEncoder
from voicetype.command_parser import CommandParser
from voicetype.delivery import DeliveryTransaction
from voicetype.error_handling import classify_error, describe_error
from voicetype.exceptions import AudioError, ErrorCategory, OutputError, StorageError
from voicetype.interfaces import AudioConfig, AudioSource, Notifier, RecordingState, StatusDisplay
from voicetype.platform import get_platform_error_message
from voicetype.silence_detector import SilenceDetector
from voicetype.storage.history_store import HistoryStore
from voicetype.transcriber import RetryingTranscriber

logger = logging.getLogger(__name__)


class RecordingOrchestrator:
    """Drives one recording session at a time from hotkey to pasted text."""

    def __init__(
        self,
        audio_source: AudioSource,
        encoder: AudioEncoder,
        transcriber: RetryingTranscriber,
        delivery: DeliveryTransaction,
        display: StatusDisplay,
        notifier: Notifier,
        options: TranscriptionOptions,
        audio_config: Optional[AudioConfig] = None,
        command_parser: Optional[CommandParser] = None,
        silence_detector: Optional[SilenceDetector] = None,
        history: Optional[HistoryStore] = None,
    ):
        """
        Wire the orchestrator to its collaborators.

        Args:
            audio_source: Microphone capture
            encoder: Encodes captured PCM for upload
            transcriber: Sends audio to the STT endpoint (owns retries)
            delivery: Pastes text and sends command keystrokes
            display: Receives every state change
            notifier: Receives at most one error message per attempt
            options: Model, language and sampling options for transcription
            audio_config: Capture settings (defaults to 16 kHz mono WAV)
            command_parser: If given, transcripts are parsed for voice commands
            silence_detector: If given, a pause after speech stops recording
            history: If given, successful transcriptions are saved here
        """
        self.audio_source = audio_source
        self.encoder = encoder
        self.transcriber = transcriber
        self.delivery = delivery
        self.display = display
        self.notifier = notifier
        self.options = options
        self.audio_config = audio_config or AudioConfig()
        self.command_parser = command_parser
        self.silence_detector = silence_detector
        self.history = history

        self._state = RecordingState.IDLE
        self._transition_lock = threading.Lock()

        if silence_detector is not None:
            silence_detector.on_silence(self._on_silence)
            audio_source.add_chunk_listener(self._on_chunk)

    @property
    def state(self) -> RecordingState:
        """Current recording state."""
        return self._state

    def current_state(self) -> RecordingState:
        """Return the current recording state without blocking on a transition."""
        return self._state

    def toggle(self) -> None:
        """Start when idle, stop when recording, ignore while processing."""
        state = self._state
        if state is RecordingState.IDLE:
            self.start()
        elif state is RecordingState.RECORDING:
            self.stop()
        else:
            logger.debug("Toggle ignored while processing")

    def start(self) -> None:
        """Begin a recording session. No-op unless idle."""
        if not self._transition_lock.acquire(blocking=False):
            logger.debug("start() ignored: another transition is in progress")
            return
        try:
            if self._state is not RecordingState.IDLE:
                return

            self._set_state(RecordingState.RECORDING)
            if self.silence_detector is not None:
                self.silence_detector.reset()

            try:
                self.audio_source.start_capture(self.audio_config)
            except Exception as e:
                # Never stay in RECORDING without an active capture
                self._set_state(RecordingState.IDLE)
                if classify_error(e).category is not ErrorCategory.AUDIO:
                    e = AudioError(f"Could not start recording: {e}")
                self._report(e)
        finally:
            self._transition_lock.release()

    def stop(self) -> None:
        """End the session and transcribe it. No-op unless recording."""
        if not self._transition_lock.acquire(blocking=False):
            logger.debug("stop() ignored: another transition is in progress")
            return
        try:
            if self._state is not RecordingState.RECORDING:
                return

            self._set_state(RecordingState.PROCESSING)
            try:
                self._process()
            except Exception as e:
                self._report(e)
            finally:
                self._set_state(RecordingState.IDLE)
        finally:
            self._transition_lock.release()

    def _process(self) -> None:
        pcm = self.audio_source.stop_capture()
        config = self.audio_config
        duration = len(pcm) / (2 * config.channels * config.sample_rate)
        print(f"[Recording] Stopped. Duration: {duration:.1f}s")

        if not pcm:
            raise AudioError("No audio captured")

        audio = self.encoder.encode(pcm, config.format)
        result = self.transcriber.transcribe(audio, self.options)
        text = result.text

        if not text.strip():
            print("[Warning] No transcription returned (empty response)")
            return

        print(f"[Transcription] {text}")
        if self.command_parser is not None:
            self.delivery.apply(self.command_parser.parse(text))
        else:
            self.delivery.deliver(text)
        print("[Output] Text pasted")

        self._save_history(text, duration, result.language or self.options.language)

    def _save_history(self, text: str, duration: float, language: Optional[str]) -> None:
        if self.history is None:
            return
        try:
            self.history.add(text, duration=duration, language=language)
        except StorageError as e:
            logger.warning(f"Could not save transcription to history: {e}")

    def _set_state(self, state: RecordingState) -> None:
        self._state = state
        try:
            self.display.on_state_change(state)
        except Exception:
            logger.exception("Status display failed")

    def _report(self, error: BaseException) -> None:
        """Classify a failure and notify the user exactly once."""
        classification = classify_error(error)
        logger.error(
            f"{classification.category.value} error: {error}",
            exc_info=classification.category is ErrorCategory.UNKNOWN,
        )
        title, body = describe_error(classification)
        if isinstance(error, OutputError):
            body = f"{body}\n{get_platform_error_message()}"
        try:
            self.notifier.notify(title, body)
        except Exception:
            logger.exception("Notifier failed")

    def _on_chunk(self, chunk: bytes) -> None:
        if self._state is RecordingState.RECORDING:
            self.silence_detector.process_chunk(chunk)

    def _on_silence(self) -> None:
        logger.info("Silence detected, stopping recording")
        # Called from the audio thread; processing must not block capture callbacks
        threading.Thread(target=self.stop, name="voicetype-auto-stop", daemon=True).start()
