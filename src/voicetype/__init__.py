"""
VoiceType - Hotkey Dictation

Press a hotkey, speak, and the transcription from a local or remote
Whisper-compatible endpoint is pasted into the focused application.
"""

from voicetype.adapters import TranscriptionOptions, TranscriptionResult, create_adapter
from voicetype.audio_encoder import AudioEncoder
from voicetype.audio_recorder import AudioRecorder
from voicetype.command_parser import BUILT_IN_COMMANDS, CommandParser, CommandSegment, TextSegment
from voicetype.config import Config
from voicetype.delivery import Clipboard, DeliveryTransaction
from voicetype.error_handling import classify_error, describe_error
from voicetype.exceptions import (
    VoiceTypeError,
    NetworkError,
    ServiceError,
    AudioError,
    ConfigurationError,
    OutputError,
    StorageError,
    PlatformNotSupportedError,
    HotkeyError,
    ErrorCategory,
    ErrorClassification,
    NetworkKind,
    ServiceKind,
)
from voicetype.interfaces import AudioConfig, RecordingState
from voicetype.orchestrator import RecordingOrchestrator
from voicetype.silence_detector import SilenceDetector
from voicetype.transcriber import RetryingTranscriber

__version__ = "0.1.0"

__all__ = [
    "AudioConfig",
    "AudioEncoder",
    "AudioError",
    "AudioRecorder",
    "BUILT_IN_COMMANDS",
    "Clipboard",
    "CommandParser",
    "CommandSegment",
    "Config",
    "ConfigurationError",
    "DeliveryTransaction",
    "ErrorCategory",
    "ErrorClassification",
    "HotkeyError",
    "NetworkError",
    "NetworkKind",
    "OutputError",
    "PlatformNotSupportedError",
    "RecordingOrchestrator",
    "RecordingState",
    "RetryingTranscriber",
    "ServiceError",
    "ServiceKind",
    "SilenceDetector",
    "StorageError",
    "TextSegment",
    "TranscriptionOptions",
    "TranscriptionResult",
    "VoiceTypeError",
    "classify_error",
    "create_adapter",
    "describe_error",
]
