"""
Custom Exceptions for VoiceType application.

This module defines the exception hierarchy used throughout the application
and the closed classification type every failure is reduced to.

Each VoiceTypeError carries an ErrorClassification. The classification is the
only thing retry and notification logic looks at, so those decisions are a
total match over a finite set of kinds rather than isinstance checks scattered
across the codebase.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ErrorCategory(Enum):
    """Top-level failure categories."""
    NETWORK = "network"
    SERVICE = "service"
    AUDIO = "audio"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class NetworkKind(Enum):
    """Sub-kinds of network failures."""
    REFUSED = "refused"
    TIMEOUT = "timeout"
    AUTH = "auth"
    GENERIC = "generic"


class ServiceKind(Enum):
    """Sub-kinds of failures reported by the STT service itself."""
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    GENERIC = "generic"


ErrorKind = Union[NetworkKind, ServiceKind]


@dataclass(frozen=True)
class ErrorClassification:
    """
    Immutable description of a failure.

    Only NETWORK carries a NetworkKind and only SERVICE carries a ServiceKind;
    the other categories have kind=None. Use the constructors below rather
    than building instances by hand.
    """

    category: ErrorCategory
    kind: Optional[ErrorKind] = None
    reason: str = ""

    @classmethod
    def network(cls, kind: NetworkKind = NetworkKind.GENERIC, reason: str = "") -> "ErrorClassification":
        return cls(ErrorCategory.NETWORK, kind, reason)

    @classmethod
    def service(cls, kind: ServiceKind = ServiceKind.GENERIC, reason: str = "") -> "ErrorClassification":
        return cls(ErrorCategory.SERVICE, kind, reason)

    @classmethod
    def audio(cls, reason: str = "") -> "ErrorClassification":
        return cls(ErrorCategory.AUDIO, None, reason)

    @classmethod
    def configuration(cls, reason: str = "") -> "ErrorClassification":
        return cls(ErrorCategory.CONFIGURATION, None, reason)

    @classmethod
    def unknown(cls, reason: str = "") -> "ErrorClassification":
        return cls(ErrorCategory.UNKNOWN, None, reason)

    @property
    def is_retryable(self) -> bool:
        """Whether a fresh attempt could plausibly succeed.

        Only network failures qualify, and rejected credentials do not heal
        with time.
        """
        return self.category is ErrorCategory.NETWORK and self.kind is not NetworkKind.AUTH


class VoiceTypeError(Exception):
    """Base exception for all VoiceType errors."""

    def __init__(self, message: str = "", classification: Optional[ErrorClassification] = None):
        super().__init__(message)
        self.classification = classification or ErrorClassification.unknown(message)


class NetworkError(VoiceTypeError):
    """Error reaching the STT endpoint (refused, timed out, rejected credentials)."""

    def __init__(self, message: str = "", kind: NetworkKind = NetworkKind.GENERIC):
        super().__init__(message, ErrorClassification.network(kind, message))
        self.kind = kind


class ServiceError(VoiceTypeError):
    """Error returned by the STT service (unknown model, rate limit, bad response)."""

    def __init__(self, message: str = "", kind: ServiceKind = ServiceKind.GENERIC):
        super().__init__(message, ErrorClassification.service(kind, message))
        self.kind = kind


class AudioError(VoiceTypeError):
    """Error capturing or encoding audio."""

    def __init__(self, message: str = ""):
        super().__init__(message, ErrorClassification.audio(message))


class ConfigurationError(VoiceTypeError):
    """Error in application configuration."""

    def __init__(self, message: str = ""):
        super().__init__(message, ErrorClassification.configuration(message))


class OutputError(VoiceTypeError):
    """Error outputting text to clipboard or active application."""
    pass


class StorageError(VoiceTypeError):
    """Error related to data storage operations."""
    pass


class PlatformNotSupportedError(VoiceTypeError):
    """Error when running on an unsupported platform."""
    pass


class HotkeyError(VoiceTypeError):
    """Error when the global hotkey listener fails to initialize or start."""
    pass
