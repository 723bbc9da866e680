"""
Error Handling Module
Reduces raw failures to an ErrorClassification and maps classifications to
the titles and messages shown to the user.
"""

from typing import Tuple

import groq
import httpx

from voicetype.exceptions import (
    AudioError,
    ConfigurationError,
    ErrorCategory,
    ErrorClassification,
    NetworkError,
    NetworkKind,
    ServiceError,
    ServiceKind,
    VoiceTypeError,
)


def classify_status(status_code: int, reason: str = "") -> ErrorClassification:
    """Classify an HTTP error status returned by an STT endpoint."""
    if status_code in (401, 403):
        return ErrorClassification.network(NetworkKind.AUTH, reason)
    if status_code == 404:
        return ErrorClassification.service(ServiceKind.NOT_FOUND, reason)
    if status_code == 429:
        return ErrorClassification.service(ServiceKind.RATE_LIMITED, reason)
    return ErrorClassification.service(ServiceKind.GENERIC, reason)


def classify_error(error: BaseException) -> ErrorClassification:
    """
    Classify any exception into the closed ErrorClassification set.

    Never raises. VoiceType errors already know their classification; httpx
    and groq transport errors and the builtin connection errors are mapped by
    type; everything else is UNKNOWN.

    Args:
        error: The exception to classify

    Returns:
        ErrorClassification for the failure.
    """
    reason = str(error)

    if isinstance(error, VoiceTypeError):
        return error.classification

    # groq: APITimeoutError subclasses APIConnectionError, so check it first
    if isinstance(error, groq.APITimeoutError):
        return ErrorClassification.network(NetworkKind.TIMEOUT, reason)
    if isinstance(error, groq.APIConnectionError):
        return ErrorClassification.network(NetworkKind.REFUSED, reason)
    if isinstance(error, groq.APIStatusError):
        return classify_status(error.status_code, reason)

    if isinstance(error, httpx.TimeoutException):
        return ErrorClassification.network(NetworkKind.TIMEOUT, reason)
    if isinstance(error, httpx.ConnectError):
        return ErrorClassification.network(NetworkKind.REFUSED, reason)
    if isinstance(error, httpx.HTTPStatusError):
        return classify_status(error.response.status_code, reason)
    if isinstance(error, httpx.TransportError):
        return ErrorClassification.network(NetworkKind.GENERIC, reason)

    if isinstance(error, ConnectionRefusedError):
        return ErrorClassification.network(NetworkKind.REFUSED, reason)
    if isinstance(error, TimeoutError):
        return ErrorClassification.network(NetworkKind.TIMEOUT, reason)
    if isinstance(error, ConnectionError):
        return ErrorClassification.network(NetworkKind.GENERIC, reason)

    # Raw messages from arbitrary exceptions are not fit for the user
    return ErrorClassification.unknown()


def error_from_classification(classification: ErrorClassification, message: str) -> VoiceTypeError:
    """Build the VoiceType exception matching a classification."""
    category = classification.category
    if category is ErrorCategory.NETWORK:
        return NetworkError(message, classification.kind)
    if category is ErrorCategory.SERVICE:
        return ServiceError(message, classification.kind)
    if category is ErrorCategory.AUDIO:
        return AudioError(message)
    if category is ErrorCategory.CONFIGURATION:
        return ConfigurationError(message)
    return VoiceTypeError(message, classification)


_NETWORK_MESSAGES = {
    NetworkKind.REFUSED: ("Connection Failed", "Cannot connect to STT endpoint. Is your service running?"),
    NetworkKind.TIMEOUT: ("Connection Timed Out", "STT endpoint took too long. Try increasing VOICETYPE_TIMEOUT."),
    NetworkKind.AUTH: ("Authentication Failed", "Check your API key (VOICETYPE_API_KEY)."),
}

_SERVICE_MESSAGES = {
    ServiceKind.NOT_FOUND: ("Model Not Found", "Check the model name (VOICETYPE_MODEL)."),
    ServiceKind.RATE_LIMITED: ("Rate Limited", "Too many requests. Wait a moment and try again."),
}

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Check the log for details."


def describe_error(classification: ErrorClassification) -> Tuple[str, str]:
    """
    Map a classification to a user-facing (title, body) pair.

    Args:
        classification: Classified failure

    Returns:
        Tuple of notification title and body.
    """
    category = classification.category
    reason = classification.reason

    if category is ErrorCategory.NETWORK:
        if classification.kind in _NETWORK_MESSAGES:
            return _NETWORK_MESSAGES[classification.kind]
        return "Network Error", reason or "Network request failed."

    if category is ErrorCategory.SERVICE:
        if classification.kind in _SERVICE_MESSAGES:
            return _SERVICE_MESSAGES[classification.kind]
        return "Transcription Error", reason or "The STT service returned an error."

    if category is ErrorCategory.AUDIO:
        return "Recording Failed", reason or "Audio capture failed."

    if category is ErrorCategory.CONFIGURATION:
        return "Error", reason or "Invalid configuration."

    return "Error", reason or UNEXPECTED_ERROR_MESSAGE
