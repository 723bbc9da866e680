"""
Speech-to-text provider adapters.
"""

from voicetype.adapters.base import STTAdapter, TranscriptionOptions, TranscriptionResult
from voicetype.adapters.factory import create_adapter

__all__ = [
    "STTAdapter",
    "TranscriptionOptions",
    "TranscriptionResult",
    "create_adapter",
]
