"""
Persistent storage for VoiceType.
"""

from voicetype.storage.history_store import HistoryStore, TranscriptionRecord

__all__ = ["HistoryStore", "TranscriptionRecord"]
