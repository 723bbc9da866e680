"""
History Store
Keeps recent transcriptions in a JSONL file, one record per line.
"""

import json
import logging
import threading
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from voicetype.exceptions import StorageError

logger = logging.getLogger(__name__)


@dataclass
class TranscriptionRecord:
    """A single saved transcription."""

    id: int
    text: str
    timestamp: datetime
    duration: Optional[float] = None
    language: Optional[str] = None

    def to_json(self) -> str:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return json.dumps(data, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict) -> "TranscriptionRecord":
        return cls(
            id=int(data["id"]),
            text=str(data["text"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            duration=data.get("duration"),
            language=data.get("language"),
        )


class HistoryStore:
    """
    JSONL-backed transcription history.

    Holds at most max_entries records; adding past the limit evicts the
    oldest ones. All methods are thread-safe.
    """

    MAX_ENTRIES = 50
    MAX_TEXT_LENGTH = 10000
    DEFAULT_PATH = Path.home() / ".voicetype" / "history.jsonl"

    def __init__(self, path: Optional[Path] = None, max_entries: int = MAX_ENTRIES):
        """
        Open (or create) the history file.

        Args:
            path: JSONL file location (default ~/.voicetype/history.jsonl)
            max_entries: Maximum number of records kept

        Raises:
            StorageError: If the file cannot be created or read
        """
        self.path = Path(path) if path is not None else self.DEFAULT_PATH
        self.max_entries = max_entries
        self._lock = threading.Lock()

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch(exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create history file {self.path}: {e}") from e

        self._records = self._load()
        self._next_id = max((r.id for r in self._records), default=0) + 1

    def _load(self) -> List[TranscriptionRecord]:
        records = []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        records.append(TranscriptionRecord.from_dict(json.loads(line)))
                    except (ValueError, KeyError, TypeError) as e:
                        logger.warning(f"Skipping corrupt history line {line_number}: {e}")
        except OSError as e:
            raise StorageError(f"Cannot read history file {self.path}: {e}") from e
        return records[-self.max_entries:]

    def _rewrite(self) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                for record in self._records:
                    f.write(record.to_json() + "\n")
            tmp_path.replace(self.path)
        except OSError as e:
            raise StorageError(f"Cannot write history file {self.path}: {e}") from e

    def add(self, text: str, duration: Optional[float] = None,
            language: Optional[str] = None) -> int:
        """
        Save a transcription.

        Args:
            text: Transcribed text; trimmed and capped at MAX_TEXT_LENGTH
            duration: Recording length in seconds
            language: Language code

        Returns:
            ID of the new record.

        Raises:
            ValueError: If text is empty or whitespace-only
            StorageError: If the file cannot be written
        """
        trimmed = (text or "").strip()
        if not trimmed:
            raise ValueError("Transcription text cannot be empty")

        with self._lock:
            record = TranscriptionRecord(
                id=self._next_id,
                text=trimmed[:self.MAX_TEXT_LENGTH],
                timestamp=datetime.now(),
                duration=duration,
                language=language,
            )
            self._records.append(record)
            self._next_id += 1

            if len(self._records) > self.max_entries:
                # FIFO eviction
                self._records = self._records[-self.max_entries:]
                self._rewrite()
            else:
                try:
                    with open(self.path, "a", encoding="utf-8") as f:
                        f.write(record.to_json() + "\n")
                except OSError as e:
                    raise StorageError(f"Cannot write history file {self.path}: {e}") from e

            return record.id

    def get_recent(self, limit: int = 20) -> List[TranscriptionRecord]:
        """Most recent records, newest first."""
        with self._lock:
            return list(reversed(self._records))[:limit]

    def search(self, query: str, limit: int = 20) -> List[TranscriptionRecord]:
        """Case-insensitive substring search, newest first. Blank query matches nothing."""
        needle = (query or "").strip().lower()
        if not needle:
            return []
        with self._lock:
            matches = [r for r in reversed(self._records) if needle in r.text.lower()]
        return matches[:limit]

    def clear(self) -> None:
        """Delete all records."""
        with self._lock:
            self._records = []
            self._rewrite()

    def count(self) -> int:
        """Number of stored records."""
        with self._lock:
            return len(self._records)
