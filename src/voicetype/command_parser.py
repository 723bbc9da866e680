"""
Command Parser Module
Splits transcribed text into dictated prose and spoken editing commands.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Union


@dataclass(frozen=True)
class TextSegment:
    """Literal text to insert, with the speaker's original casing."""
    value: str


@dataclass(frozen=True)
class CommandSegment:
    """A recognized command identifier (e.g. "newline", "selectAll")."""
    command: str


Segment = Union[TextSegment, CommandSegment]


# Spoken phrase -> command identifier
BUILT_IN_COMMANDS: Dict[str, str] = {
    "new line": "newline",
    "enter": "return",
    "tab": "tab",
    "space": "space",
    "backspace": "backspace",
    "delete": "delete",
    "select all": "selectAll",
    "undo": "undo",
    "redo": "redo",
    "copy that": "copy",
    "paste that": "paste",
    "cut that": "cut",
    "escape": "escape",
}

_WORD_CHAR = re.compile(r"\w")


def _lower_aligned(text: str) -> str:
    """Lowercase text without changing its length.

    A few characters (e.g. "İ") lowercase to more than one code point; those
    are kept as-is so indices in the result line up with the input.
    """
    chars = []
    for ch in text:
        lowered = ch.lower()
        chars.append(lowered if len(lowered) == 1 else ch)
    return "".join(chars)


class CommandParser:
    """Parses text into an ordered sequence of text and command segments."""

    def __init__(self, custom_commands: Optional[Dict[str, str]] = None):
        """
        Initialize parser with the built-in phrase table.

        Args:
            custom_commands: Extra phrase -> command mappings. These win over
                built-ins with the same phrase. Phrases are matched
                case-insensitively.
        """
        self.commands: Dict[str, str] = dict(BUILT_IN_COMMANDS)
        for phrase, command in (custom_commands or {}).items():
            key = phrase.strip().lower()
            if key:
                self.commands[key] = command

        # Longest first so "select all" beats any shorter colliding phrase
        self._phrases = sorted(self.commands, key=len, reverse=True)

    def parse(self, text: str) -> List[Segment]:
        """
        Split text into segments.

        Args:
            text: Transcribed text

        Returns:
            Ordered list of TextSegment and CommandSegment. Empty for blank input.
        """
        if not text or not text.strip():
            return []

        lower = _lower_aligned(text)
        length = len(lower)
        segments: List[Segment] = []
        pending: List[str] = []
        i = 0

        while i < length:
            phrase = self._match_at(lower, i)
            if phrase is None:
                pending.append(text[i])
                i += 1
                continue

            if pending:
                segments.append(TextSegment("".join(pending)))
                pending = []
            segments.append(CommandSegment(self.commands[phrase]))
            i += len(phrase)

        if pending:
            segments.append(TextSegment("".join(pending)))

        return segments

    def _match_at(self, lower: str, i: int) -> Optional[str]:
        """Return the longest phrase matching at index i on word boundaries."""
        if i > 0 and _WORD_CHAR.match(lower[i - 1]):
            return None
        for phrase in self._phrases:
            end = i + len(phrase)
            if not lower.startswith(phrase, i):
                continue
            if end < len(lower) and _WORD_CHAR.match(lower[end]):
                continue
            return phrase
        return None
