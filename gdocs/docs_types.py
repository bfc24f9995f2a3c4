"""
Value types shared by the Google Docs text lookup helpers.

Google Docs indices count UTF-16 code units, so lengths in the native
index space are measured with utf16_length rather than len().
"""
from dataclasses import dataclass
from typing import Any, Dict, NamedTuple


def utf16_length(text: str) -> int:
    """Number of UTF-16 code units in text (astral characters count twice)."""
    return len(text) + sum(1 for char in text if ord(char) > 0xFFFF)


@dataclass(frozen=True)
class TextSegment:
    """
    A text run from the document with its native start/end indices.

    end_index - start_index equals utf16_length(text).
    """
    text: str
    start_index: int
    end_index: int


class CharMapping(NamedTuple):
    """Where one character of the flattened text lives in the document."""
    segment_index: int
    char_index: int
    original_index: int


@dataclass(frozen=True)
class MatchRange:
    """Half-open [start_index, end_index) range in native document indices."""
    start_index: int
    end_index: int

    def to_dict(self) -> Dict[str, Any]:
        return {"start_index": self.start_index, "end_index": self.end_index}
