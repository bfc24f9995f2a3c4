"""
Google Docs Text Location

This package locates text and paragraphs in Google Docs documents and maps
them to the document's native index space.
"""

from .docs_types import MatchRange, TextSegment
from .docs_helpers import (
    find_text_range_in_document,
    find_all_text_ranges_in_document,
    find_paragraph_range_in_document,
)
from .apostrophe_split import ApostrophePhraseMatch
from .text_normalization import normalize

__all__ = [
    "MatchRange",
    "TextSegment",
    "find_text_range_in_document",
    "find_all_text_ranges_in_document",
    "find_paragraph_range_in_document",
    "ApostrophePhraseMatch",
    "normalize",
]
