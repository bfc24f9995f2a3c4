"""
Google Docs Text Location Helpers

This module reconstructs the text of a Google Docs body as one logical
string, searches it, and maps matches back to native document indices so
formatting requests can target exactly the right range.

Three coordinate spaces are involved:
- segment-local: offsets inside a single text run
- flattened: offsets in the concatenation of all text runs
- document: the native index space of the Docs API (UTF-16 code units)
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from gdocs.docs_structure import (
    extract_text_segments,
    find_enclosing_paragraph,
    get_body_content,
    parse_structural_elements,
)
from gdocs.docs_types import CharMapping, MatchRange, TextSegment, utf16_length
from gdocs.text_normalization import (
    normalize,
    normalize_with_offsets,
    standardize_apostrophes,
)

logger = logging.getLogger(__name__)


@dataclass
class FlattenedText:
    """
    The logical text of a document together with its index mapping.

    char_map[i] locates flattened character i in its segment and in the
    document; len(char_map) == len(text).
    """
    text: str
    char_map: List[CharMapping]
    segments: List[TextSegment]

    def to_document_range(self, start: int, end: int) -> MatchRange:
        """Map the flattened span [start, end) to a document range."""
        first = self.char_map[start]
        last = self.char_map[end - 1]
        return MatchRange(
            start_index=first.original_index,
            end_index=last.original_index + utf16_length(self.text[end - 1]),
        )


def flatten_segments(segments: Iterable[TextSegment]) -> FlattenedText:
    """
    Concatenate segment texts and build the per-character index map.

    Args:
        segments: Text segments, already sorted by start_index

    Returns:
        FlattenedText for the segments
    """
    segments = list(segments)
    parts = []
    char_map = []

    for segment_index, segment in enumerate(segments):
        original_index = segment.start_index
        for char_index, char in enumerate(segment.text):
            char_map.append(CharMapping(segment_index, char_index, original_index))
            original_index += utf16_length(char)
        parts.append(segment.text)

    return FlattenedText(text="".join(parts), char_map=char_map, segments=segments)


def build_flattened_text(content: List[Dict[str, Any]]) -> FlattenedText:
    """
    Flatten a raw body content array into searchable text.

    Args:
        content: Body content array from Google Docs API

    Returns:
        FlattenedText with segments sorted by document position
    """
    elements = parse_structural_elements(content)
    segments = sorted(extract_text_segments(elements), key=lambda s: s.start_index)
    flat = flatten_segments(segments)
    logger.debug(
        f"Flattened {len(segments)} text segments into {len(flat.text)} characters"
    )
    return flat


def _slice_utf16(text: str, start: int, end: int) -> str:
    if utf16_length(text) == len(text):
        return text[start:end]
    encoded = text.encode("utf-16-le", "surrogatepass")
    return encoded[start * 2:end * 2].decode("utf-16-le", "surrogatepass")


def extract_text_from_range(
    segments: Iterable[TextSegment],
    start_index: int,
    end_index: int
) -> str:
    """
    Extract the document text in [start_index, end_index) from its segments.

    Args:
        segments: Text segments in document order
        start_index: Start of the range (inclusive)
        end_index: End of the range (exclusive)

    Returns:
        Concatenation of the overlapping part of every segment
    """
    parts = []
    for segment in segments:
        if segment.start_index < end_index and segment.end_index > start_index:
            text_start = max(segment.start_index, start_index) - segment.start_index
            text_end = min(segment.end_index, end_index) - segment.start_index
            parts.append(_slice_utf16(segment.text, text_start, text_end))
    return "".join(parts)


def find_exact_matches(flat: FlattenedText, search_text: str) -> List[MatchRange]:
    """
    Find every occurrence of search_text in the flattened text.

    Scanning resumes one character after each hit, so overlapping matches
    ("aa" twice in "aaa") are all reported.
    """
    matches = []
    if not search_text:
        return matches

    pos = 0
    while True:
        found = flat.text.find(search_text, pos)
        if found == -1:
            break
        matches.append(flat.to_document_range(found, found + len(search_text)))
        pos = found + 1

    return matches


def find_normalized_matches(flat: FlattenedText, search_text: str) -> List[MatchRange]:
    """
    Find occurrences of search_text after normalizing both sides.

    Each hit in the normalized text is mapped back to the original span
    through the per-character offsets recorded during normalization. The
    span's document text is then re-extracted and re-normalized, and the
    match is kept only if that equals the normalized query.
    """
    matches = []
    normalized_search = normalize(search_text)
    if not normalized_search:
        return matches

    normalized_text, offsets = normalize_with_offsets(flat.text)

    pos = 0
    while True:
        found = normalized_text.find(normalized_search, pos)
        if found == -1:
            break
        pos = found + 1

        original_start = offsets[found]
        original_end = offsets[found + len(normalized_search) - 1] + 1
        candidate = flat.to_document_range(original_start, original_end)

        actual_text = extract_text_from_range(
            flat.segments, candidate.start_index, candidate.end_index
        )
        if normalize(actual_text) != normalized_search:
            logger.debug(
                f"Discarding normalized match at {candidate.start_index}-"
                f"{candidate.end_index}: {actual_text!r} does not round-trip"
            )
            continue

        matches.append(candidate)

    return matches


def find_validated_matches(flat: FlattenedText, search_text: str) -> List[MatchRange]:
    """Exact matches, or normalized matches when there are no exact ones."""
    matches = find_exact_matches(flat, search_text)
    if not matches:
        matches = find_normalized_matches(flat, search_text)
    return matches


def build_search_variants(search_text: str) -> List[str]:
    """Query variants in priority order: literal, normalized, apostrophes standardized."""
    return [
        search_text,
        normalize(search_text),
        standardize_apostrophes(search_text),
    ]


def collect_variant_matches(
    flat: FlattenedText,
    search_text: str,
    instance: int = 1
) -> List[MatchRange]:
    """
    Accumulate matches across query variants.

    Variants are searched in priority order and accumulation stops once the
    running total reaches instance. Duplicates are kept; select_instance
    removes them.
    """
    all_matches: List[MatchRange] = []

    for variant in build_search_variants(search_text):
        matches = find_validated_matches(flat, variant)
        logger.debug(f"Search variant {variant!r} found {len(matches)} match(es)")
        all_matches.extend(matches)

        if len(all_matches) >= instance:
            break

    return all_matches


def select_instance(matches: Iterable[MatchRange], instance: int) -> Optional[MatchRange]:
    """
    Return the instance-th (1-based) distinct match in document order.

    Args:
        matches: Candidate matches, possibly with duplicates
        instance: Which occurrence to return, starting at 1

    Returns:
        The selected MatchRange, or None if there are fewer distinct matches

    Raises:
        ValueError: If instance is less than 1
    """
    if instance < 1:
        raise ValueError(f"instance must be >= 1, got {instance}")

    unique_matches = sorted(dict.fromkeys(matches), key=lambda m: m.start_index)

    if len(unique_matches) >= instance:
        return unique_matches[instance - 1]
    return None


def find_text_range(
    flat: FlattenedText,
    search_text: str,
    instance: int = 1
) -> Optional[MatchRange]:
    """
    Locate the instance-th occurrence of search_text in flattened text.

    Args:
        flat: Flattened document text
        search_text: Text to locate
        instance: Which occurrence to return (1=first, 2=second, ...)

    Returns:
        MatchRange in document indices, or None if not found
    """
    if not search_text:
        return None

    matches = collect_variant_matches(flat, search_text, instance)
    return select_instance(matches, instance)


def find_text_range_in_document(
    doc_data: Dict[str, Any],
    search_text: str,
    instance: int = 1
) -> Optional[MatchRange]:
    """
    Locate text in an already fetched document.

    Args:
        doc_data: Raw document data from Google Docs API
        search_text: Text to locate
        instance: Which occurrence to return (1=first, 2=second, ...)

    Returns:
        MatchRange in document indices, or None if not found
    """
    flat = build_flattened_text(get_body_content(doc_data))
    return find_text_range(flat, search_text, instance)


def find_all_text_ranges_in_document(
    doc_data: Dict[str, Any],
    search_text: str
) -> List[MatchRange]:
    """
    Find every validated occurrence of search_text in a fetched document.

    Uses the exact pass, falling back to the normalized pass, for the literal
    query only.

    Returns:
        Distinct matches sorted by start_index
    """
    if not search_text:
        return []

    flat = build_flattened_text(get_body_content(doc_data))
    matches = find_validated_matches(flat, search_text)
    return sorted(dict.fromkeys(matches), key=lambda m: m.start_index)


def find_paragraph_range_in_document(
    doc_data: Dict[str, Any],
    index: int
) -> Optional[MatchRange]:
    """
    Find the paragraph containing index in an already fetched document.

    Args:
        doc_data: Raw document data from Google Docs API
        index: Position within the document

    Returns:
        MatchRange of the enclosing paragraph, or None
    """
    elements = parse_structural_elements(get_body_content(doc_data))
    return find_enclosing_paragraph(elements, index)
