"""
Unit tests for text reconstruction and matching.

Tests the text location pipeline:
- flatten_segments / build_flattened_text
- extract_text_from_range
- find_exact_matches / find_normalized_matches / find_validated_matches
- collect_variant_matches
- select_instance
- find_text_range_in_document / find_all_text_ranges_in_document
"""
import pytest

import gdocs.docs_helpers as docs_helpers
from gdocs.docs_helpers import (
    build_flattened_text,
    build_search_variants,
    collect_variant_matches,
    extract_text_from_range,
    find_all_text_ranges_in_document,
    find_exact_matches,
    find_normalized_matches,
    find_text_range,
    find_text_range_in_document,
    find_validated_matches,
    flatten_segments,
    select_instance,
)
from gdocs.docs_types import CharMapping, MatchRange, TextSegment, utf16_length


def create_mock_paragraph(text: str, start_index: int):
    """Create a mock paragraph element with a single text run."""
    end_index = start_index + utf16_length(text) + 1  # +1 for newline
    return {
        "startIndex": start_index,
        "endIndex": end_index,
        "paragraph": {
            "elements": [
                {
                    "startIndex": start_index,
                    "endIndex": end_index,
                    "textRun": {"content": text + "\n"},
                }
            ]
        },
    }


def create_mock_runs_paragraph(runs, start_index: int):
    """Create a mock paragraph split into several text runs (styling boundaries)."""
    elements = []
    index = start_index
    for run in runs:
        elements.append(
            {
                "startIndex": index,
                "endIndex": index + utf16_length(run),
                "textRun": {"content": run},
            }
        )
        index += utf16_length(run)
    return {
        "startIndex": start_index,
        "endIndex": index,
        "paragraph": {"elements": elements},
    }


def create_mock_document(elements):
    """Create a mock document with given elements."""
    return {"title": "Test Document", "body": {"content": elements}}


def range_text(doc_data, match: MatchRange) -> str:
    """Text of the document covered by a match."""
    flat = build_flattened_text(doc_data["body"]["content"])
    return extract_text_from_range(flat.segments, match.start_index, match.end_index)


class TestFlattenSegments:
    """Tests for flatten_segments and build_flattened_text."""

    def test_concatenates_segments_and_maps_every_character(self):
        segments = [TextSegment("ab", 1, 3), TextSegment("cd\n", 10, 13)]

        flat = flatten_segments(segments)

        assert flat.text == "abcd\n"
        assert len(flat.char_map) == len(flat.text)
        assert flat.char_map[0] == CharMapping(0, 0, 1)
        assert flat.char_map[2] == CharMapping(1, 0, 10)
        assert [m.original_index for m in flat.char_map] == [1, 2, 10, 11, 12]

    def test_build_sorts_segments_by_position(self):
        content = [create_mock_paragraph("Later", 20), create_mock_paragraph("Early", 1)]

        flat = build_flattened_text(content)

        assert flat.text == "Early\nLater\n"
        assert [s.start_index for s in flat.segments] == [1, 20]

    def test_astral_characters_take_two_document_indices(self):
        flat = flatten_segments([TextSegment("😀 Hi", 1, 6)])

        assert [m.original_index for m in flat.char_map] == [1, 3, 4, 5]
        assert flat.to_document_range(2, 4) == MatchRange(4, 6)
        assert flat.to_document_range(0, 1) == MatchRange(1, 3)

    def test_empty_input(self):
        flat = flatten_segments([])
        assert flat.text == ""
        assert flat.char_map == []


class TestExtractTextFromRange:
    """Tests for extract_text_from_range function."""

    def test_extracts_across_segments(self):
        segments = [TextSegment("Hello ", 1, 7), TextSegment("world\n", 7, 13)]
        assert extract_text_from_range(segments, 4, 10) == "lo wor"

    def test_range_inside_one_segment(self):
        segments = [TextSegment("Hello world\n", 1, 13)]
        assert extract_text_from_range(segments, 7, 12) == "world"

    def test_range_outside_text_is_empty(self):
        segments = [TextSegment("Hello\n", 1, 7)]
        assert extract_text_from_range(segments, 20, 30) == ""

    def test_slices_by_utf16_offsets(self):
        segments = [TextSegment("😀 Hello\n", 1, 10)]
        assert extract_text_from_range(segments, 4, 9) == "Hello"
        assert extract_text_from_range(segments, 1, 3) == "😀"


class TestExactMatches:
    """Tests for find_exact_matches function."""

    def test_second_hello_maps_to_document_indices(self):
        doc = create_mock_document([create_mock_paragraph("Hello world. Hello again.", 1)])

        result = find_text_range_in_document(doc, "Hello", 2)

        # logical offset 13, document index 14
        assert result == MatchRange(14, 19)
        assert range_text(doc, result) == "Hello"

    def test_overlapping_matches_are_reported(self):
        flat = flatten_segments([TextSegment("aaa", 1, 4)])

        matches = find_exact_matches(flat, "aa")

        assert matches == [MatchRange(1, 3), MatchRange(2, 4)]

    def test_match_across_text_runs(self):
        doc = create_mock_document(
            [create_mock_runs_paragraph(["The ", "quick", " brown fox\n"], 1)]
        )

        result = find_text_range_in_document(doc, "quick brown", 1)

        assert result == MatchRange(5, 16)
        assert range_text(doc, result) == "quick brown"

    def test_match_inside_table_cell(self):
        doc = create_mock_document(
            [
                create_mock_paragraph("Intro", 1),
                {
                    "startIndex": 7,
                    "endIndex": 20,
                    "table": {
                        "tableRows": [
                            {
                                "tableCells": [
                                    {
                                        "startIndex": 9,
                                        "endIndex": 20,
                                        "content": [create_mock_paragraph("Revenue", 10)],
                                    }
                                ]
                            }
                        ]
                    },
                },
            ]
        )

        assert find_text_range_in_document(doc, "Revenue") == MatchRange(10, 17)

    def test_empty_query_finds_nothing(self):
        flat = flatten_segments([TextSegment("abc", 1, 4)])
        assert find_exact_matches(flat, "") == []
        assert find_text_range(flat, "") is None


class TestNormalizedMatches:
    """Tests for find_normalized_matches and find_validated_matches."""

    def test_curly_apostrophe_in_document_straight_in_query(self):
        doc = create_mock_document([create_mock_paragraph("I don’t know", 1)])
        flat = build_flattened_text(doc["body"]["content"])

        assert find_exact_matches(flat, "don't") == []
        matches = find_normalized_matches(flat, "don't")

        assert matches == [MatchRange(3, 8)]
        assert range_text(doc, matches[0]) == "don’t"

    def test_straight_apostrophe_in_document_curly_in_query(self):
        doc = create_mock_document([create_mock_paragraph("We can't stop", 1)])

        result = find_text_range_in_document(doc, "can’t", 1)

        assert result == MatchRange(4, 9)

    def test_collapsed_whitespace_maps_back_to_full_span(self):
        doc = create_mock_document([create_mock_paragraph("Hello   world", 1)])

        result = find_text_range_in_document(doc, "Hello world", 1)

        assert result == MatchRange(1, 14)
        assert range_text(doc, result) == "Hello   world"

    def test_non_breaking_space_and_em_dash(self):
        doc = create_mock_document(
            [create_mock_paragraph("Total:\u00a0100 \u2014 final", 1)]
        )

        result = find_text_range_in_document(doc, "Total: 100 - final", 1)

        assert result == MatchRange(1, 19)

    def test_match_after_whitespace_run_keeps_position(self):
        doc = create_mock_document(
            [create_mock_paragraph("one  two   three “four”", 1)]
        )

        result = find_text_range_in_document(doc, '"four"', 1)

        assert result is not None
        assert range_text(doc, result) == "“four”"

    def test_normalized_pass_only_when_no_exact_match(self):
        doc = create_mock_document([create_mock_paragraph("don't and don’t", 1)])
        flat = build_flattened_text(doc["body"]["content"])

        matches = find_validated_matches(flat, "don't")

        assert matches == [MatchRange(1, 6)]

    def test_every_normalized_match_round_trips(self):
        doc = create_mock_document(
            [
                create_mock_paragraph("It’s  here. It’s\u00a0there.", 1),
                create_mock_paragraph("it’s   everywhere", 40),
            ]
        )
        flat = build_flattened_text(doc["body"]["content"])

        matches = find_normalized_matches(flat, "It's here")

        assert matches == [MatchRange(1, 11)]
        for match in matches:
            actual = extract_text_from_range(
                flat.segments, match.start_index, match.end_index
            )
            assert docs_helpers.normalize(actual) == "It's here"

    def test_candidate_that_does_not_round_trip_is_discarded(self, monkeypatch):
        real = docs_helpers.normalize_with_offsets

        def shifted(text):
            normalized, offsets = real(text)
            return normalized, [offset + 1 for offset in offsets]

        monkeypatch.setattr(docs_helpers, "normalize_with_offsets", shifted)
        flat = build_flattened_text([create_mock_paragraph("I don’t know", 1)])

        assert find_normalized_matches(flat, "don't") == []

    def test_whitespace_only_query_finds_nothing(self):
        flat = build_flattened_text([create_mock_paragraph("a b", 1)])
        assert find_normalized_matches(flat, "   ") == []


class TestSearchVariants:
    """Tests for build_search_variants and collect_variant_matches."""

    def test_variant_order(self):
        assert build_search_variants(" it’s — “x” ") == [
            " it’s — “x” ",
            "it's - \"x\"",
            " it's — “x” ",
        ]

    def test_stops_after_first_variant_with_enough_matches(self):
        flat = build_flattened_text([create_mock_paragraph("Hello world", 1)])

        matches = collect_variant_matches(flat, "Hello", 1)

        assert matches == [MatchRange(1, 6)]

    def test_duplicates_are_kept_until_selection(self):
        flat = build_flattened_text([create_mock_paragraph("Hello and Hello", 1)])

        matches = collect_variant_matches(flat, "Hello", 3)

        # literal and normalized variants are identical and both match twice
        assert len(matches) == 4
        assert len(set(matches)) == 2
        assert find_text_range(flat, "Hello", 3) is None


class TestSelectInstance:
    """Tests for select_instance function."""

    def test_selects_by_document_order(self):
        matches = [MatchRange(30, 35), MatchRange(1, 6), MatchRange(14, 19)]

        assert select_instance(matches, 1) == MatchRange(1, 6)
        assert select_instance(matches, 2) == MatchRange(14, 19)
        assert select_instance(matches, 3) == MatchRange(30, 35)

    def test_too_few_matches_returns_none(self):
        assert select_instance([MatchRange(1, 6)], 2) is None
        assert select_instance([], 1) is None

    def test_duplicates_do_not_change_result(self):
        once = [MatchRange(1, 6), MatchRange(14, 19)]
        twice = [MatchRange(1, 6), MatchRange(1, 6), MatchRange(14, 19)]

        assert select_instance(once, 2) == select_instance(twice, 2)
        assert select_instance(twice, 3) is None

    @pytest.mark.parametrize("instance", [0, -1])
    def test_instance_below_one_is_rejected(self, instance):
        with pytest.raises(ValueError):
            select_instance([MatchRange(1, 6)], instance)


class TestFindTextRangeInDocument:
    """End-to-end tests over mock documents."""

    def test_single_occurrence_round_trips(self):
        doc = create_mock_document(
            [
                create_mock_paragraph("Quarterly report", 1),
                create_mock_paragraph("Revenue grew by 12% this year.", 18),
            ]
        )

        for query in ["Quarterly", "grew by 12%", "report\nRevenue", "year."]:
            result = find_text_range_in_document(doc, query, 1)
            assert result is not None
            assert range_text(doc, result) == query

    def test_instances_increase_and_stop(self):
        doc = create_mock_document(
            [
                create_mock_paragraph("note one", 1),
                create_mock_paragraph("note two note", 10),
            ]
        )

        starts = [find_text_range_in_document(doc, "note", k).start_index for k in (1, 2, 3)]

        assert starts == sorted(starts)
        assert len(set(starts)) == 3
        assert find_text_range_in_document(doc, "note", 4) is None

    def test_not_found_returns_none(self):
        doc = create_mock_document([create_mock_paragraph("Hello", 1)])
        assert find_text_range_in_document(doc, "Goodbye") is None

    def test_empty_document(self):
        assert find_text_range_in_document({}, "anything") is None

    def test_astral_text_before_match(self):
        doc = create_mock_document([create_mock_paragraph("😀 Hello", 1)])

        result = find_text_range_in_document(doc, "Hello")

        assert result == MatchRange(4, 9)
        assert range_text(doc, result) == "Hello"


class TestFindAllTextRangesInDocument:
    """Tests for find_all_text_ranges_in_document function."""

    def test_returns_all_sorted(self):
        doc = create_mock_document(
            [
                create_mock_paragraph("TODO later", 20),
                create_mock_paragraph("TODO first", 1),
            ]
        )

        assert find_all_text_ranges_in_document(doc, "TODO") == [
            MatchRange(1, 5),
            MatchRange(20, 24),
        ]

    def test_falls_back_to_normalized(self):
        doc = create_mock_document([create_mock_paragraph("it’s fine", 1)])
        assert find_all_text_ranges_in_document(doc, "it's") == [MatchRange(1, 5)]

    def test_empty_query(self):
        doc = create_mock_document([create_mock_paragraph("text", 1)])
        assert find_all_text_ranges_in_document(doc, "") == []
