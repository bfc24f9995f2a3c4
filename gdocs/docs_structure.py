"""
Google Docs Document Structure Parsing

This module parses the structural content of a Google Docs body into typed
elements (paragraphs, tables, section breaks, tables of contents) and walks
them to extract text runs and to find the paragraph enclosing an index.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence, Union

from gdocs.docs_types import MatchRange, TextSegment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParagraphElement:
    """One element of a paragraph. text is the text run content, or None for non-text elements."""

    start_index: Optional[int]
    end_index: Optional[int]
    text: Optional[str] = None


@dataclass(frozen=True)
class Paragraph:
    start_index: Optional[int]
    end_index: Optional[int]
    elements: tuple[ParagraphElement, ...] = ()


@dataclass(frozen=True)
class TableCell:
    start_index: Optional[int]
    end_index: Optional[int]
    content: tuple["StructuralElement", ...] = ()


@dataclass(frozen=True)
class Table:
    start_index: Optional[int]
    end_index: Optional[int]
    rows: tuple[tuple[TableCell, ...], ...] = ()

    def iter_cells(self) -> Iterator[TableCell]:
        """Yield cells row by row, left to right."""
        for row in self.rows:
            yield from row


@dataclass(frozen=True)
class SectionBreak:
    start_index: Optional[int]
    end_index: Optional[int]


@dataclass(frozen=True)
class TableOfContents:
    start_index: Optional[int]
    end_index: Optional[int]


StructuralElement = Union[Paragraph, Table, SectionBreak, TableOfContents]


def get_body_content(doc_data: dict[str, Any]) -> list[dict[str, Any]]:
    """Return the raw body content array of a document, or an empty list."""
    return (doc_data.get("body") or {}).get("content") or []


def parse_structural_elements(
    content: list[dict[str, Any]],
) -> list[StructuralElement]:
    """
    Parse a raw body (or table cell) content array into typed elements.

    Args:
        content: List of structural element dicts from Google Docs API

    Returns:
        Parsed elements in content order. Elements of unknown kind are skipped.
    """
    elements = []
    for element in content:
        parsed = _parse_element(element)
        if parsed is None:
            logger.debug(
                f"Skipping unsupported structural element with keys {sorted(element)}"
            )
            continue
        elements.append(parsed)
    return elements


def _parse_element(element: dict[str, Any]) -> Optional[StructuralElement]:
    start_index = element.get("startIndex")
    end_index = element.get("endIndex")

    if "paragraph" in element:
        paragraph = element["paragraph"] or {}
        return Paragraph(
            start_index=start_index,
            end_index=end_index,
            elements=tuple(
                _parse_paragraph_element(pe) for pe in paragraph.get("elements", [])
            ),
        )

    if "table" in element:
        table = element["table"] or {}
        rows = []
        for row in table.get("tableRows", []):
            cells = []
            for cell in row.get("tableCells", []):
                cells.append(
                    TableCell(
                        start_index=cell.get("startIndex"),
                        end_index=cell.get("endIndex"),
                        content=tuple(
                            parse_structural_elements(cell.get("content", []))
                        ),
                    )
                )
            rows.append(tuple(cells))
        return Table(start_index=start_index, end_index=end_index, rows=tuple(rows))

    if "sectionBreak" in element:
        return SectionBreak(start_index=start_index, end_index=end_index)

    if "tableOfContents" in element:
        return TableOfContents(start_index=start_index, end_index=end_index)

    return None


def _parse_paragraph_element(element: dict[str, Any]) -> ParagraphElement:
    text_run = element.get("textRun")
    return ParagraphElement(
        start_index=element.get("startIndex"),
        end_index=element.get("endIndex"),
        text=text_run.get("content") if text_run else None,
    )


def extract_text_segments(elements: Sequence[StructuralElement]) -> list[TextSegment]:
    """
    Extract every text run from parsed elements, recursing into table cells.

    Runs without text or without both indices are not extractable and are
    skipped. Segments come back in traversal order, which is not guaranteed
    to be document order; sort by start_index before flattening.

    Args:
        elements: Parsed structural elements

    Returns:
        List of TextSegment in traversal order
    """
    segments: list[TextSegment] = []
    _collect_segments(elements, segments)
    return segments


def _collect_segments(
    elements: Sequence[StructuralElement], segments: list[TextSegment]
) -> None:
    for element in elements:
        if isinstance(element, Paragraph):
            for pe in element.elements:
                if pe.text and pe.start_index is not None and pe.end_index is not None:
                    segments.append(TextSegment(pe.text, pe.start_index, pe.end_index))
        elif isinstance(element, Table):
            for cell in element.iter_cells():
                _collect_segments(cell.content, segments)
        elif isinstance(element, (SectionBreak, TableOfContents)):
            continue
        else:
            raise TypeError(f"Unexpected structural element: {element!r}")


def find_enclosing_paragraph(
    elements: Sequence[StructuralElement], index: int
) -> Optional[MatchRange]:
    """
    Find the bounds of the paragraph containing a document index.

    Scans elements in order; the first paragraph whose [start, end) contains
    the index wins. When the index falls inside a table, its cells are
    searched recursively so the cell's paragraph is returned rather than the
    table's outer range.

    Args:
        elements: Parsed structural elements
        index: Position in the document

    Returns:
        MatchRange of the paragraph, or None if the index is not inside one
        (for example it points at a section break)
    """
    for element in elements:
        if element.start_index is None or element.end_index is None:
            continue
        if not element.start_index <= index < element.end_index:
            continue

        if isinstance(element, Paragraph):
            return MatchRange(element.start_index, element.end_index)
        elif isinstance(element, Table):
            logger.debug(f"Index {index} is within a table, searching cells")
            for cell in element.iter_cells():
                found = find_enclosing_paragraph(cell.content, index)
                if found:
                    return found
        elif isinstance(element, (SectionBreak, TableOfContents)):
            logger.debug(
                f"Index {index} is within a {type(element).__name__} "
                f"({element.start_index}-{element.end_index}), not a paragraph"
            )
        else:
            raise TypeError(f"Unexpected structural element: {element!r}")

    return None
