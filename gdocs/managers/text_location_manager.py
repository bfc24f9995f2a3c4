"""
Text Location Manager

This module provides the async entry points that fetch a Google Docs
document and resolve text or paragraph ranges in it. Each lookup performs a
single documents().get call and then works purely in memory, so concurrent
lookups share no state. Ranges may go stale if the document changes before
the caller acts on them.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

from core.utils import handle_http_errors
from gdocs.apostrophe_split import ApostrophePhraseMatch, locate_apostrophe_phrase
from gdocs.docs_helpers import build_flattened_text, find_text_range
from gdocs.docs_structure import (
    find_enclosing_paragraph,
    get_body_content,
    parse_structural_elements,
)
from gdocs.docs_types import MatchRange
from gdocs.errors import DocsValidationError
from gdocs.managers.validation_manager import ValidationManager

logger = logging.getLogger(__name__)

# Paragraph text runs with indices, recursing into table cells
TEXT_SEARCH_FIELDS = (
    "body(content("
    "paragraph(elements(startIndex,endIndex,textRun(content))),"
    "table(tableRows(tableCells(content(paragraph(elements(startIndex,endIndex,textRun(content))))))),"
    "startIndex,endIndex))"
)

# Structural element bounds, including section breaks and tables of contents
PARAGRAPH_LOOKUP_FIELDS = (
    "body(content(startIndex,endIndex,paragraph,table,sectionBreak,tableOfContents))"
)


class TextLocationManager:
    """
    High-level manager for locating text and paragraphs in a Google Doc.

    Handles:
    - Input validation before fetching
    - Fetching the document structure with a minimal field mask
    - Translating API failures into user-facing or internal errors
    - Resolving matches to native document ranges
    """

    def __init__(self, service):
        """
        Initialize the text location manager.

        Args:
            service: Google Docs API service instance
        """
        self.service = service
        self.validator = ValidationManager()

    async def locate_text(
        self,
        document_id: str,
        search_text: str,
        instance: int = 1
    ) -> Optional[MatchRange]:
        """
        Find the instance-th occurrence of text in a document.

        Args:
            document_id: ID of the document to search
            search_text: Text to locate
            instance: Which occurrence to return (1=first, 2=second, ...)

        Returns:
            MatchRange in document indices, or None if there are fewer
            occurrences than requested

        Raises:
            DocsValidationError: For invalid input
            DocumentNotFoundError: If the document does not exist
            DocumentPermissionError: If the document cannot be read
            DocumentFetchError: For any other fetch failure
        """
        self._validate_search(document_id, search_text, instance)

        doc_data = await self._fetch_document(
            document_id=document_id, fields=TEXT_SEARCH_FIELDS, operation="searching text"
        )
        flat = build_flattened_text(get_body_content(doc_data))
        found = find_text_range(flat, search_text, instance)

        if found:
            logger.info(
                f"Found instance {instance} of {search_text!r} in {document_id} "
                f"at {found.start_index}-{found.end_index}"
            )
        else:
            logger.info(
                f"Instance {instance} of {search_text!r} not found in {document_id}"
            )
        return found

    async def locate_paragraph(
        self,
        document_id: str,
        index: int
    ) -> Optional[MatchRange]:
        """
        Find the paragraph containing a document index.

        Args:
            document_id: ID of the document
            index: Position within the target paragraph

        Returns:
            MatchRange of the paragraph, or None if the index is not inside one

        Raises:
            DocsValidationError: For invalid input
            DocumentNotFoundError: If the document does not exist
            DocumentPermissionError: If the document cannot be read
            DocumentFetchError: For any other fetch failure
        """
        self._raise_if_invalid(self.validator.validate_document_id(document_id))
        self._raise_if_invalid(self.validator.validate_index(index))

        doc_data = await self._fetch_document(
            document_id=document_id,
            fields=PARAGRAPH_LOOKUP_FIELDS,
            operation="finding paragraph",
        )
        elements = parse_structural_elements(get_body_content(doc_data))
        found = find_enclosing_paragraph(elements, index)

        if found is None:
            logger.info(f"No paragraph contains index {index} in {document_id}")
        return found

    async def locate_apostrophe_phrase(
        self,
        document_id: str,
        search_text: str,
        instance: int = 1
    ) -> Optional[ApostrophePhraseMatch]:
        """
        Locate a phrase containing an apostrophe, splitting it when needed.

        Both halves are resolved against the same fetched snapshot.

        Args:
            document_id: ID of the document to search
            search_text: Phrase to locate, e.g. "that's almost 20% more"
            instance: Occurrence requested for each lookup (1-based)

        Returns:
            ApostrophePhraseMatch, or None unless every required part was found

        Raises:
            DocsValidationError: For invalid input
            DocumentNotFoundError: If the document does not exist
            DocumentPermissionError: If the document cannot be read
            DocumentFetchError: For any other fetch failure
        """
        self._validate_search(document_id, search_text, instance)

        doc_data = await self._fetch_document(
            document_id=document_id, fields=TEXT_SEARCH_FIELDS, operation="searching text"
        )
        flat = build_flattened_text(get_body_content(doc_data))

        return locate_apostrophe_phrase(
            lambda text, occurrence: find_text_range(flat, text, occurrence),
            search_text,
            instance,
        )

    def _validate_search(self, document_id: str, search_text: str, instance: int) -> None:
        self._raise_if_invalid(self.validator.validate_document_id(document_id))
        self._raise_if_invalid(self.validator.validate_search_text(search_text))
        self._raise_if_invalid(self.validator.validate_instance(instance, search_text))

    @staticmethod
    def _raise_if_invalid(result) -> None:
        is_valid, error = result
        if not is_valid:
            raise DocsValidationError(error)

    @handle_http_errors("fetching document")
    async def _fetch_document(
        self,
        document_id: str,
        fields: str,
        operation: str
    ) -> Dict[str, Any]:
        """Fetch the document structure restricted to fields."""
        logger.info(f"Fetching document {document_id} for {operation}")
        return await asyncio.to_thread(
            self.service.documents().get(documentId=document_id, fields=fields).execute
        )
