"""
Validation Manager

This module provides centralized input validation for Google Docs text and
paragraph lookups, so bad input is rejected before any document is fetched.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from gdocs.errors import (
    DocsErrorBuilder,
    StructuredError,
)

logger = logging.getLogger(__name__)


class ValidationManager:
    """
    Centralized validation manager for Google Docs lookups.

    Each validate_* method returns a tuple of (is_valid, structured_error),
    where structured_error is None when the input is valid.
    """

    def __init__(self):
        """Initialize the validation manager."""
        self.validation_rules = self._setup_validation_rules()

    def _setup_validation_rules(self) -> Dict[str, Any]:
        """Setup validation rules and constraints."""
        return {
            'min_instance': 1,
            'min_index': 0,
            'max_search_text_length': 1000000,
        }

    def validate_document_id(self, document_id: str) -> Tuple[bool, Optional[StructuredError]]:
        """
        Validate a Google Docs document ID.

        Args:
            document_id: Document ID to validate

        Returns:
            Tuple of (is_valid, structured_error)
        """
        if not isinstance(document_id, str):
            return False, DocsErrorBuilder.invalid_document_id(
                document_id, f"must be a string, got {type(document_id).__name__}"
            )

        if not document_id.strip():
            return False, DocsErrorBuilder.invalid_document_id(document_id, "cannot be empty")

        return True, None

    def validate_search_text(self, search_text: str) -> Tuple[bool, Optional[StructuredError]]:
        """
        Validate text to search for.

        Args:
            search_text: Query text

        Returns:
            Tuple of (is_valid, structured_error)
        """
        if not isinstance(search_text, str) or not search_text:
            return False, DocsErrorBuilder.empty_search_text()

        if len(search_text) > self.validation_rules['max_search_text_length']:
            logger.warning(f"Search text is unusually long ({len(search_text)} characters)")

        return True, None

    def validate_instance(
        self,
        instance: int,
        search_text: str = ""
    ) -> Tuple[bool, Optional[StructuredError]]:
        """
        Validate a 1-based occurrence number.

        Args:
            instance: Occurrence to select
            search_text: Query text, for the error context

        Returns:
            Tuple of (is_valid, structured_error)
        """
        # bool is an int subclass; True is not a meaningful occurrence
        if isinstance(instance, bool) or not isinstance(instance, int):
            return False, DocsErrorBuilder.invalid_occurrence(instance, search_text)

        if instance < self.validation_rules['min_instance']:
            return False, DocsErrorBuilder.invalid_occurrence(instance, search_text)

        return True, None

    def validate_index(self, index: int) -> Tuple[bool, Optional[StructuredError]]:
        """
        Validate a single document index.

        Args:
            index: Index to validate

        Returns:
            Tuple of (is_valid, structured_error)
        """
        if isinstance(index, bool) or not isinstance(index, int):
            return False, DocsErrorBuilder.invalid_index(index)

        if index < self.validation_rules['min_index']:
            return False, DocsErrorBuilder.invalid_index(index)

        return True, None
