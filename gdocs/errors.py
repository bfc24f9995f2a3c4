"""
Google Docs Error Handling

This module provides structured, actionable error messages for text and
paragraph lookups in Google Docs, plus the exception types raised when a
document cannot be fetched.

User-facing errors (document not found, permission denied, invalid input)
subclass fastmcp's ToolError so an MCP host shows their message to the user.
Any other fetch failure is raised as DocumentFetchError, an internal error.
"""
import json
import logging
from enum import Enum
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from fastmcp.exceptions import ToolError

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standardized error codes for Google Docs lookups."""

    # Document access errors
    INVALID_DOCUMENT_ID = "INVALID_DOCUMENT_ID"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"

    # Index errors
    INVALID_INDEX_TYPE = "INVALID_INDEX_TYPE"

    # Search errors
    EMPTY_SEARCH_TEXT = "EMPTY_SEARCH_TEXT"
    INVALID_OCCURRENCE = "INVALID_OCCURRENCE"

    # Operation errors
    API_ERROR = "API_ERROR"


@dataclass
class ErrorContext:
    """Additional context for error messages."""
    received: Optional[Dict[str, Any]] = None
    expected: Optional[Dict[str, Any]] = None
    possible_causes: Optional[List[str]] = None


@dataclass
class StructuredError:
    """
    Structured error response with actionable guidance.

    Attributes:
        error: Always True for error responses
        code: Machine-readable error code from ErrorCode enum
        message: Human-readable error description
        reason: Explanation of why this error occurred
        suggestion: Actionable advice on how to fix the issue
        context: Additional context like received values
    """
    error: bool = True
    code: str = ""
    message: str = ""
    reason: str = ""
    suggestion: str = ""
    context: Optional[ErrorContext] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        result = {
            "error": self.error,
            "code": self.code,
            "message": self.message,
        }

        if self.reason:
            result["reason"] = self.reason
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.context:
            ctx = asdict(self.context)
            ctx = {k: v for k, v in ctx.items() if v is not None}
            if ctx:
                result["context"] = ctx

        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


class DocsErrorBuilder:
    """
    Builder for creating structured error messages.

    Usage:
        error = DocsErrorBuilder.document_not_found("doc_id").to_json()
    """

    @staticmethod
    def invalid_document_id(document_id: Any, issue: str) -> StructuredError:
        """Error when the document ID is malformed."""
        return StructuredError(
            code=ErrorCode.INVALID_DOCUMENT_ID.value,
            message=f"Invalid document ID: {issue}",
            reason="Google Docs lookups need the document ID from the document URL.",
            suggestion="Copy the ID from docs.google.com/document/d/{document_id}/edit",
            context=ErrorContext(received={"document_id": document_id})
        )

    @staticmethod
    def empty_search_text() -> StructuredError:
        """Error when search text is empty."""
        return StructuredError(
            code=ErrorCode.EMPTY_SEARCH_TEXT.value,
            message="Search text cannot be empty",
            reason="An empty string was provided for the search parameter, which would match nothing.",
            suggestion="Provide a non-empty search string to locate text in the document.",
        )

    @staticmethod
    def invalid_occurrence(occurrence: Any, search_text: str) -> StructuredError:
        """Error when the requested occurrence is not a positive integer."""
        return StructuredError(
            code=ErrorCode.INVALID_OCCURRENCE.value,
            message=f"Occurrence must be a positive integer, got {occurrence!r}",
            reason="Occurrences are counted from 1 in document order.",
            suggestion="Use instance=1 for the first match, instance=2 for the second, and so on.",
            context=ErrorContext(
                received={"occurrence": occurrence, "search": search_text},
                expected={"occurrence": "integer >= 1"}
            )
        )

    @staticmethod
    def invalid_index(index: Any) -> StructuredError:
        """Error when a document index is not a non-negative integer."""
        return StructuredError(
            code=ErrorCode.INVALID_INDEX_TYPE.value,
            message=f"Index must be a non-negative integer, got {index!r}",
            reason="Document positions are integer offsets into the document body.",
            suggestion="Pass an index taken from a previous lookup, e.g. a match's start_index.",
            context=ErrorContext(
                received={"index": index},
                expected={"index": "integer >= 0"}
            )
        )

    @staticmethod
    def document_not_found(
        document_id: str
    ) -> StructuredError:
        """Error when a document cannot be found or accessed."""
        return StructuredError(
            code=ErrorCode.DOCUMENT_NOT_FOUND.value,
            message=f"Document with ID '{document_id}' not found or not accessible",
            reason="The document could not be found or you don't have permission to access it.",
            suggestion="Verify the document ID and ensure you have access permissions.",
            context=ErrorContext(
                received={"document_id": document_id},
                possible_causes=[
                    "Document ID is incorrect",
                    "Document was deleted",
                    "You don't have permission to access this document",
                    "Document ID includes extra characters (quotes, spaces)"
                ]
            )
        )

    @staticmethod
    def permission_denied(
        document_id: str,
        operation: str
    ) -> StructuredError:
        """Error when the caller lacks access to the document."""
        return StructuredError(
            code=ErrorCode.PERMISSION_DENIED.value,
            message=f"Permission denied while {operation} in document '{document_id}'",
            reason="The authenticated user cannot read this document.",
            suggestion="Request access from the document owner or authenticate as a user who has it.",
            context=ErrorContext(received={"document_id": document_id})
        )

    @staticmethod
    def api_error(
        operation: str,
        error_message: str,
        document_id: Optional[str] = None
    ) -> StructuredError:
        """Error from Google API call."""
        context_data = {"operation": operation}
        if document_id:
            context_data["document_id"] = document_id

        return StructuredError(
            code=ErrorCode.API_ERROR.value,
            message=f"API error during {operation}: {error_message}",
            reason="The Google Docs API returned an error.",
            suggestion="Check the error message for details. Transient failures can be retried by the caller.",
            context=ErrorContext(
                received=context_data,
                possible_causes=[
                    "API rate limits may have been exceeded",
                    "The Google Docs API may be temporarily unavailable",
                    "The network connection may have been interrupted"
                ]
            )
        )


class DocsToolError(ToolError):
    """User-facing error carrying a StructuredError payload."""

    def __init__(self, error: StructuredError):
        self.error = error
        super().__init__(format_error(error))

    @property
    def code(self) -> str:
        return self.error.code


class DocumentNotFoundError(DocsToolError):
    """The document does not exist or cannot be resolved by ID (HTTP 404)."""


class DocumentPermissionError(DocsToolError):
    """The caller lacks access to the document (HTTP 403)."""


class DocsValidationError(DocsToolError):
    """A lookup was called with invalid input."""


class DocumentFetchError(Exception):
    """Any other failure while fetching a document. Not user-facing."""

    def __init__(self, error: StructuredError):
        self.error = error
        super().__init__(error.message)


def format_error(error: StructuredError) -> str:
    """
    Format a StructuredError for return to the user.

    Returns a JSON string that can be parsed by both humans and AI agents.
    """
    return error.to_json()
