import functools
import logging

from googleapiclient.errors import HttpError

from gdocs.errors import (
    DocsErrorBuilder,
    DocsToolError,
    DocumentFetchError,
    DocumentNotFoundError,
    DocumentPermissionError,
)

logger = logging.getLogger(__name__)


def handle_http_errors(operation: str):
    """
    A decorator to translate Google API failures into the lookup error taxonomy.

    It wraps an async fetch coroutine, catches HttpError, logs a detailed error
    message, and raises:
    - DocumentNotFoundError for HTTP 404
    - DocumentPermissionError for HTTP 403
    - DocumentFetchError for any other HTTP status or unexpected exception

    Nothing is retried here; retry policy belongs to the caller.

    Args:
        operation (str): Default description of what was being done, used in
                         messages (e.g., 'searching text'). An `operation`
                         keyword argument on the call overrides it.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            document_id = kwargs.get("document_id", "unknown")
            action = kwargs.get("operation") or operation
            try:
                return await func(*args, **kwargs)
            except HttpError as error:
                status = error.resp.status
                if status == 404:
                    logger.error(
                        f"Document not found while {action}: {error}", exc_info=True
                    )
                    raise DocumentNotFoundError(
                        DocsErrorBuilder.document_not_found(document_id)
                    ) from error
                if status == 403:
                    logger.error(
                        f"Permission denied while {action}: {error}", exc_info=True
                    )
                    raise DocumentPermissionError(
                        DocsErrorBuilder.permission_denied(document_id, action)
                    ) from error

                logger.error(f"API error while {action}: {error}", exc_info=True)
                raise DocumentFetchError(
                    DocsErrorBuilder.api_error(action, str(error), document_id)
                ) from error
            except DocsToolError:
                # Already user-facing, re-raise without wrapping
                raise
            except Exception as e:
                message = f"An unexpected error occurred while {action}: {e}"
                logger.exception(message)
                raise DocumentFetchError(
                    DocsErrorBuilder.api_error(action, str(e), document_id)
                ) from e

        return wrapper

    return decorator
