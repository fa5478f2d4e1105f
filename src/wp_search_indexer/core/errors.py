"""
Error Taxonomy and Global Error Handling

This module defines the exceptions raised across the indexing pipeline and
the application-wide exception handler for the webhook API.

Propagation Policy
------------------
- Per-item and per-batch errors are caught at the smallest scope and logged
- They never abort the outer loop over pages, content types or sites
- Transient and permanent upstream failures are treated the same way
- The webhook API never leaks internal exception details to clients
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("indexer.errors")


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class IndexerError(RuntimeError):
    """Base error for the indexing pipeline."""


class UnknownTransformError(IndexerError, LookupError):
    """Raised when a content type has no registered record transformer."""

    def __init__(self, type_tag: str) -> None:
        super().__init__(f"No record transformer registered for '{type_tag}'")
        self.type_tag = type_tag


UnknownTypeError = UnknownTransformError


class ContentStoreError(IndexerError):
    """Raised when the WordPress REST API cannot be queried."""


class SearchServiceError(IndexerError):
    """Raised when a call to the search service fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamWriteError(SearchServiceError):
    """Raised when a delete, save or clear against the search service fails."""


class ConfigMissingError(IndexerError, FileNotFoundError):
    """Raised when an index settings, synonyms or rules file is absent."""


class InvalidArgumentError(IndexerError, ValueError):
    """Raised when an operator-supplied argument is not acceptable."""


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Logs the full stack trace internally and returns a generic 500 error
    with no internal details.
    """
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "internal_server_error",
        "detail": "Internal server error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )
