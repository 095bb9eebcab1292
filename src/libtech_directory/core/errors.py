"""
Global Error Handling

This module defines application-wide exception handlers for the directory
service.

Design Goals
------------
- Never leak internal exception details to clients
- Always return deterministic, machine-readable error responses
- Log full stack traces internally for debugging
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import Request
from fastapi.responses import JSONResponse

from ..catalog.facets import UnknownFacetError
from ..catalog.loader import LoadError

logger = logging.getLogger("libtech.errors")


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def load_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Report a failed dataset load.

    The previous dataset is still being served; the client only learns that
    the refresh did not happen.
    """
    logger.error(
        "Dataset load failed during request %s %s: %s",
        request.method,
        request.url.path,
        exc,
    )
    payload: Dict[str, Any] = {
        "error": "dataset_load_failed",
        "detail": str(exc) if isinstance(exc, LoadError) else "Dataset load failed",
    }
    return JSONResponse(status_code=502, content=payload)


async def unknown_facet_handler(request: Request, exc: Exception) -> JSONResponse:
    payload: Dict[str, Any] = {
        "error": "unknown_facet",
        "detail": str(exc) if isinstance(exc, UnknownFacetError) else "Unknown facet",
    }
    return JSONResponse(status_code=400, content=payload)


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Behavior
    --------
    - Logs the full exception stack trace for internal diagnostics.
    - Returns a generic 500 error to the client with no internal details.

    Parameters
    ----------
    request : Request
        The incoming HTTP request that triggered the exception.

    exc : Exception
        The uncaught exception instance.
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
