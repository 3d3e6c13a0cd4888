#!/usr/bin/env python3
"""
Error handlers for the web application.

Core errors are translated in one place; every error body has the shape
{"success": false, "error": "...", "type": "..."}.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

from core.exceptions import (
    ConflictError,
    InvalidTransition,
    NotFoundError,
    PermissionDenied,
    QuotaExceeded,
    ServiceException,
)

logger = logging.getLogger(__name__)


def status_code_for(exc: ServiceException) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (InvalidTransition, ConflictError)):
        return 409
    if isinstance(exc, PermissionDenied):
        return 403
    if isinstance(exc, QuotaExceeded):
        return 429
    return 400


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = status_code_for(exc)
    if status_code == 409:
        logger.warning(f"Conflict in {request.url.path}: {exc}")
    else:
        logger.info(f"Service error in {request.url.path}: {exc}")

    content = {
        "success": False,
        "error": str(exc),
        "type": exc.__class__.__name__
    }
    if isinstance(exc, InvalidTransition):
        content["current"] = exc.current
        content["requested"] = exc.requested

    return JSONResponse(status_code=status_code, content=content)


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        }
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
