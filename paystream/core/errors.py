"""
Centralized error types and safe error responses.

Evaluator-level failures never escape as exceptions; they are turned into
low-confidence decisions. The types here are raised by the judgment oracle
and the payment components and are rendered by the API exception handlers.
"""
import logging
import traceback
from typing import Any

from fastapi import HTTPException
from fastapi.requests import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from paystream.core.config import settings

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Standardized error response model."""
    error: str
    detail: str | None = None


class PaystreamError(Exception):
    """Base exception for PayStream application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize the PayStream error.

        Args:
            message: Error message
            details: Optional additional error details
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class OracleError(PaystreamError):
    """The judgment oracle failed to produce a usable reply."""

    pass


class ChallengeParseError(PaystreamError):
    """A 402 challenge was received but its requirement could not be parsed."""

    pass


class PaymentTransportError(PaystreamError):
    """The HTTP transport failed while fetching or retrying a paid request."""

    pass


class BudgetExceededError(PaystreamError):
    """A payment would exceed the agent's configured budget."""

    pass


def create_safe_error_message(error: Exception) -> str:
    """
    Create a safe error message that doesn't leak sensitive information.

    Args:
        error: The exception that occurred

    Returns:
        A safe error message for the user
    """
    if settings.debug:
        return str(error)

    if isinstance(error, PaystreamError):
        return error.message

    safe_messages = {
        "ValueError": "Invalid input provided",
        "ValidationError": "Request validation failed",
        "ConnectionError": "Service unavailable",
        "TimeoutError": "Request timed out",
        "HTTPException": "Request processing error",
    }

    return safe_messages.get(type(error).__name__, "An error occurred while processing your request")


def create_error_response(
    status_code: int, message: str, detail: str | None = None
) -> JSONResponse:
    """
    Create a standardized JSON error response.

    Args:
        status_code: HTTP status code
        message: Main error message
        detail: Optional additional detail

    Returns:
        JSONResponse with error information
    """
    error_response = ErrorResponse(
        error=message, detail=detail if settings.debug else None
    )

    logger.error(f"Error {status_code}: {message} - {detail}")

    return JSONResponse(
        status_code=status_code, content=error_response.model_dump()
    )


async def http_exception_handler(
    request: Request, exc: HTTPException
) -> JSONResponse:
    """Render HTTPException with a sanitized body."""
    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail) if exc.detail else create_safe_error_message(exc),
        detail=str(exc.detail) if exc.detail else None,
    )


async def paystream_exception_handler(
    request: Request, exc: PaystreamError
) -> JSONResponse:
    """Render application errors as a bad-gateway response."""
    return create_error_response(
        status_code=502,
        message=create_safe_error_message(exc),
        detail=str(exc.details) if exc.details else None,
    )


async def general_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """
    Handle all other exceptions globally.

    Args:
        request: The request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with sanitized error information
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    if settings.debug:
        detail = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    else:
        detail = None

    return create_error_response(
        status_code=500,
        message="Internal server error",
        detail=detail,
    )
