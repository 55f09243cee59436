"""
Shared error handling for the registry submission client.
"""

import asyncio
from typing import Dict, Any, Optional
from pydantic import BaseModel

from shared.logging import request_id_var


# Cancellation is signalled with asyncio's own exception and is never wrapped.
CancellationError = asyncio.CancelledError


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class SubmissionClientException(Exception):
    """Base exception for the submission client."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class ConfigurationError(SubmissionClientException):
    """Invalid client configuration, raised at construction time."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class TransportError(SubmissionClientException):
    """The request could not be delivered to the registry."""

    def __init__(self, message: str = "Transport error", details: Optional[Dict[str, Any]] = None):
        super().__init__("TRANSPORT_ERROR", message, details)


class ApiError(SubmissionClientException):
    """The registry answered with a non-200 status."""

    def __init__(self, status_code: int, body: str, details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.body = body
        merged = {"status_code": status_code, "body": body}
        merged.update(details or {})
        super().__init__("API_ERROR", f"API error: {body}", merged)
