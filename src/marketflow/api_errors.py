"""Structured API error responses for Marketflow.

Every error leaves the API in the same envelope: a machine-readable code,
a human-readable message and optional details.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from marketflow.errors import MarketflowError

# =============================================================================
# Response Models
# =============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional context about the error",
    )
    request_id: str | None = Field(None, description="Request ID for tracing (if available)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error_code": "WORKFLOW_NOT_FOUND",
                    "message": "Workflow '7' not found",
                    "details": {"workflow_id": 7},
                    "request_id": "abc12345",
                }
            ]
        }
    }


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: ErrorDetail = Field(..., description="Error details")


class RateLimitErrorResponse(BaseModel):
    """Rate limit exceeded response."""

    error: ErrorDetail = Field(..., description="Error details")
    retry_after: int = Field(..., description="Seconds until rate limit resets")


# =============================================================================
# Error Code Mapping
# =============================================================================


ERROR_STATUS_MAP: dict[str, int] = {
    "VALIDATION": 400,
    "WORKFLOW_NOT_FOUND": 404,
    "NOT_FOUND": 404,
    "CONFLICT": 409,
    "RATE_LIMITED": 429,
    "MARKETFLOW_ERROR": 500,
    "WORKFLOW_ERROR": 500,
    "STATE_ERROR": 500,
}


def get_status_code(error_code: str) -> int:
    """Get HTTP status code for an error code."""
    return ERROR_STATUS_MAP.get(error_code, 500)


# =============================================================================
# Exception Handlers
# =============================================================================


def marketflow_error_to_response(
    error: MarketflowError,
    request_id: str | None = None,
) -> JSONResponse:
    """Convert a MarketflowError to a structured JSON response."""
    content = ErrorResponse(
        error=ErrorDetail(
            error_code=error.code,
            message=error.message,
            details=error.details,
            request_id=request_id,
        )
    )
    return JSONResponse(
        status_code=get_status_code(error.code),
        content=content.model_dump(),
    )


async def marketflow_exception_handler(
    request: Request,
    exc: MarketflowError,
) -> JSONResponse:
    """FastAPI exception handler for MarketflowError."""
    request_id = request.headers.get("X-Request-ID")
    return marketflow_error_to_response(exc, request_id)


class APIException(HTTPException):
    """HTTPException carrying a structured error body."""

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        self.error_code = error_code
        self.message = message
        self.error_details = details or {}
        super().__init__(status_code=status_code, detail=message)

    def to_response(self, request_id: str | None = None) -> ErrorResponse:
        """Convert to ErrorResponse model."""
        return ErrorResponse(
            error=ErrorDetail(
                error_code=self.error_code,
                message=self.message,
                details=self.error_details,
                request_id=request_id,
            )
        )


async def api_exception_handler(
    request: Request,
    exc: APIException,
) -> JSONResponse:
    """FastAPI exception handler for APIException."""
    request_id = request.headers.get("X-Request-ID")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response(request_id).model_dump(),
    )


# =============================================================================
# Common Response Definitions
# =============================================================================


COMMON_RESPONSES = {
    400: {
        "model": ErrorResponse,
        "description": "Bad Request - Invalid input or parameters",
    },
    404: {
        "model": ErrorResponse,
        "description": "Not Found - Resource does not exist",
    },
    409: {
        "model": ErrorResponse,
        "description": "Conflict - Operation already in progress",
    },
    429: {
        "model": RateLimitErrorResponse,
        "description": "Rate Limited - Too many requests",
    },
    500: {
        "model": ErrorResponse,
        "description": "Internal Server Error",
    },
}


def responses(*status_codes: int) -> dict:
    """Generate responses dict for specific status codes.

    Usage:
        @router.get("/items/{id}", responses=responses(404, 500))
        def get_item(id: str): ...
    """
    return {code: COMMON_RESPONSES[code] for code in status_codes if code in COMMON_RESPONSES}


CRUD_RESPONSES = responses(400, 404, 500)
RUN_RESPONSES = responses(400, 409, 429, 500)


# =============================================================================
# Helper Functions
# =============================================================================


def not_found(resource: str, identifier: str | int) -> APIException:
    """Create a not found exception."""
    return APIException(
        status_code=404,
        error_code="NOT_FOUND",
        message=f"{resource} '{identifier}' not found",
        details={"resource": resource, "identifier": identifier},
    )


def conflict(message: str, details: dict[str, Any] | None = None) -> APIException:
    """Create a conflict exception."""
    return APIException(
        status_code=409,
        error_code="CONFLICT",
        message=message,
        details=details,
    )
