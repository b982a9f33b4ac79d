"""
Custom exception handlers for consistent API error responses.

Every domain rejection is raised as an ``APIError`` subclass carrying a
stable ``error_code`` so callers can tell the failure kinds apart without
parsing messages.
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class APIError(HTTPException):
    """Base API error with consistent structure"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code

    def __str__(self) -> str:
        return str(self.detail)


class NotFoundError(APIError):
    """Resource not found error"""

    def __init__(
        self, detail: str = "Resource not found", error_code: str = "NOT_FOUND"
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND, detail=detail, error_code=error_code
        )


class ValidationError(APIError):
    """Missing or malformed required field"""

    def __init__(
        self, detail: str = "Validation failed", error_code: str = "VALIDATION_ERROR"
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code,
        )


class InvalidStateError(APIError):
    """Operation not permitted given the current state of an entity"""

    def __init__(
        self, detail: str = "Invalid state", error_code: str = "INVALID_STATE"
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code,
        )


class InvalidTransitionError(APIError):
    """Target stage is not reachable from the current stage"""

    def __init__(
        self,
        detail: str = "Invalid stage transition",
        error_code: str = "INVALID_TRANSITION",
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code,
        )


class AuthenticationError(APIError):
    """Authentication error"""

    def __init__(
        self, detail: str = "Could not validate credentials", error_code: str = "AUTH_FAILED"
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(APIError):
    """Actor lacks the role or membership for the attempted action"""

    def __init__(self, detail: str = "Permission denied", error_code: str = "FORBIDDEN"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN, detail=detail, error_code=error_code
        )


class ConflictError(APIError):
    """Resource conflict error"""

    def __init__(self, detail: str = "Resource conflict", error_code: str = "CONFLICT"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT, detail=detail, error_code=error_code
        )


class InternalError(APIError):
    """Store or infrastructure failure"""

    def __init__(
        self, detail: str = "Internal server error", error_code: str = "INTERNAL_ERROR"
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code=error_code,
        )


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors"""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} at {request.url.path}: {exc.detail}")
    else:
        logger.warning(f"{exc.error_code} at {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error_code": exc.error_code,
            "path": str(request.url.path),
        },
        headers=exc.headers,
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(APIError, handle_api_error)
