"""
Exception hierarchy for the diary service and the FastAPI handlers that
translate it into ``{"error": ..., "details": ...}`` responses.
"""

import logging
from typing import List, Optional

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.requests import Request
from fastapi.responses import JSONResponse

from diary.app.services.validation import FieldError, describe_errors

logger = logging.getLogger(__name__)


class DiaryError(Exception):
    """Base class for all diary errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ConfigurationError(DiaryError):
    """Raised when required configuration is missing. Fatal at startup."""
    pass


class ValidationError(DiaryError):
    """Raised when an entry payload fails validation."""

    def __init__(self, message: str, errors: List[FieldError]):
        self.errors = list(errors)
        super().__init__(message, describe_errors(self.errors))


class NotFoundError(DiaryError):
    """Raised when an entry id does not exist."""

    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__("Entry not found", f"No diary entry with id {entry_id}")


class StoreError(DiaryError):
    """Raised when the store connection or a query fails."""
    pass


class StoreTimeoutError(StoreError):
    """Raised when a bounded store operation runs out of time."""
    pass


# ---------------------------
# FastAPI Exception Handlers
# ---------------------------

def register_exception_handlers(app: FastAPI):
    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=exc.to_dict(),
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=exc.to_dict(),
        )

    @app.exception_handler(StoreError)
    async def store_handler(request: Request, exc: StoreError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=exc.to_dict(),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Malformed request", "details": details},
        )
