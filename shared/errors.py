"""
API error types and the JSON error envelope shared by every route.

Error bodies look like::

    {"error": {"message": ..., "code": ..., "details": ...},
     "timestamp": "...", "requestId": "req_..."}
"""

from __future__ import annotations

import logging
import random
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base error carrying an HTTP status and a machine-readable code."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: Optional[str] = None,
        details: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        self.headers = headers or {}


class ValidationError(APIError):
    def __init__(self, message: str, details: Any = None):
        super().__init__(message, 400, "VALIDATION_ERROR", details)


class RateLimitError(APIError):
    def __init__(self, reset_time: int, headers: Optional[Dict[str, str]] = None):
        super().__init__(
            "Rate limit exceeded. Please try again later.",
            429,
            "RATE_LIMIT_EXCEEDED",
            {"resetTime": reset_time},
            headers,
        )


class AuthenticationError(APIError):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, 401, "AUTHENTICATION_ERROR")


class NotFoundError(APIError):
    def __init__(self, resource: str):
        super().__init__(f"{resource} not found", 404, "NOT_FOUND")


class InternalServerError(APIError):
    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, 500, "INTERNAL_SERVER_ERROR")


_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "AUTHENTICATION_ERROR",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    429: "RATE_LIMIT_EXCEEDED",
}


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def new_request_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"req_{int(time.time() * 1000)}_{suffix}"


def create_error_response(error: Exception, is_development: bool = False) -> Tuple[Dict[str, Any], int]:
    """Build the error envelope and status code for any exception.

    Unknown exceptions never leak their message outside development.
    """
    request_id = new_request_id()

    status_code = 500
    code = "INTERNAL_SERVER_ERROR"
    message = "An unexpected error occurred"
    details = None

    if isinstance(error, APIError):
        status_code = error.status_code
        code = error.code or code
        message = error.message
        details = error.details
    elif is_development:
        message = str(error)

    body: Dict[str, Any] = {
        "error": {"message": message, "code": code},
        "timestamp": utc_timestamp(),
        "requestId": request_id,
    }
    if details:
        body["error"]["details"] = details

    if status_code >= 500:
        logger.error("[%s] Internal Server Error: %s", request_id, error, exc_info=error)
    elif is_development:
        logger.warning("[%s] API Error: %s", request_id, error)

    return body, status_code


def create_success_response(data: Any) -> Dict[str, Any]:
    return {"data": data, "timestamp": utc_timestamp()}


def get_safe_error_message(error: Exception) -> str:
    if isinstance(error, APIError):
        return error.message
    return "An unexpected error occurred. Please try again."


def _format_validation_errors(exc: RequestValidationError) -> list:
    formatted = []
    for err in exc.errors():
        # Drop the "body"/"query" location prefix
        loc = [str(part) for part in err.get("loc", ())[1:]]
        formatted.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return formatted


def install_error_handlers(app: FastAPI, is_development: bool = False) -> None:
    """Render every failure using the shared error envelope."""

    @app.exception_handler(APIError)
    async def _api_error_handler(request: Request, exc: APIError):
        body, status = create_error_response(exc, is_development)
        return JSONResponse(content=body, status_code=status, headers=exc.headers or None)

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError):
        error = ValidationError("Invalid request data", {"errors": _format_validation_errors(exc)})
        body, status = create_error_response(error, is_development)
        return JSONResponse(content=body, status_code=status)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error_handler(request: Request, exc: StarletteHTTPException):
        error = APIError(str(exc.detail), exc.status_code, _STATUS_CODES.get(exc.status_code, "HTTP_ERROR"))
        body, status = create_error_response(error, is_development)
        return JSONResponse(content=body, status_code=status, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception):
        body, status = create_error_response(exc, is_development)
        return JSONResponse(content=body, status_code=status)
