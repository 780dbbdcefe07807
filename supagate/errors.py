"""
Error model shared by the core and the HTTP layer.

The core raises ``AppError`` only; the FastAPI handlers registered by
``register_exception_handlers`` turn it into a JSON response.
"""
import traceback
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from supagate.logging_config import get_logger

logger = get_logger(__name__)


class ErrorKind(StrEnum):
    """Classification carried by every ``AppError``."""
    INVALID_FILTER_STRUCTURE = "InvalidFilterStructure"
    UNSUPPORTED_LOGIC = "UnsupportedLogic"
    UNSUPPORTED_OPERATOR = "UnsupportedOperator"
    UNSUPPORTED_OPERATOR_VALUE = "UnsupportedOperatorValue"
    INVALID_FILTER_JSON = "InvalidFilterJSON"
    INVALID_QUERY_PARAMETER = "InvalidQueryParameter"
    MISSING_BODY = "MissingBody"
    INVALID_REQUEST_BODY = "InvalidRequestBody"
    INVALID_REQUEST = "InvalidRequest"
    VIEW_NOT_FOUND = "ViewNotFound"
    INVALID_VIEW_DEFINITION = "InvalidViewDefinition"
    UNSUPPORTED_JOIN_TYPE = "UnsupportedJoinType"
    RECORD_NOT_FOUND = "RecordNotFound"
    QUERY_EXECUTION_FAILED = "QueryExecutionFailed"
    CONFIGURATION_ERROR = "ConfigurationError"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"


DEFAULT_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_FILTER_STRUCTURE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNSUPPORTED_LOGIC: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNSUPPORTED_OPERATOR: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNSUPPORTED_OPERATOR_VALUE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_FILTER_JSON: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_QUERY_PARAMETER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.MISSING_BODY: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_REQUEST_BODY: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.VIEW_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_VIEW_DEFINITION: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.UNSUPPORTED_JOIN_TYPE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.RECORD_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.QUERY_EXECUTION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFIGURATION_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.SERVICE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class AppError(Exception):
    """Application error with a kind, an HTTP status and a context label."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status_code: Optional[int] = None,
        context: str = "",
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code if status_code is not None else DEFAULT_STATUS[kind]
        self.context = context

    def __repr__(self):
        return f"AppError({self.kind.value!r}, {self.message!r}, status_code={self.status_code})"


def format_error(error: Exception, context: str = "", include_stack: bool = False) -> Dict[str, Any]:
    """Build the JSON body returned for a failed request."""
    body = {
        "error": True,
        "kind": error.kind.value if isinstance(error, AppError) else None,
        "message": str(error) or "An unknown error occurred",
        "context": context,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if include_stack:
        body["stack"] = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
    return body


def register_exception_handlers(app: FastAPI, include_stack: bool = False) -> None:
    """
    Render ``AppError`` with its own status and anything else as a 500.

    Request validation failures become ``InvalidRequest`` errors; unmatched
    routes answer ``{"error": "Not Found"}``.
    """

    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        logger.error("[%s] %s", exc.context, exc.message, extra={"context": exc.context})
        return JSONResponse(
            status_code=exc.status_code,
            content=format_error(exc, exc.context, include_stack),
        )

    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{location}: {first.get('msg', 'Invalid request')}" if location else "Invalid request"
        return await handle_app_error(request, AppError(ErrorKind.INVALID_REQUEST, message, context="Request Parser"))

    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=format_error(exc, "Server", include_stack),
        )

    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
