"""Exception handlers for the FastAPI application.

Every error leaves the API in the same envelope: `{"success": false,
"error": "..."}`, or `{"success": false, "errors": [...]}` for validation
failures.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import AppException, ErrorCode, ValidationError
from domain.entities.task import INVALID_PRIORITY, INVALID_RECURRENCE

logger = structlog.get_logger()

# Messages for enum fields rejected by request parsing (e.g. ?priority=urgent).
_ENUM_MESSAGES = {
    "priority": INVALID_PRIORITY,
    "recurrence": INVALID_RECURRENCE,
}


def describe_validation_error(error: dict[str, Any]) -> str:
    """Turn one pydantic error into a readable message."""
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    field = loc[-1] if loc else ""

    if error.get("type") == "enum" and field in _ENUM_MESSAGES:
        return _ENUM_MESSAGES[field]
    if not loc:
        return str(error["msg"])
    return f"{'.'.join(loc)}: {error['msg']}"


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle custom application exceptions."""
        logger.warning(
            "app_exception",
            error_code=exc.error_code.value,
            message=exc.message,
        )
        content: dict[str, Any] = {"success": False}
        if isinstance(exc, ValidationError):
            content["errors"] = exc.errors
        else:
            content["error"] = exc.message
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle HTTP exceptions from FastAPI/Starlette, including unmatched routes."""
        message = str(exc.detail)
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"Route {request.url.path} not found"
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request parsing errors with the same 400 shape as field rules."""
        logger.info("validation_error", errors=exc.errors())
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "errors": [describe_validation_error(error) for error in exc.errors()],
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions. Details go to the log only."""
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=request_id,
            exc_info=True,
        )

        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Internal server error",
                "error_code": ErrorCode.INTERNAL_ERROR.value,
                "request_id": request_id,
            },
        )
