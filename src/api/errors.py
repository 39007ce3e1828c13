"""Exception handlers for errors raised by route handlers and dependencies."""

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.middleware import error_response
from src.exceptions import AppError


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map a typed application error to its status code and message."""
    return error_response(exc)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors as 400 Bad Request.

    Reports the first offending field; input values are never echoed back.
    """
    logger = structlog.get_logger()

    errors = exc.errors()
    if errors:
        first_error = errors[0]
        field = ".".join(
            str(loc) for loc in first_error.get("loc", ["unknown"]) if loc != "body"
        )
        message = first_error.get("msg", "Validation failed")
        detail = f"Field '{field}': {message}"
    else:
        detail = "Request validation failed"

    logger.warning(
        "validation_error",
        path=request.url.path,
        detail=detail,
    )

    return JSONResponse(status_code=400, content={"message": detail})
