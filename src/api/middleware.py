"""Request pipeline stages.

``build_pipeline`` returns the stages outermost first. Static assets, upload
extraction and dispatch run inside this chain, in the router.
"""

import json
import time
from uuid import uuid4

import structlog
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware import Middleware
from starlette.middleware.base import (
    BaseHTTPMiddleware,
    DispatchFunction,
    RequestResponseEndpoint,
)
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from src.config import Settings
from src.exceptions import AppError, BadRequestError, PayloadTooLargeError

logger = structlog.get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong, please try again later"
CORRELATION_HEADER = "X-Correlation-Id"
FORM_URLENCODED = "application/x-www-form-urlencoded"

# Defaults of the helmet middleware, with cross-origin resource loading allowed
# so the asset directory can be used from other origins.
SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
        "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
        "object-src 'none';script-src 'self';script-src-attr 'none';"
        "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "cross-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


def apply_security_headers(response: Response) -> Response:
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def error_response(exc: AppError) -> JSONResponse:
    """Render an application error as ``{"message": ...}``."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _log_request(request: Request, status_code: int, started: float) -> None:
    logger.info(
        "http_request",
        method=request.method,
        path=request.url.path,
        status_code=status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
        client=request.client.host if request.client else None,
    )


async def translate_errors(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Terminal catch-all around every other stage.

    The correlation ID is bound here, before any inner stage runs:

    - Uses the X-Correlation-Id header if present, otherwise a new UUID4
    - Stores it in request.state.correlation_id
    - Binds it to the structlog context for all logs of the request
    - Echoes it in the X-Correlation-Id response header

    Typed application errors keep their status and message. Anything else is
    logged with its traceback and answered with a generic 500.
    """
    correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid4())
    request.state.correlation_id = correlation_id

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

    started = time.perf_counter()
    try:
        response = await call_next(request)
    except AppError as exc:
        logger.info(
            "request_rejected",
            method=request.method,
            path=request.url.path,
            status_code=exc.status_code,
            reason=exc.message,
        )
        response = apply_security_headers(error_response(exc))
        _log_request(request, response.status_code, started)
    except Exception:
        logger.exception(
            "unhandled_error",
            method=request.method,
            path=request.url.path,
        )
        response = apply_security_headers(
            JSONResponse(status_code=500, content={"message": GENERIC_ERROR_MESSAGE})
        )
        _log_request(request, response.status_code, started)

    response.headers[CORRELATION_HEADER] = correlation_id
    return response


def _media_type(request: Request) -> str:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower()


def _is_json(media_type: str) -> bool:
    return media_type == "application/json" or media_type.endswith("+json")


def json_body_stage(max_body_bytes: int) -> DispatchFunction:
    """Build the body-decoding stage with a size ceiling.

    Oversized JSON or urlencoded bodies and malformed JSON are rejected before
    any handler or database access runs. Multipart uploads are streamed to the
    asset directory and are not limited here.
    """

    async def decode_json_body(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        media_type = _media_type(request)
        if not (_is_json(media_type) or media_type == FORM_URLENCODED):
            return await call_next(request)

        content_length = request.headers.get("content-length", "")
        if content_length.isdigit() and int(content_length) > max_body_bytes:
            raise PayloadTooLargeError()

        if _is_json(media_type):
            body = await request.body()
            if len(body) > max_body_bytes:
                raise PayloadTooLargeError()
            if body.strip():
                try:
                    json.loads(body)
                except ValueError:
                    raise BadRequestError("Malformed JSON body")

        return await call_next(request)

    return decode_json_body


async def security_headers(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    response = await call_next(request)
    return apply_security_headers(response)


async def access_log(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Log one line per request that reaches the router, with its duration.

    Requests rejected by an outer stage are logged by ``translate_errors``.
    """
    started = time.perf_counter()
    response = await call_next(request)
    _log_request(request, response.status_code, started)
    return response


def build_pipeline(settings: Settings) -> list[Middleware]:
    """Pipeline stages in order, outermost first."""
    return [
        Middleware(BaseHTTPMiddleware, dispatch=translate_errors),
        Middleware(BaseHTTPMiddleware, dispatch=json_body_stage(settings.max_body_bytes)),
        Middleware(BaseHTTPMiddleware, dispatch=security_headers),
        Middleware(BaseHTTPMiddleware, dispatch=access_log),
        Middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins_list,
            allow_methods=["*"],
            allow_headers=["*"],
        ),
    ]
