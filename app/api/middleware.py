"""Request context middleware for the deal catalog API.

Every request gets a correlation ID, one access log line naming the
caller and the listing parameters it sent, and a JSON error body when an
exception escapes the route handlers.
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

# Listing parameters copied into the access log when present.
LOGGED_QUERY_PARAMS = ("cursor", "limit", "isOutOfStock")


def listing_params(request: Request) -> dict[str, str]:
    """Pick the listing parameters a request carried."""
    return {
        name: request.query_params[name]
        for name in LOGGED_QUERY_PARAMS
        if name in request.query_params
    }


def internal_error_response(request_id: str) -> JSONResponse:
    """Build the standard body for an unhandled error."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "INTERNAL_ERROR",
            "message": "An internal error occurred",
            "details": [],
            "request_id": request_id,
        },
    )


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Correlate, log and guard each request.

    The request ID comes from the X-Request-ID header or is generated. It is
    stored on request state, bound to the log context and echoed back in the
    response. The user ID in the access log is whatever the bearer-token
    dependency recorded on request state, so routes without it and anonymous
    callers log ``user_id=None``.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process a request inside its logging context.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Handler response, or a 500 error response, with the request ID header.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())

        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            response = internal_error_response(request_id)

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            user_id=getattr(request.state, "user_id", None),
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            **listing_params(request),
        )
        structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def setup_middleware(app: FastAPI) -> None:
    """Configure custom middleware for the application.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(RequestContextMiddleware)
