"""Request tracing middleware and structured exception handlers.

Every request gets a unique ID (from X-Request-ID header or generated),
which is bound to structlog contextvars so all log lines within a
request are correlated. Prometheus counters and histograms are recorded.
Exception handlers translate CaseflowError subclasses into a JSON body
of the form {"error": <message>, "details": ..., "request_id": ...}.
The API never leaks stack traces.
"""

import time
import uuid
from typing import Any

import structlog
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from caseflow.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CaseflowError,
    DuplicateCaseError,
    InvalidRequestError,
    InvalidTransitionError,
    NotFoundError,
    SchedulingConflictError,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
)


def _endpoint_label(request: Request) -> str:
    """Route template rather than raw path, to keep label cardinality bounded.

    Depending on the FastAPI release, an APIRoute included under the app's
    api_prefix reports its path with or without that prefix. The label
    always carries it.
    """
    route = request.scope.get("route")
    path: str | None = getattr(route, "path", None)
    if path is None:
        return request.url.path
    if isinstance(route, APIRoute):
        prefix: str = request.app.state.settings.api_prefix.rstrip("/")
        if prefix and path != prefix and not path.startswith(prefix + "/"):
            path = prefix + path
    return path


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Assign a request ID, bind structured log context, and record metrics."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.perf_counter()
        logger.info(
            "request_started",
            method=request.method,
            path=str(request.url.path),
        )

        try:
            response = await call_next(request)
        except Exception:
            duration = time.perf_counter() - start
            logger.exception(
                "request_failed",
                method=request.method,
                path=str(request.url.path),
                duration_seconds=round(duration, 4),
            )
            response = JSONResponse(
                status_code=500,
                content={
                    "error": "An unexpected error occurred.",
                    "details": {},
                    "request_id": request_id,
                },
            )

        duration = time.perf_counter() - start
        endpoint = _endpoint_label(request)

        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()
        REQUEST_LATENCY.labels(
            method=request.method,
            endpoint=endpoint,
        ).observe(duration)

        response.headers["X-Request-ID"] = request_id

        logger.info(
            "request_completed",
            method=request.method,
            path=str(request.url.path),
            status_code=response.status_code,
            duration_seconds=round(duration, 4),
        )
        return response


# ---------------------------------------------------------------------------
# Exception → JSON response handlers
# ---------------------------------------------------------------------------


def _request_id() -> str | None:
    """Pull the current request ID from structlog context, if bound."""
    ctx: dict[str, str] = structlog.contextvars.get_contextvars()
    return ctx.get("request_id")


def _error_response(
    status_code: int,
    message: str,
    details: dict[str, Any],
    **extra: Any,
) -> JSONResponse:
    content: dict[str, Any] = {
        "error": message,
        "details": details,
        "request_id": _request_id(),
    }
    content.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


_STATUS_BY_ERROR: tuple[tuple[type[CaseflowError], int], ...] = (
    (InvalidRequestError, 400),
    (InvalidTransitionError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (SchedulingConflictError, 409),
)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach structured error handlers to the app."""

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        fields = [".".join(str(part) for part in err["loc"] if part != "body") for err in errors]
        message = "Invalid request"
        if errors:
            message = f"Invalid request: {fields[0] or 'body'}: {errors[0]['msg']}"
        return _error_response(
            400,
            message,
            {"errors": [{"field": f, "message": e["msg"]} for f, e in zip(fields, errors)]},
        )

    @app.exception_handler(DuplicateCaseError)
    async def _duplicate(request: Request, exc: DuplicateCaseError) -> JSONResponse:
        return _error_response(
            409,
            exc.message,
            exc.details,
            duplicates=[d.model_dump(mode="json", by_alias=True) for d in exc.duplicates],
        )

    for error_type, status_code in _STATUS_BY_ERROR:
        app.add_exception_handler(error_type, _mapped_handler(status_code))

    @app.exception_handler(CaseflowError)
    async def _caseflow(request: Request, exc: CaseflowError) -> JSONResponse:
        logger.error(
            "caseflow_error",
            error_type=type(exc).__name__,
            message=exc.message,
            details=exc.details,
        )
        return _error_response(500, exc.message, exc.details)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", error_type=type(exc).__name__)
        return _error_response(500, "An unexpected error occurred.", {})


def _mapped_handler(status_code: int) -> Any:
    async def _handler(request: Request, exc: CaseflowError) -> JSONResponse:
        return _error_response(status_code, exc.message, exc.details)

    return _handler
