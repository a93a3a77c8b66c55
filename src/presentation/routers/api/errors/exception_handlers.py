"""Global exception handlers for the generated application.

Exceptions raised while serving a synthesized route are converted to RFC 9457
Problem Details responses.

Handlers:
    http_exception_handler: HTTPException (auth hooks, 404/405/415) -> same status
    validation_exception_handler: RequestValidationError -> 400
    generic_exception_handler: Anything else (handler errors, response
        validation failures) -> 500, logged

The handlers read ``app.state.settings`` and ``app.state.logger``, which
create_app() sets before registering them.

Exports:
    register_exception_handlers: Register all exception handlers with FastAPI app
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.presentation.routers.api.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)

# HTTP status code to (title, slug) mapping for RFC 9457
_HTTP_STATUS_INFO: dict[int, tuple[str, str]] = {
    400: ("Bad Request", "bad-request"),
    401: ("Authentication Required", "unauthorized"),
    403: ("Access Denied", "forbidden"),
    404: ("Resource Not Found", "not-found"),
    405: ("Method Not Allowed", "method-not-allowed"),
    409: ("Resource Conflict", "conflict"),
    415: ("Unsupported Media Type", "unsupported-media-type"),
    429: ("Too Many Requests", "rate-limit-exceeded"),
    500: ("Internal Server Error", "internal-server-error"),
    502: ("Bad Gateway", "bad-gateway"),
    503: ("Service Unavailable", "service-unavailable"),
}


def _get_status_title(status_code: int) -> str:
    """Get human-readable title for HTTP status code."""
    return _HTTP_STATUS_INFO.get(status_code, ("Error", "error"))[0]


def _get_error_slug(status_code: int) -> str:
    """Get kebab-case error slug for RFC 9457 type URL."""
    return _HTTP_STATUS_INFO.get(status_code, ("Error", "error"))[1]


def _problem_type(request: Request, slug: str) -> str:
    return f"{request.app.state.settings.api_base_url}/errors/{slug}"


async def http_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Convert HTTPException to RFC 9457 Problem Details response.

    Covers exceptions raised by authenticators and pre-handlers as well as
    the router's own 404/405 responses.

    Args:
        request: FastAPI Request object.
        exc: HTTPException raised by a hook, handler or the router.

    Returns:
        JSONResponse with RFC 9457 ProblemDetails.

    Example:
        >>> # Authenticator rejects the request:
        >>> raise HTTPException(status_code=401, detail="Invalid token")
        >>> # {
        >>> #   "type": "http://localhost:3000/errors/unauthorized",
        >>> #   "title": "Authentication Required",
        >>> #   "status": 401,
        >>> #   "detail": "Invalid token",
        >>> #   "instance": "/api/v1/items/1",
        >>> #   "trace_id": "..."
        >>> # }
    """
    # Type narrowing: registered only for HTTPException
    assert isinstance(exc, StarletteHTTPException)

    trace_id = getattr(request.state, "trace_id", None)

    problem = ProblemDetails(
        type=_problem_type(request, _get_error_slug(exc.status_code)),
        title=_get_status_title(exc.status_code),
        status=exc.status_code,
        detail=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
        instance=str(request.url.path),
        errors=None,
        trace_id=trace_id,
    )

    # Preserve any headers from HTTPException (e.g., WWW-Authenticate)
    headers = getattr(exc, "headers", None)

    return JSONResponse(
        status_code=exc.status_code,
        content=problem.model_dump(exclude_none=True),
        headers=headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Convert RequestValidationError to a 400 Problem Details response.

    Error locations are joined with dots, keeping the input location as the
    first segment ("query.limit", "params.id", "body.tags.0").

    Args:
        request: FastAPI Request object.
        exc: RequestValidationError raised by the request validator.

    Returns:
        JSONResponse with RFC 9457 ProblemDetails including field errors.
    """
    # Type narrowing: registered only for RequestValidationError
    assert isinstance(exc, RequestValidationError)

    trace_id = getattr(request.state, "trace_id", None)

    field_errors: list[ErrorDetail] = []
    for error in exc.errors():
        loc = error.get("loc", [])
        field_name = ".".join(str(part) for part in loc) if loc else "unknown"
        field_errors.append(
            ErrorDetail(
                field=field_name,
                code=str(error.get("type", "validation_error")),
                message=str(error.get("msg", "Validation failed")),
            )
        )

    problem = ProblemDetails(
        type=_problem_type(request, "validation-failed"),
        title="Validation Failed",
        status=status.HTTP_400_BAD_REQUEST,
        detail="Request validation failed. Check 'errors' for details.",
        instance=str(request.url.path),
        errors=field_errors if field_errors else None,
        trace_id=trace_id,
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=problem.model_dump(exclude_none=True),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions.

    Handler failures and response validation failures end up here. The
    exception is logged; the client only sees the trace ID, in the body and
    in the X-Trace-Id header (this response bypasses TraceMiddleware).

    Args:
        request: FastAPI Request object
        exc: Unhandled exception

    Returns:
        JSONResponse with RFC 9457 ProblemDetails (500 Internal Server Error)
    """
    trace_id = getattr(request.state, "trace_id", None)

    request.app.state.logger.error(
        "Unhandled exception",
        error=exc,
        exc_type=type(exc).__name__,
        trace_id=trace_id,
        request_path=request.url.path,
        request_method=request.method,
    )

    problem = ProblemDetails(
        type=_problem_type(request, "internal-server-error"),
        title="Internal Server Error",
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred. Please contact support with the trace ID.",
        instance=str(request.url.path),
        errors=None,
        trace_id=trace_id,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=problem.model_dump(exclude_none=True),
        headers={"X-Trace-Id": trace_id} if trace_id else None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI application.

    Args:
        app: FastAPI application instance (``state.settings`` and
            ``state.logger`` already set)

    Example:
        >>> app = FastAPI()
        >>> app.state.settings = get_settings()
        >>> app.state.logger = get_logger()
        >>> register_exception_handlers(app)
    """
    # Router 404/405 and hook-raised HTTPException
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Schema validation failures - 400 with field errors
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Catch-all for 500 errors
    app.add_exception_handler(Exception, generic_exception_handler)
