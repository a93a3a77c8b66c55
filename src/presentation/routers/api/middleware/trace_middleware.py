"""Trace middleware to inject a trace_id per request.

- Reuses an incoming X-Trace-Id header or generates a UUID4
- Exposes the ID on ``request.state.trace_id`` (exception handlers) and in
  structlog context variables (every log line of the request)
- Adds X-Trace-Id response header
- Logs one "Request completed" line per request, including requests whose
  handler raised (answered with 500 by the generic exception handler)
"""

from __future__ import annotations

import time
from typing import Awaitable, Callable
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class TraceMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that injects a trace ID into each request context."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Intercept a request to set and propagate a trace ID.

        Args:
            request (Request): Incoming request.
            call_next (Callable[[Request], Awaitable[Response]]): Next handler.

        Returns:
            Response: Response with X-Trace-Id header added.

        Raises:
            Exception: Any unhandled application error, re-raised after the
                request is logged with status 500.
        """
        trace_id = request.headers.get("X-Trace-Id") or str(uuid4())
        request.state.trace_id = trace_id
        structlog.contextvars.bind_contextvars(trace_id=trace_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # The 500 response is rendered outside this middleware
            self._log_completed(request, 500, started)
            raise
        else:
            response.headers["X-Trace-Id"] = trace_id
            self._log_completed(request, response.status_code, started)
            return response
        finally:
            # Clear context after request to prevent leakage
            structlog.contextvars.unbind_contextvars("trace_id")

    @staticmethod
    def _log_completed(request: Request, status_code: int, started: float) -> None:
        request.app.state.logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
