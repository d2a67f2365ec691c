from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from uuid import uuid4

from fastapi import Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..metrics import REQUEST_COUNT, REQUEST_ERRORS, REQUEST_LATENCY

REQUEST_ID_HEADER = "X-Request-ID"
# Query parameters worth keeping in the access log for metrics requests.
_LOGGED_PARAMS = ("start", "end", "mode")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one JSON access-log line per request and feed the request metrics."""

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)
        self._logger = logging.getLogger("moodline.request")
        if self._logger.level == logging.NOTSET:
            self._logger.setLevel(logging.INFO)

    async def dispatch(  # type: ignore[override]
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        started = time.perf_counter()
        request_id = _incoming_request_id(request) or uuid4().hex
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception:
            self._finish(request, request_id, 500, started, failed=True)
            raise

        self._finish(request, request_id, response.status_code, started)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    def _finish(
        self,
        request: Request,
        request_id: str,
        status: int,
        started: float,
        *,
        failed: bool = False,
    ) -> None:
        duration_ms = (time.perf_counter() - started) * 1000
        path = _route_path(request)
        _observe_metrics(request.method, path, status, duration_ms)

        params = {
            key: request.query_params[key]
            for key in _LOGGED_PARAMS
            if key in request.query_params
        }
        extra = {
            "request_id": request_id,
            "path": path,
            "method": request.method,
            "status": status,
            "duration_ms": round(duration_ms, 3),
            "extra_fields": {"query": params} if params else None,
        }
        if failed:
            self._logger.error("request failed", extra=extra, exc_info=True)
        else:
            self._logger.info("request complete", extra=extra)


def _incoming_request_id(request: Request) -> str | None:
    value = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if not value or len(value) > 64:
        return None
    return value


def _route_path(request: Request) -> str:
    route = request.scope.get("route")
    if route is not None and hasattr(route, "path"):
        return str(route.path)
    return request.url.path


def _observe_metrics(method: str, path: str, status: int, duration_ms: float) -> None:
    status_str = str(status)
    REQUEST_COUNT.labels(method=method, path=path, status=status_str).inc()
    REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000)
    if status >= 500:
        REQUEST_ERRORS.labels(method=method, path=path, status=status_str).inc()
