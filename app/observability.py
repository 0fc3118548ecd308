"""Prometheus metrics and request logging."""

from __future__ import annotations

import logging
import time
import uuid
from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

HTTP_REQUESTS = Counter(
    "dashboard_http_requests_total",
    "Total HTTP requests handled",
    ["method", "route", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "dashboard_http_request_duration_seconds",
    "HTTP request latency",
    ["method", "route"],
)

RPC_CALLS = Counter(
    "dashboard_rpc_calls_total",
    "Stored procedure and view calls made against the database",
    ["procedure", "status"],  # status: success, error
)

RPC_DURATION = Histogram(
    "dashboard_rpc_duration_seconds",
    "Latency of stored procedure and view calls",
    ["procedure"],
)


def _route_label(scope: Scope) -> str:
    route = scope.get("route")
    path = getattr(route, "path", None)
    return path or "unmatched"


class ObservabilityMiddleware:
    """Counts and times every HTTP request and tags it with a request id."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = uuid.uuid4().hex[:12]
        scope.setdefault("state", {})["request_id"] = request_id
        started = time.perf_counter()
        status_holder = {"status": 500}

        async def _send(message: Message) -> None:
            if message["type"] == "http.response.start":
                status_holder["status"] = message["status"]
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode()))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, _send)
        finally:
            elapsed = time.perf_counter() - started
            method = scope.get("method", "GET")
            route = _route_label(scope)
            HTTP_REQUESTS.labels(method=method, route=route, status=str(status_holder["status"])).inc()
            HTTP_REQUEST_DURATION.labels(method=method, route=route).observe(elapsed)
            logger.info(
                "%s %s -> %s in %.1fms",
                method,
                scope.get("path", ""),
                status_holder["status"],
                elapsed * 1000,
                extra={"request_id": request_id},
            )
