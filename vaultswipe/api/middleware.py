"""Request-id tagging and HTTP latency metrics"""

import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from vaultswipe.infrastructure.observability.metrics import record_request

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")

UNMATCHED_ROUTE = "unmatched"


def resolve_request_id(incoming: str | None) -> str:
    """Reuse a caller-supplied id when it is short and log-safe, else mint one"""
    if incoming and _REQUEST_ID_PATTERN.fullmatch(incoming):
        return incoming
    return uuid.uuid4().hex


def route_label(request: Request) -> str:
    # route template, so /v1/cards/{card_id} is one series, not one per card
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request.state.request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        record_request(request.method, route_label(request), response.status_code, time.perf_counter() - started)
        return response
