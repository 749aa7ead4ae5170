"""Request logging middleware.

Assigns each request an id (taken from an incoming X-Request-ID header when
present), exposes it on request.state for the response envelope, echoes it
back as X-Request-ID and writes one access-log line per request:

    INFO [POST] /api/v1/wallet/verify-and-credit -> 200 (23ms) req_a1b2c3d4e5f6

Server errors are logged at WARNING. /health is not logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.pw_common.response import new_request_id

logger = logging.getLogger("pw.request")

_QUIET_PATHS = frozenset({"/health"})


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("x-request-id") or new_request_id()
        request.state.request_id = request_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = request_id

        if request.url.path not in _QUIET_PATHS:
            level = logging.WARNING if response.status_code >= 500 else logging.INFO
            logger.log(
                level,
                "[%s] %s -> %d (%.0fms) %s",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
                request_id,
            )
        return response
