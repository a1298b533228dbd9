"""Request logging middleware.

Every request gets a short request ID: the client's X-Request-ID when it
sends one, otherwise a fresh one. The ID goes into request.state (routers
copy it into ApiResponse) and back out as the X-Request-ID response header.
Server errors log at WARNING, everything else at INFO.

Log format:
    INFO [POST] /api/v1/markets/1/bets → 201 (4ms) req_a1b2c3d4e5f6
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("pm.request")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or f"req_{uuid.uuid4().hex[:12]}"
        request.state.request_id = request_id

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id

        logger.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response
