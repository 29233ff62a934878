from __future__ import annotations

import logging
import time
import uuid
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"


class RequestIDLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID, log it, and echo the ID in the response.

    A caller-supplied ``x-request-id`` is reused so engine logs can be joined
    with the client's own.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        logger.info(
            "request %s %s",
            request.method,
            request.url.path,
            extra={"request_id": request_id},
        )
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "response %d",
            response.status_code,
            extra={
                "request_id": request_id,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return response
