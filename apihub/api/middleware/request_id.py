"""Request correlation middleware for the API hub."""

import time
import uuid

import structlog
from fastapi import Request

from apihub.core.logging import logger

REQUEST_ID_HEADER = "X-Request-ID"


async def request_id_middleware(request: Request, call_next):
    """Bind a request ID to every log line emitted while serving a request.

    A caller-supplied X-Request-ID is reused so hub logs can be joined with
    the caller's own. The ID is echoed on the response.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    start = time.perf_counter()

    with structlog.contextvars.bound_contextvars(request_id=request_id):
        response = await call_next(request)
        logger.debug(
            "http_request_served",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            elapsed_ms=round((time.perf_counter() - start) * 1000),
        )

    response.headers[REQUEST_ID_HEADER] = request_id
    return response
