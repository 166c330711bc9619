"""Request-scoped middleware for API requests."""

import logging
import re
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Caller IDs end up in logs and response bodies: short tokens only
_CALLER_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,128}")


def _request_id_for(request: Request) -> str:
    caller_id = request.headers.get(REQUEST_ID_HEADER)
    if caller_id and _CALLER_ID_PATTERN.fullmatch(caller_id):
        return caller_id
    return str(uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an ID for tracing a bill across services.

    A well-formed X-Request-ID from the caller (a billing counter or an
    upstream gateway) is kept; anything else is replaced with a fresh UUID.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = _request_id_for(request)
        request.state.request_id = request_id

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.debug(
            "%s %s -> %s (request_id=%s)",
            request.method,
            request.url.path,
            response.status_code,
            request_id,
        )
        return response


def get_request_id(request: Request) -> str | None:
    """Request ID assigned by RequestIDMiddleware, if it ran."""
    return getattr(request.state, "request_id", None)
