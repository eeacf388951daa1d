"""Request-scoped logging context.

Assigns every request an id (from ``X-Request-ID`` when the client sends a
sane one), exposes it to log formatters through contextvars and echoes it
back in the response header.
"""

import logging
import re
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..observability.logging import clear_log_context, set_log_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """FastAPI middleware that binds a request id to the logging context."""

    async def dispatch(self, request: Request, call_next):
        request_id = self._extract_request_id(request.headers.get(REQUEST_ID_HEADER))
        clear_log_context()
        set_log_context(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            clear_log_context()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @staticmethod
    def _extract_request_id(header_value: Optional[str]) -> str:
        """Use the client's id if it is short and safe, else generate one."""
        if header_value and _REQUEST_ID_RE.match(header_value):
            return header_value
        return uuid.uuid4().hex[:16]
