# backoffice/middleware/request_id.py
from __future__ import annotations

import re
import uuid
from contextvars import ContextVar
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

HEADER = "X-Request-ID"

# caller-supplied ids are echoed into logs and headers
_SAFE_ID = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")

request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    return request_id_ctx.get()


def pick_request_id(incoming: Optional[str]) -> str:
    """Caller's id when it is short and plain, a fresh uuid4 hex otherwise."""
    rid = (incoming or "").strip()
    return rid if _SAFE_ID.match(rid) else uuid.uuid4().hex


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Binds the request id for the log formatter and echoes it back."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = pick_request_id(request.headers.get(HEADER))
        request.state.request_id = rid
        token = request_id_ctx.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers[HEADER] = rid
        return response
