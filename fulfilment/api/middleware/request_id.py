"""Request ID middleware — tags every response and logs the request outcome.

Written as a plain ASGI middleware so the header also lands on responses
built for unhandled exceptions.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from fulfilment.api.errors import to_response

log = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _request_id_from(scope: Scope) -> str:
    raw = Headers(scope=scope).get(REQUEST_ID_HEADER, "")
    try:
        return str(uuid.UUID(raw))
    except ValueError:
        return str(uuid.uuid4())


class RequestIDMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _request_id_from(scope)
        tokens = structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=scope["method"],
            path=scope["path"],
        )
        status_code: int | None = None

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        start = time.perf_counter()
        log.info("request.started")
        try:
            await self.app(scope, receive, send_with_request_id)
        except Exception as exc:
            if status_code is not None:
                # Headers already went out; nothing left to answer with.
                raise
            await to_response(exc)(scope, receive, send_with_request_id)
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 1)
            log.info("request.completed", status_code=status_code, duration_ms=duration_ms)
            structlog.contextvars.reset_contextvars(**tokens)
