"""ASGI middleware guarding the optimizer endpoint."""

from __future__ import annotations

import logging

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from cut_optimizer.web.exceptions import error_content

logger = logging.getLogger(__name__)


class ContentLengthLimitMiddleware:
    """Rejects requests whose body is larger than a limit with 413.

    A declared content-length is checked up front. Bodies sent without one
    (chunked transfer) are read and counted before the app sees them.
    """

    def __init__(self, app: ASGIApp, max_content_length: int) -> None:
        self.app = app
        self.max_content_length = max_content_length

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        for name, value in scope.get("headers", []):
            if name == b"content-length":
                try:
                    length = int(value)
                except ValueError:
                    length = -1
                if length < 0 or length > self.max_content_length:
                    await self._reject(scope, receive, send)
                    return
                await self.app(scope, receive, send)
                return

        messages: list[Message] = []
        received = 0
        while True:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > self.max_content_length:
                logger.info("Rejected streamed body over %d bytes", self.max_content_length)
                await self._reject(scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        response = JSONResponse(
            status_code=413,
            content=error_content(
                "Request body too large",
                "payload_too_large",
                {"max_content_length": self.max_content_length},
            ),
        )
        await response(scope, receive, send)


class LoadSheddingMiddleware:
    """Answers 503 once a number of requests are already in flight."""

    def __init__(self, app: ASGIApp, max_requests: int) -> None:
        self.app = app
        self.max_requests = max_requests
        self.active = 0

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if self.active >= self.max_requests:
            logger.warning("Shedding request: %d requests in flight", self.active)
            response = JSONResponse(
                status_code=503,
                content=error_content("Server is overloaded", "overloaded"),
            )
            await response(scope, receive, send)
            return

        self.active += 1
        try:
            await self.app(scope, receive, send)
        finally:
            self.active -= 1
