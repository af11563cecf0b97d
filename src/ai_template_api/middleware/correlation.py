"""Request correlation IDs.

A pure ASGI middleware reads ``x-request-id`` (or generates one) and
exposes it to the rest of the request through a :class:`ContextVar`.
Log records and error bodies pick it up from there.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import Any

REQUEST_ID_HEADER = b"x-request-id"

correlation_id_var: ContextVar[str] = ContextVar(
    "correlation_id",
    default="",
)


def get_request_id() -> str:
    """Return the current correlation / request ID."""
    return correlation_id_var.get()


_Scope = dict[str, Any]
_Receive = Any
_Send = Any


def header_value(
    headers: list[tuple[bytes, bytes]],
    name: bytes,
) -> str | None:
    """Extract the first value for *name* from raw ASGI headers."""
    for key, val in headers:
        if key.lower() == name:
            return val.decode("latin-1")
    return None


class CorrelationIdMiddleware:
    """Attach a request ID to the scope, the context and the response.

    An incoming ``x-request-id`` is reused as is; otherwise a UUID-4 hex
    string is generated.  The ID ends up in ``scope["state"]["request_id"]``
    and in :data:`correlation_id_var`, and is echoed back on the response.
    """

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(
        self,
        scope: _Scope,
        receive: _Receive,
        send: _Send,
    ) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        headers: list[tuple[bytes, bytes]] = scope.get("headers", [])
        request_id = header_value(headers, REQUEST_ID_HEADER) or uuid.uuid4().hex

        state: dict[str, Any] = scope.setdefault("state", {})
        state["request_id"] = request_id
        token = correlation_id_var.set(request_id)

        async def _send_with_id(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                raw_headers = [
                    (k, v)
                    for k, v in message.get("headers", [])
                    if k.lower() != REQUEST_ID_HEADER
                ]
                raw_headers.append((REQUEST_ID_HEADER, request_id.encode("latin-1")))
                message["headers"] = raw_headers
            await send(message)

        try:
            await self.app(scope, receive, _send_with_id)
        finally:
            correlation_id_var.reset(token)
