"""Tests for ai_template_api.middleware.correlation."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

from ai_template_api.middleware.correlation import (
    CorrelationIdMiddleware,
    correlation_id_var,
    get_request_id,
    header_value,
)


class TestGetRequestId:
    def test_returns_set_value(self) -> None:
        token = correlation_id_var.set("abc-123")
        try:
            assert get_request_id() == "abc-123"
        finally:
            correlation_id_var.reset(token)


class TestHeaderValue:
    def test_found(self) -> None:
        headers = [(b"x-request-id", b"my-id"), (b"content-type", b"text/html")]
        assert header_value(headers, b"x-request-id") == "my-id"

    def test_case_insensitive(self) -> None:
        assert header_value([(b"X-Request-ID", b"my-id")], b"x-request-id") == "my-id"

    def test_not_found(self) -> None:
        assert header_value([], b"x-request-id") is None


class TestCorrelationIdMiddleware:
    async def test_non_http_scope_passes_through(self) -> None:
        inner = AsyncMock()
        await CorrelationIdMiddleware(inner)({"type": "lifespan"}, AsyncMock(), AsyncMock())
        inner.assert_awaited_once()

    async def test_generates_id_when_absent(self) -> None:
        seen: list[str] = []
        sent: list[dict[str, Any]] = []

        async def inner_app(scope: dict[str, Any], receive: Any, send: Any) -> None:
            seen.append(get_request_id())
            await send({"type": "http.response.start", "status": 200, "headers": []})

        async def send(msg: dict[str, Any]) -> None:
            sent.append(msg)

        scope: dict[str, Any] = {"type": "http", "headers": []}
        await CorrelationIdMiddleware(inner_app)(scope, AsyncMock(), send)

        assert len(seen[0]) == 32
        assert scope["state"]["request_id"] == seen[0]
        assert (b"x-request-id", seen[0].encode()) in sent[0]["headers"]
        assert get_request_id() == ""

    async def test_reuses_incoming_id_once(self) -> None:
        sent: list[dict[str, Any]] = []

        async def inner_app(scope: dict[str, Any], receive: Any, send: Any) -> None:
            await send(
                {
                    "type": "http.response.start",
                    "status": 200,
                    "headers": [(b"x-request-id", b"stale")],
                }
            )
            await send({"type": "http.response.body", "body": b""})

        async def send(msg: dict[str, Any]) -> None:
            sent.append(msg)

        scope: dict[str, Any] = {"type": "http", "headers": [(b"x-request-id", b"given")]}
        await CorrelationIdMiddleware(inner_app)(scope, AsyncMock(), send)

        ids = [v for k, v in sent[0]["headers"] if k == b"x-request-id"]
        assert ids == [b"given"]
        assert sent[1]["type"] == "http.response.body"
