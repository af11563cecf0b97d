"""Tests for ai_template_api.middleware.auth."""

from __future__ import annotations

import base64
import json
from typing import Any
from unittest.mock import AsyncMock

import pytest

from ai_template_api.middleware.auth import (
    PUBLIC_PATHS,
    PUBLIC_PREFIXES,
    AuthenticatedUser,
    BasicAuthMiddleware,
    is_public_path,
    parse_basic_credentials,
)


def _basic(value: str) -> bytes:
    return b"Basic " + base64.b64encode(value.encode())


def _scope(path: str = "/product/feature/subfeature", auth: bytes | None = None) -> dict[str, Any]:
    headers = [(b"authorization", auth)] if auth is not None else []
    return {"type": "http", "path": path, "headers": headers}


def _middleware(inner: Any = None) -> BasicAuthMiddleware:
    return BasicAuthMiddleware(
        inner or AsyncMock(),
        username="admin",
        password="password",
        roles=("USER", "ADMIN"),
    )


class _Recorder:
    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, msg: dict[str, Any]) -> None:
        self.messages.append(msg)


# ======================================================================
# parse_basic_credentials
# ======================================================================


class TestParseBasicCredentials:
    def test_valid(self) -> None:
        assert parse_basic_credentials(_basic("admin:password").decode()) == ("admin", "password")

    def test_password_may_contain_colon(self) -> None:
        assert parse_basic_credentials(_basic("u:a:b").decode()) == ("u", "a:b")

    def test_scheme_is_case_insensitive(self) -> None:
        value = "basic " + base64.b64encode(b"u:p").decode()
        assert parse_basic_credentials(value) == ("u", "p")

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "",
            "Bearer token",
            "Basic",
            "Basic !!!not-base64!!!",
            "Basic " + base64.b64encode(b"no-colon").decode(),
            "Basic " + base64.b64encode(b"\xff\xfe:x").decode(),
        ],
    )
    def test_invalid(self, value: str | None) -> None:
        assert parse_basic_credentials(value) is None


# ======================================================================
# Public paths
# ======================================================================


class TestPublicPaths:
    @pytest.mark.parametrize(
        "path",
        [
            "/",
            "/actuator",
            "/actuator/health",
            "/actuator/health/readiness",
            "/actuator/info",
            "/swagger-ui",
            "/swagger-ui/oauth2-redirect",
            "/api-docs",
            "/api-docs/swagger-config",
        ],
    )
    def test_public(self, path: str) -> None:
        assert is_public_path(path)

    @pytest.mark.parametrize(
        "path",
        ["/product/feature/subfeature", "/api/v1/product/feature/subfeature", "/actuatorx"],
    )
    def test_protected(self, path: str) -> None:
        assert not is_public_path(path)

    def test_constants(self) -> None:
        assert "/" in PUBLIC_PATHS
        assert "/actuator/" in PUBLIC_PREFIXES


# ======================================================================
# BasicAuthMiddleware
# ======================================================================


class TestBasicAuthMiddleware:
    async def test_non_http_passes_through(self) -> None:
        inner = AsyncMock()
        await _middleware(inner)({"type": "lifespan"}, AsyncMock(), AsyncMock())
        inner.assert_awaited_once()

    async def test_public_path_passes_without_credentials(self) -> None:
        inner = AsyncMock()
        await _middleware(inner)(_scope("/actuator/health"), AsyncMock(), AsyncMock())
        inner.assert_awaited_once()

    async def test_default_path_is_public(self) -> None:
        inner = AsyncMock()
        await _middleware(inner)({"type": "http", "headers": []}, AsyncMock(), AsyncMock())
        inner.assert_awaited_once()

    async def test_valid_credentials_pass_and_set_user(self) -> None:
        inner = AsyncMock()
        scope = _scope(auth=_basic("admin:password"))

        await _middleware(inner)(scope, AsyncMock(), AsyncMock())

        inner.assert_awaited_once()
        assert scope["state"]["user"] == AuthenticatedUser("admin", ("USER", "ADMIN"))

    @pytest.mark.parametrize(
        "auth",
        [None, _basic("admin:wrong"), _basic("root:password"), b"Bearer password"],
    )
    async def test_rejected(self, auth: bytes | None) -> None:
        inner = AsyncMock()
        send = _Recorder()

        await _middleware(inner)(_scope(auth=auth), AsyncMock(), send)

        inner.assert_not_awaited()
        assert send.messages[0]["status"] == 401

    async def test_401_response_shape(self) -> None:
        send = _Recorder()
        mw = BasicAuthMiddleware(AsyncMock(), username="a", password="b", realm="Demo")

        await mw(_scope(), AsyncMock(), send)

        headers = dict(send.messages[0]["headers"])
        assert headers[b"content-type"] == b"application/json"
        assert headers[b"www-authenticate"] == b'Basic realm="Demo"'
        assert int(headers[b"content-length"]) == len(send.messages[1]["body"])
        body = json.loads(send.messages[1]["body"])
        assert body["error"]["code"] == "AUTHENTICATION_FAILED"
        assert "request_id" in body["error"]
