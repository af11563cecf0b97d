"""HTTP Basic authentication middleware (pure ASGI).

Validates ``Authorization: Basic <base64(user:password)>`` against the
single configured credential using constant-time comparison.  Paths in
:data:`PUBLIC_PATHS` and under :data:`PUBLIC_PREFIXES` are served
without credentials.
"""

from __future__ import annotations

import base64
import binascii
import hmac
import json
from dataclasses import dataclass
from typing import Any

from ai_template_api.middleware.correlation import get_request_id, header_value

PUBLIC_PATHS: frozenset[str] = frozenset(
    {
        "/",
        "/actuator",
        "/swagger-ui",
        "/api-docs",
    }
)

PUBLIC_PREFIXES: tuple[str, ...] = (
    "/actuator/",
    "/swagger-ui/",
    "/api-docs/",
)

_Scope = dict[str, Any]
_Receive = Any
_Send = Any


@dataclass(frozen=True)
class AuthenticatedUser:
    """Principal attached to ``scope["state"]["user"]`` after login."""

    username: str
    roles: tuple[str, ...]


def is_public_path(path: str) -> bool:
    return path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES)


def parse_basic_credentials(auth_header: str | None) -> tuple[str, str] | None:
    """Decode a Basic ``Authorization`` header into ``(username, password)``.

    Returns ``None`` for any other scheme or a malformed value.
    """
    if not auth_header:
        return None
    scheme, _, encoded = auth_header.partition(" ")
    if scheme.lower() != "basic" or not encoded:
        return None
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


class BasicAuthMiddleware:
    """Pure ASGI middleware enforcing a single HTTP Basic credential.

    Parameters
    ----------
    app:
        The inner ASGI application.
    username, password:
        The only accepted credential pair.
    roles:
        Roles granted to the authenticated principal.
    realm:
        Realm advertised in the ``WWW-Authenticate`` challenge.
    """

    def __init__(
        self,
        app: Any,
        *,
        username: str,
        password: str,
        roles: tuple[str, ...] = (),
        realm: str = "Realm",
    ) -> None:
        self.app = app
        self.username = username
        self.password = password
        self.roles = tuple(roles)
        self.realm = realm

    async def __call__(
        self,
        scope: _Scope,
        receive: _Receive,
        send: _Send,
    ) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        path: str = scope.get("path", "/")
        if is_public_path(path):
            await self.app(scope, receive, send)
            return

        headers: list[tuple[bytes, bytes]] = scope.get("headers", [])
        credentials = parse_basic_credentials(header_value(headers, b"authorization"))

        if credentials is not None and self._matches(*credentials):
            state: dict[str, Any] = scope.setdefault("state", {})
            state["user"] = AuthenticatedUser(username=credentials[0], roles=self.roles)
            await self.app(scope, receive, send)
            return

        await self._send_401(send)

    def _matches(self, username: str, password: str) -> bool:
        # Evaluate both comparisons so timing does not reveal which one failed.
        user_ok = hmac.compare_digest(username.encode("utf-8"), self.username.encode("utf-8"))
        pass_ok = hmac.compare_digest(password.encode("utf-8"), self.password.encode("utf-8"))
        return user_ok and pass_ok

    async def _send_401(self, send: _Send) -> None:
        body = json.dumps(
            {
                "error": {
                    "code": "AUTHENTICATION_FAILED",
                    "message": "Invalid or missing credentials.",
                    "request_id": get_request_id(),
                    "details": {},
                },
            },
        ).encode()

        await send(
            {
                "type": "http.response.start",
                "status": 401,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"content-length", str(len(body)).encode()),
                    (
                        b"www-authenticate",
                        f'Basic realm="{self.realm}"'.encode("latin-1"),
                    ),
                ],
            },
        )
        await send(
            {
                "type": "http.response.body",
                "body": body,
            },
        )
