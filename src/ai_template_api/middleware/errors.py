"""Centralised error handling.

Provides:

* :class:`CatchAllErrorMiddleware` — a pure ASGI middleware that
  catches unhandled exceptions and returns a generic 500 JSON body.
* :func:`register_error_handlers` — FastAPI exception handlers for the
  service exception hierarchy, persistence failures, ``HTTPException``,
  validation errors and a generic fallback.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any

from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse

from ai_template_api.exceptions import (
    AuthenticationError,
    EntityNotFoundError,
    ServiceUnavailableError,
    TemplateAPIError,
)
from ai_template_api.middleware.correlation import get_request_id

if TYPE_CHECKING:
    from fastapi import FastAPI
    from starlette.requests import Request

logger = logging.getLogger(__name__)

_Scope = dict[str, Any]
_Receive = Any
_Send = Any

_STATUS_MAP: dict[type[TemplateAPIError], int] = {
    AuthenticationError: 401,
    EntityNotFoundError: 404,
    ServiceUnavailableError: 503,
}

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def error_code_from_class(cls: type[Exception]) -> str:
    """Convert e.g. ``EntityNotFoundError`` to ``ENTITY_NOT_FOUND``.

    The trailing ``Error`` suffix is stripped before conversion.
    """
    name = cls.__name__
    if name.endswith("Error"):
        name = name[: -len("Error")]
    return _CAMEL_RE.sub("_", name).upper()


def error_body(
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "request_id": get_request_id(),
            "details": details or {},
        },
    }


# ======================================================================
# Pure ASGI catch-all middleware
# ======================================================================


class CatchAllErrorMiddleware:
    """Turn any exception escaping the app into a 500 JSON response.

    If the response has already started the exception is only logged,
    since a second ``http.response.start`` would be a protocol error.
    """

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(
        self,
        scope: _Scope,
        receive: _Receive,
        send: _Send,
    ) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def _tracking_send(message: dict[str, Any]) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, _tracking_send)
        except Exception:
            logger.exception("Unhandled exception in ASGI application")
            if response_started:
                return
            body = json.dumps(
                error_body(
                    "INTERNAL_SERVER_ERROR",
                    "An unexpected error occurred.",
                ),
            ).encode()

            await send(
                {
                    "type": "http.response.start",
                    "status": 500,
                    "headers": [
                        (b"content-type", b"application/json"),
                        (b"content-length", str(len(body)).encode()),
                    ],
                },
            )
            await send(
                {
                    "type": "http.response.body",
                    "body": body,
                },
            )


# ======================================================================
# FastAPI exception handlers
# ======================================================================


async def handle_template_error(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Map a :class:`TemplateAPIError` subclass to a JSON response.

    Walks the exception's MRO to find the most specific HTTP status
    code registered in :data:`_STATUS_MAP`.
    """
    assert isinstance(exc, TemplateAPIError)
    status = 500
    for cls in type(exc).__mro__:
        if cls in _STATUS_MAP:
            status = _STATUS_MAP[cls]
            break

    return JSONResponse(
        status_code=status,
        content=error_body(error_code_from_class(type(exc)), str(exc), exc.details),
    )


async def handle_persistence_error(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """The backing store failed or is unreachable."""
    assert isinstance(exc, SQLAlchemyError)
    logger.error("Persistence failure: %s", type(exc).__name__, exc_info=exc)
    return JSONResponse(
        status_code=503,
        content=error_body(
            "PERSISTENCE_FAILURE",
            "The data store is unavailable.",
        ),
    )


async def handle_http_exception(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle Starlette :class:`HTTPException`."""
    assert isinstance(exc, HTTPException)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("HTTP_ERROR", str(exc.detail)),
        headers=exc.headers,
    )


async def handle_validation_error(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle Pydantic / FastAPI request validation errors."""
    assert isinstance(exc, RequestValidationError)
    return JSONResponse(
        status_code=422,
        content=error_body(
            "VALIDATION_ERROR",
            "Request validation failed.",
            {"errors": json.loads(json.dumps(exc.errors(), default=str))},
        ),
    )


async def handle_generic_error(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Last-resort handler for completely unexpected exceptions."""
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content=error_body(
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred.",
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the given FastAPI app."""
    app.add_exception_handler(TemplateAPIError, handle_template_error)
    app.add_exception_handler(SQLAlchemyError, handle_persistence_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_generic_error)
