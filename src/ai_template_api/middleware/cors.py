"""Translate :class:`CorsConfig` into Starlette ``CORSMiddleware`` options.

Origins are configured as glob patterns (``*``, ``https://*.example.com``).
They are compiled into one ``allow_origin_regex`` so that a matching
origin is echoed back, which is required when credentials are allowed.
"""

from __future__ import annotations

import fnmatch
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ai_template_api.settings import CorsConfig


def origin_patterns_to_regex(patterns: tuple[str, ...] | list[str]) -> str | None:
    """Join glob *patterns* into a single alternation regex."""
    if not patterns:
        return None
    return "|".join(f"(?:{fnmatch.translate(p)})" for p in patterns)


def cors_middleware_options(cors: CorsConfig) -> dict[str, Any]:
    """Keyword arguments for ``app.add_middleware(CORSMiddleware, ...)``."""
    return {
        "allow_origin_regex": origin_patterns_to_regex(cors.allowed_origin_patterns),
        "allow_methods": list(cors.allowed_methods),
        "allow_headers": list(cors.allowed_headers),
        "allow_credentials": cors.allow_credentials,
        "max_age": cors.max_age,
    }
