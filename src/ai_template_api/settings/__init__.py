"""Pydantic-settings configuration for the template service.

    from ai_template_api.settings import TemplateSettings, CorsConfig, ...
"""

from __future__ import annotations

from ai_template_api.settings.core import TemplateSettings
from ai_template_api.settings.sections import (
    CorsConfig,
    OpenApiConfig,
    SecurityConfig,
    TemplateRouteConfig,
)

__all__ = [
    "CorsConfig",
    "OpenApiConfig",
    "SecurityConfig",
    "TemplateRouteConfig",
    "TemplateSettings",
]
