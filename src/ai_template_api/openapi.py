"""OpenAPI document customisation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi.openapi.utils import get_openapi

if TYPE_CHECKING:
    from fastapi import FastAPI

    from ai_template_api.settings import TemplateSettings

BEARER_SCHEME = "bearer-jwt"


def configure_openapi(app: FastAPI, settings: TemplateSettings) -> None:
    """Publish contact, license, server and security-scheme metadata.

    The ``bearer-jwt`` scheme is declared for documentation only; no
    route requires it.
    """
    meta = settings.openapi

    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = get_openapi(
            title=meta.title,
            version=meta.version,
            description=meta.description,
            routes=app.routes,
            contact={"name": meta.contact_name, "email": meta.contact_email},
            license_info={"name": meta.license_name, "url": meta.license_url},
            servers=[
                {
                    "url": f"http://localhost:{settings.port}",
                    "description": "Local Development",
                },
            ],
        )

        schemes = schema.setdefault("components", {}).setdefault("securitySchemes", {})
        schemes[BEARER_SCHEME] = {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


__all__ = ["BEARER_SCHEME", "configure_openapi"]
