"""Cross-cutting configuration sections."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SecurityConfig(BaseModel):
    """Single in-memory HTTP Basic credential."""

    model_config = ConfigDict(frozen=True)

    username: str = "admin"
    password: str = Field(
        default="password",
        description="Demo credential; override via AI_TEMPLATE_SECURITY__PASSWORD.",
    )
    roles: tuple[str, ...] = ("USER", "ADMIN")
    realm: str = "Realm"


class CorsConfig(BaseModel):
    """CORS policy applied to every route."""

    model_config = ConfigDict(frozen=True)

    allowed_origin_patterns: tuple[str, ...] = ("*",)
    allowed_methods: tuple[str, ...] = ("GET", "POST", "PUT")
    allowed_headers: tuple[str, ...] = ("*",)
    allow_credentials: bool = True
    max_age: int = Field(default=3600, ge=0)


class OpenApiConfig(BaseModel):
    """Metadata published in the OpenAPI document."""

    model_config = ConfigDict(frozen=True)

    title: str = "AI Template Python API"
    version: str = "1.0.0"
    description: str = "Template to be used by AI Agents"
    contact_name: str = "AI Template"
    contact_email: str = "brettlashier@gmail.com"
    license_name: str = "Example License"
    license_url: str = "https://examplewebsitenotreal/license"
    docs_url: str = "/swagger-ui"
    openapi_url: str = "/api-docs"


class TemplateRouteConfig(BaseModel):
    """Path segments substituted when a service is scaffolded."""

    model_config = ConfigDict(frozen=True)

    product: str = Field(default="product", pattern=r"^[A-Za-z0-9_-]+$")
    feature: str = Field(default="feature", pattern=r"^[A-Za-z0-9_-]+$")
    subfeature: str = Field(default="subfeature", pattern=r"^[A-Za-z0-9_-]+$")
    api_prefix: str = "/api/v1"
