"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from ai_template_api.actuator.router import router as actuator_router
from ai_template_api.db.engine import (
    create_async_engine,
    create_session_factory,
    create_tables,
)
from ai_template_api.middleware.auth import BasicAuthMiddleware
from ai_template_api.middleware.correlation import CorrelationIdMiddleware
from ai_template_api.middleware.cors import cors_middleware_options
from ai_template_api.middleware.errors import (
    CatchAllErrorMiddleware,
    register_error_handlers,
)
from ai_template_api.middleware.logging import setup_logging
from ai_template_api.openapi import configure_openapi
from ai_template_api.product.feature.router import build_feature_router
from ai_template_api.settings import TemplateSettings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the database on startup and dispose of it on shutdown."""
    settings: TemplateSettings = app.state.settings

    engine = create_async_engine(settings.database_url)
    await create_tables(engine)

    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    logger.info("Service started (database=%s)", engine.url.render_as_string(hide_password=True))

    yield

    await engine.dispose()
    logger.info("Service shut down")


def create_app(settings: TemplateSettings | None = None) -> FastAPI:
    """Build and return the configured FastAPI application."""
    if settings is None:
        settings = TemplateSettings()

    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.openapi.title,
        version=settings.openapi.version,
        description=settings.openapi.description,
        debug=settings.debug,
        docs_url=settings.openapi.docs_url,
        openapi_url=settings.openapi.openapi_url,
        swagger_ui_oauth2_redirect_url=f"{settings.openapi.docs_url}/oauth2-redirect",
        redoc_url=None,
        lifespan=_lifespan,
    )
    app.state.settings = settings

    # ----- Middleware stack (outer → inner) ----------------------------
    # Order: Correlation → CatchAll → CORS → BasicAuth
    # Added in reverse because Starlette processes them LIFO.
    app.add_middleware(
        BasicAuthMiddleware,
        username=settings.security.username,
        password=settings.security.password,
        roles=settings.security.roles,
        realm=settings.security.realm,
    )
    app.add_middleware(CORSMiddleware, **cors_middleware_options(settings.cors))
    app.add_middleware(CatchAllErrorMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    # ----- Exception handlers -----------------------------------------
    register_error_handlers(app)

    # ----- Routers ---------------------------------------------------
    app.include_router(actuator_router)
    app.include_router(build_feature_router(settings.template))

    configure_openapi(app, settings)

    return app
