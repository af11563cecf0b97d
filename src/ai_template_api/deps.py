"""Dependency injection for FastAPI route handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

from ai_template_api.exceptions import ServiceUnavailableError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlalchemy.ext.asyncio import AsyncSession


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session from the app-level session factory.

    Usage in routes::

        @router.post("/example")
        async def example(db: Annotated[AsyncSession, Depends(get_db)]):
            ...

    The factory is placed on ``app.state.session_factory`` by the
    application lifespan.
    """
    factory = getattr(request.app.state, "session_factory", None)
    if factory is None:
        msg = "Database session factory is not initialised."
        raise ServiceUnavailableError(msg)
    async with factory() as session:
        yield session
