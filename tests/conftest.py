"""Shared test fixtures for ai_template_api."""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from ai_template_api.app import _lifespan, create_app
from ai_template_api.settings import TemplateSettings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI


def basic_auth(username: str, password: str) -> dict[str, str]:
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def settings() -> TemplateSettings:
    """Settings with an aiosqlite in-memory database."""
    return TemplateSettings(database_url="sqlite+aiosqlite://")


@pytest.fixture
def app(settings: TemplateSettings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
async def started_app(app: FastAPI) -> AsyncGenerator[FastAPI, None]:
    """The app with its lifespan entered (engine + tables ready)."""
    async with _lifespan(app):
        yield app


@pytest.fixture
async def client(started_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=started_app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def auth_headers(settings: TemplateSettings) -> dict[str, str]:
    """Valid Basic credentials for the configured user."""
    return basic_auth(settings.security.username, settings.security.password)
