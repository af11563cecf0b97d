"""Operational endpoints under ``/actuator`` plus the service root.

Liveness, readiness and aggregate health for orchestrators, and a small
info document.  All of these are public.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

import ai_template_api as _service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["actuator"])


async def _database_status(request: Request) -> str:
    try:
        engine = request.app.state.engine
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.warning("Health check: database unreachable", exc_info=True)
        return "DOWN"
    return "UP"


@router.get("/")
async def index(request: Request) -> dict[str, str]:
    """Service name, version and where to find the API docs."""
    settings = request.app.state.settings
    return {
        "name": settings.openapi.title,
        "version": _service.__version__,
        "docs": settings.openapi.docs_url,
    }


@router.get("/actuator/health")
async def health(request: Request) -> JSONResponse:
    """Aggregate health with per-component status."""
    db_status = await _database_status(request)
    return JSONResponse(
        status_code=200 if db_status == "UP" else 503,
        content={
            "status": db_status,
            "components": {"db": {"status": db_status}},
        },
    )


@router.get("/actuator/health/liveness")
async def liveness() -> dict[str, str]:
    """Liveness probe — UP whenever the process is serving requests."""
    return {"status": "UP"}


@router.get("/actuator/health/readiness")
async def readiness(request: Request) -> JSONResponse:
    """Readiness probe — verifies database connectivity."""
    db_status = await _database_status(request)
    return JSONResponse(
        status_code=200 if db_status == "UP" else 503,
        content={"status": db_status},
    )


@router.get("/actuator/info")
async def info(request: Request) -> dict[str, Any]:
    settings = request.app.state.settings
    return {
        "app": {
            "name": settings.openapi.title,
            "version": _service.__version__,
            "description": settings.openapi.description,
        },
    }
