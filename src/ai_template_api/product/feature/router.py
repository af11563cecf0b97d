"""REST API for the feature example — ``POST /{product}/{feature}/{subfeature}``.

The route is mounted twice: at the bare product prefix and under the
versioned ``/api/v1`` prefix.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002

from ai_template_api.db.models import FeatureExampleRecord
from ai_template_api.db.repository import AsyncCrudRepository  # noqa: TC001
from ai_template_api.deps import get_db
from ai_template_api.product.feature.repository import FeatureExampleRepository
from ai_template_api.product.feature.schemas import FeatureExampleResponse
from ai_template_api.product.feature.service import FeatureExampleService

if TYPE_CHECKING:
    from ai_template_api.settings import TemplateRouteConfig


# ------------------------------------------------------------------
# Dependency helpers
# ------------------------------------------------------------------


def get_feature_repository(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> AsyncCrudRepository[FeatureExampleRecord, str]:
    return FeatureExampleRepository(session)


def get_feature_service(
    repository: Annotated[
        AsyncCrudRepository[FeatureExampleRecord, str],
        Depends(get_feature_repository),
    ],
) -> FeatureExampleService:
    return FeatureExampleService(repository)


Svc = Annotated[FeatureExampleService, Depends(get_feature_service)]

_RAW_BODY = {
    "requestBody": {
        "required": False,
        "content": {"text/plain": {"schema": {"type": "string"}}},
    },
}


# ------------------------------------------------------------------
# Handler
# ------------------------------------------------------------------


async def create_feature_example(request: Request, svc: Svc) -> FeatureExampleResponse:
    """Persist a new feature entity and return its projection.

    The request body is read as raw text and handed to the service as is.
    """
    raw = await request.body()
    return await svc.handle(raw.decode("utf-8", errors="replace"))


def build_feature_router(template: TemplateRouteConfig) -> APIRouter:
    """Mount the feature handler under ``/{product}`` and ``{api_prefix}/{product}``."""
    router = APIRouter(tags=[template.feature])
    path = f"/{template.feature}/{template.subfeature}"
    for prefix in (f"/{template.product}", f"{template.api_prefix}/{template.product}"):
        router.add_api_route(
            prefix + path,
            create_feature_example,
            methods=["POST"],
            response_model=FeatureExampleResponse,
            summary="Create a feature example",
            openapi_extra=_RAW_BODY,
        )
    return router
