"""Feature example service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ai_template_api.db.models import FeatureExampleRecord
from ai_template_api.product.feature.schemas import FeatureExampleResponse

if TYPE_CHECKING:
    from ai_template_api.db.repository import AsyncCrudRepository

logger = logging.getLogger(__name__)


class FeatureExampleService:
    """Persist a new feature entity per call and project it to a response."""

    def __init__(self, repository: AsyncCrudRepository[FeatureExampleRecord, str]) -> None:
        self._repository = repository

    async def handle(self, payload: str) -> FeatureExampleResponse:
        """Store an empty entity and return its ``feature_string``.

        *payload* is accepted but not copied onto the entity; scaffolded
        services are expected to map it themselves.  Store errors
        propagate unchanged.
        """
        logger.debug("Handling feature request (%d chars)", len(payload))
        stored = await self._repository.save(FeatureExampleRecord())
        return FeatureExampleResponse(feature=stored.feature_string)
