"""Tests for ai_template_api.product.feature.service."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from ai_template_api.db.models import FeatureExampleRecord
from ai_template_api.product.feature.schemas import FeatureExampleResponse
from ai_template_api.product.feature.service import FeatureExampleService


def _repo(returned: FeatureExampleRecord | None = None) -> AsyncMock:
    repo = AsyncMock()
    repo.save = AsyncMock(
        return_value=returned or FeatureExampleRecord(id="generated", feature_string=None)
    )
    return repo


class TestHandle:
    async def test_returns_response(self) -> None:
        svc = FeatureExampleService(_repo())
        result = await svc.handle("anything")
        assert isinstance(result, FeatureExampleResponse)
        assert result.feature is None

    async def test_saves_exactly_one_empty_entity(self) -> None:
        repo = _repo()
        svc = FeatureExampleService(repo)

        await svc.handle("payload that is ignored")

        repo.save.assert_awaited_once()
        saved = repo.save.await_args.args[0]
        assert isinstance(saved, FeatureExampleRecord)
        assert saved.id is None
        assert saved.feature_string is None

    @pytest.mark.parametrize("payload", ["", "hello", '{"feature": "x"}', "éè"])
    async def test_payload_is_not_persisted(self, payload: str) -> None:
        repo = _repo()
        await FeatureExampleService(repo).handle(payload)
        assert repo.save.await_args.args[0].feature_string is None

    async def test_projects_stored_feature_string(self) -> None:
        repo = _repo(FeatureExampleRecord(id="x", feature_string="from-store"))
        result = await FeatureExampleService(repo).handle("ignored")
        assert result.feature == "from-store"

    async def test_store_failure_propagates_unchanged(self) -> None:
        error = OperationalError("INSERT", {}, Exception("connection lost"))
        repo = AsyncMock()
        repo.save = AsyncMock(side_effect=error)

        with pytest.raises(OperationalError) as exc_info:
            await FeatureExampleService(repo).handle("x")

        assert exc_info.value is error
