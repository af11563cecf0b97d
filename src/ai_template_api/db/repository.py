"""Async CRUD repository contract and its SQLAlchemy implementation."""

from __future__ import annotations

import abc
import logging
import uuid
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from ai_template_api.exceptions import EntityNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)

T = TypeVar("T")
ID = TypeVar("ID")
M = TypeVar("M", bound="DeclarativeBase")


class AsyncCrudRepository(abc.ABC, Generic[T, ID]):  # noqa: UP046
    """Create/read/update/delete over one entity type.

    Every method is a coroutine.  Implementations propagate storage
    failures to the caller unchanged and never retry.
    """

    @abc.abstractmethod
    async def save(self, entity: T) -> T:
        """Insert *entity* (assigning an id if it has none) or update it."""

    @abc.abstractmethod
    async def save_all(self, entities: Iterable[T]) -> list[T]:
        """Save every entity in order and return the stored values."""

    @abc.abstractmethod
    async def find_by_id(self, entity_id: ID) -> T | None:
        """Return the entity with *entity_id*, or ``None``."""

    @abc.abstractmethod
    async def find_all(self) -> list[T]:
        """Return every stored entity."""

    @abc.abstractmethod
    async def find_all_by_id(self, entity_ids: Iterable[ID]) -> list[T]:
        """Return the stored entities whose id is in *entity_ids*."""

    @abc.abstractmethod
    async def exists_by_id(self, entity_id: ID) -> bool: ...

    @abc.abstractmethod
    async def count(self) -> int: ...

    @abc.abstractmethod
    async def delete_by_id(self, entity_id: ID) -> None:
        """Delete the entity with *entity_id*; absent ids are ignored."""

    @abc.abstractmethod
    async def delete(self, entity: T) -> None: ...

    @abc.abstractmethod
    async def delete_all(self) -> None: ...


class SqlAlchemyCrudRepository(AsyncCrudRepository[M, str]):
    """:class:`AsyncCrudRepository` backed by an ``AsyncSession``.

    Subclasses must set ``_model_class`` to an ORM model with a string
    primary key exposed as ``id``.  Each write commits; a failed write
    rolls the session back and re-raises.
    """

    _model_class: type[M]

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def _table(self) -> str:
        return str(self._model_class.__tablename__)

    def _new_id(self) -> str:
        return uuid.uuid4().hex

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def save(self, entity: M) -> M:
        try:
            stored = await self._stage(entity)
            await self._session.commit()
        except SQLAlchemyError:
            await self._session.rollback()
            raise
        await self._session.refresh(stored)
        logger.info("Saved %s %s", self._table, stored.id)  # type: ignore[attr-defined]
        return stored

    async def save_all(self, entities: Iterable[M]) -> list[M]:
        try:
            stored = [await self._stage(e) for e in entities]
            await self._session.commit()
        except SQLAlchemyError:
            await self._session.rollback()
            raise
        for record in stored:
            await self._session.refresh(record)
        logger.info("Saved %d %s rows", len(stored), self._table)
        return stored

    async def _stage(self, entity: M) -> M:
        if getattr(entity, "id", None) is None:
            entity.id = self._new_id()  # type: ignore[attr-defined]
            self._session.add(entity)
            await self._session.flush()
            return entity
        # merge() inserts when the id is unknown, otherwise updates the row.
        merged = await self._session.merge(entity)
        await self._session.flush()
        return merged

    async def delete_by_id(self, entity_id: str) -> None:
        record = await self.find_by_id(entity_id)
        if record is None:
            return
        try:
            await self._session.delete(record)
            await self._session.commit()
        except SQLAlchemyError:
            await self._session.rollback()
            raise
        logger.info("Deleted %s %s", self._table, entity_id)

    async def delete(self, entity: M) -> None:
        await self.delete_by_id(entity.id)  # type: ignore[attr-defined]

    async def delete_all(self) -> None:
        try:
            await self._session.execute(sa_delete(self._model_class))
            await self._session.commit()
        except SQLAlchemyError:
            await self._session.rollback()
            raise
        logger.info("Deleted all %s rows", self._table)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_by_id(self, entity_id: str) -> M | None:
        result = await self._session.execute(
            select(self._model_class).where(self._pk_column() == entity_id)
        )
        return result.scalar_one_or_none()

    async def find_by_id_or_raise(self, entity_id: str) -> M:
        """Like :meth:`find_by_id` but raise ``EntityNotFoundError``."""
        record = await self.find_by_id(entity_id)
        if record is None:
            msg = f"Not found: {self._table} {entity_id}"
            raise EntityNotFoundError(msg, entity=self._table, entity_id=entity_id)
        return record

    async def find_all(self) -> list[M]:
        result = await self._session.execute(
            select(self._model_class).order_by(self._pk_column())
        )
        return list(result.scalars().all())

    async def find_all_by_id(self, entity_ids: Iterable[str]) -> list[M]:
        ids = list(entity_ids)
        if not ids:
            return []
        result = await self._session.execute(
            select(self._model_class)
            .where(self._pk_column().in_(ids))
            .order_by(self._pk_column())
        )
        return list(result.scalars().all())

    async def exists_by_id(self, entity_id: str) -> bool:
        result = await self._session.execute(
            select(func.count()).select_from(self._model_class).where(self._pk_column() == entity_id)
        )
        return int(result.scalar_one()) > 0

    async def count(self) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(self._model_class)
        )
        return int(result.scalar_one())

    def _pk_column(self) -> Any:
        return self._model_class.id  # type: ignore[attr-defined]
