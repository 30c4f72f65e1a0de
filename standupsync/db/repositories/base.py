"""Shared repository plumbing over one ORM model."""

from typing import Any, Generic, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from standupsync.db.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Primary-key access plus query helpers for subclasses.

    Repositories only flush; services own commit and rollback.

    Args:
        session: AsyncSession shared with the calling service.
        model_class: The ORM model managed by this repository.
    """

    def __init__(self, session: AsyncSession, model_class: Type[T]) -> None:
        self._session = session
        self._model_class = model_class

    async def get_by_id(self, id: UUID) -> Optional[T]:
        return await self._session.get(self._model_class, id)

    async def create(self, **values: Any) -> T:
        """Insert a row and return it with server defaults loaded."""
        instance = self._model_class(**values)
        self._session.add(instance)
        await self._session.flush()
        await self._session.refresh(instance)
        return instance

    async def delete(self, instance: T) -> None:
        await self._session.delete(instance)
        await self._session.flush()

    async def _first(self, stmt: Select) -> Optional[T]:
        result = await self._session.execute(stmt)
        return result.scalars().first()

    async def _all(self, stmt: Select) -> list[T]:
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
