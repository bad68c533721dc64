"""
Base Repository.

Shared lookups for repositories bound to one model class.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gumboard.backend.core.exceptions import NotFoundError
from gumboard.backend.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository bound to a model.

    Subclasses set the model class:

        class BoardRepository(BaseRepository[Board]):
            model = Board
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id_or_none(self, id: str) -> ModelType | None:
        """Get a single record by ID, returning None if not found."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == str(id))
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, id: str) -> ModelType:
        """
        Get a single record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id_or_none(id)
        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        return instance

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record and flush it so generated fields are populated."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        return instance
