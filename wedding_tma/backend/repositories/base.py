"""
Base Repository.

Base class for all repositories with common CRUD operations.
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_tma.backend.core.exceptions import NotFoundError
from wedding_tma.backend.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)

# Dialects whose INSERT supports ON CONFLICT
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Subclasses should set the model class:

        class UserRepository(BaseRepository[User]):
            model = User
    """

    model: type[ModelType]
    not_found_message: str | None = None

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _not_found(self) -> NotFoundError:
        return NotFoundError(self.not_found_message or f"{self.model.__name__} not found")

    async def get_by_id(self, id: str | UUID) -> ModelType:
        """
        Get a single record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id_or_none(id)
        if instance is None:
            raise self._not_found()
        return instance

    async def get_by_id_or_none(self, id: str | UUID) -> ModelType | None:
        """
        Get a single record by ID, returning None if not found.

        Reloads an already-identity-mapped instance so that SQL-side
        updates issued earlier in the session are visible.
        """
        result = await self.session.execute(
            select(self.model).where(self.model.id == str(id))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def create_if_absent(self, conflict_column: str, **kwargs: Any) -> bool:
        """
        Insert a record unless one with the same unique key already exists.

        Issued as a single INSERT ... ON CONFLICT DO NOTHING, so two requests
        racing to create the same row never fail on the unique constraint.

        Returns:
            True if this call inserted the row
        """
        insert = _UPSERT_INSERTS[self.session.get_bind().dialect.name]
        stmt = (
            insert(self.model)
            .values(**kwargs)
            .on_conflict_do_nothing(index_elements=[conflict_column])
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def update(self, id: str | UUID, **kwargs: Any) -> ModelType:
        """
        Update an existing record.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: str | UUID) -> None:
        """
        Delete a record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)
        await self.session.delete(instance)
        await self.session.flush()
