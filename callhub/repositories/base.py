"""
Base repository with common CRUD operations.
All repositories should extend this class for database access.
"""
from typing import Generic, TypeVar, Type, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from callhub.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Provides generic database operations that can be reused across all repositories.
    Repositories flush but never commit; transaction boundaries belong to services
    and the request-scoped session.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    async def create(self, **kwargs) -> ModelType:
        """
        Create a new record.

        Args:
            **kwargs: Model field values

        Returns:
            Created model instance

        Example:
            ```python
            user = await user_repo.create(email="a@example.com", name="A", password_hash=h)
            ```
        """
        instance = self.model(**kwargs)
        await self.add(instance)
        await self.db.refresh(instance)
        return instance

    async def add(self, instance: ModelType) -> ModelType:
        """
        Insert an already-built instance.

        Args:
            instance: Transient model instance

        Returns:
            The same instance, flushed
        """
        self.db.add(instance)
        await self.db.flush()
        return instance

    async def get(self, id: str) -> Optional[ModelType]:
        """
        Get a record by ID.

        Args:
            id: Record ID

        Returns:
            Model instance or None if not found
        """
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def save(self, instance: ModelType) -> ModelType:
        """
        Flush pending changes of a mutated instance.

        Args:
            instance: Persistent model instance with modified attributes

        Returns:
            The same instance
        """
        self.db.add(instance)
        await self.db.flush()
        return instance
