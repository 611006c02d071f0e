"""Generic async repository for models derived from ``BaseModel``."""

from collections.abc import Mapping
from typing import Generic, TypeVar

from loguru import logger
from sqlalchemy import delete as sql_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from viron.infrastructure.database.base import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """Common CRUD operations shared by entity repositories.

    Args:
        session: The async SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.

    Example:
        class PersonalInfoRepository(BaseRepository[PersonalInfo]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, PersonalInfo)
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class

    async def create(self, obj: T) -> T:
        """Insert ``obj`` and load its server-generated columns.

        Args:
            obj: The model instance to create.

        Returns:
            T: The same instance with ``id`` and timestamps populated.
        """
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)

        logger.info(
            "Created {} instance with ID: {}", self.model_class.__name__, obj.id
        )
        return obj

    def _where_clauses(
        self, filters: Mapping[str, object]
    ) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = []
        for field, value in filters.items():
            if hasattr(self.model_class, field):
                clauses.append(getattr(self.model_class, field) == value)
            else:
                logger.warning(
                    "Attempted to filter by non-existent field '{}' on {}",
                    field,
                    self.model_class.__name__,
                )
        return clauses

    async def filter_by(self, **kwargs: object) -> list[T]:
        """Return every instance matching all ``field=value`` conditions, by ID.

        Args:
            **kwargs: Field-value pairs to filter by.

        Returns:
            list[T]: Matching instances ordered by ID.
        """
        stmt = (
            select(self.model_class)
            .where(*self._where_clauses(kwargs))
            .order_by(self.model_class.id)
        )
        result = await self.session.execute(stmt)
        instances = list(result.scalars().all())

        logger.debug(
            "Filtered {} - found {} instances with filters: {}",
            self.model_class.__name__,
            len(instances),
            list(kwargs),
        )
        return instances

    async def find_one_by(self, **kwargs: object) -> T | None:
        """Return the first instance matching all conditions, or None.

        Args:
            **kwargs: Field-value pairs to filter by.

        Returns:
            T | None: The first matching instance if found, None otherwise.
        """
        stmt = (
            select(self.model_class)
            .where(*self._where_clauses(kwargs))
            .order_by(self.model_class.id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        instance = result.scalar_one_or_none()

        if instance is None:
            logger.debug(
                "{} instance not found with filters: {}",
                self.model_class.__name__,
                list(kwargs),
            )
        return instance

    async def delete_by(self, **kwargs: object) -> int:
        """Delete every instance matching all conditions.

        Args:
            **kwargs: Field-value pairs to filter by.

        Returns:
            int: Number of deleted rows.

        Raises:
            ValueError: If no usable condition is given, which would empty the table.
        """
        clauses = self._where_clauses(kwargs)
        if not clauses:
            msg = f"Refusing to delete {self.model_class.__name__} without conditions"
            raise ValueError(msg)

        stmt = sql_delete(self.model_class).where(*clauses)
        result = await self.session.execute(stmt)
        deleted: int = result.rowcount

        logger.info(
            "Deleted {} {} instances with filters: {}",
            deleted,
            self.model_class.__name__,
            list(kwargs),
        )
        return deleted
