"""
Generic async CRUD shared by the marketplace repositories.

Write methods take a ``commit`` flag. The sale workflow passes
``commit=False`` so the sale row and its property status change are written
in one transaction that the service commits itself.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func
from app.database import Base
from typing import TypeVar, Generic, Optional, Dict, Any, Type
import uuid
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    @property
    def _name(self) -> str:
        return self.model.__name__

    async def _flush_or_commit(self, commit: bool) -> None:
        if commit:
            await self.db.commit()
        else:
            await self.db.flush()

    async def create(self, obj_in: Dict[str, Any], commit: bool = True) -> ModelType:
        """
        Insert a row.

        Args:
            obj_in: Column values
            commit: Commit now, or only flush into the caller's transaction

        Returns:
            The new instance with server defaults loaded
        """
        db_obj = self.model(**obj_in)
        self.db.add(db_obj)
        try:
            await self._flush_or_commit(commit)
            await self.db.refresh(db_obj)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create {self._name}: {e}")
            raise

        logger.debug(f"Created {self._name} {db_obj.id}")
        return db_obj

    async def get_by_id(self, id: uuid.UUID) -> Optional[ModelType]:
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def update(
        self,
        id: uuid.UUID,
        obj_in: Dict[str, Any],
        commit: bool = True
    ) -> Optional[ModelType]:
        """
        Update columns of one row. None and empty-string values are ignored,
        so a partial payload leaves omitted columns untouched.

        Returns:
            The updated instance, or None if no row has this id
        """
        values = {k: v for k, v in obj_in.items() if v is not None and v != ""}
        if not values:
            logger.debug(f"Nothing to update on {self._name} {id}")
            return await self.get_by_id(id)

        try:
            result = await self.db.execute(
                update(self.model).where(self.model.id == id).values(**values)
            )
            if result.rowcount == 0:
                return None
            await self._flush_or_commit(commit)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update {self._name} {id}: {e}")
            raise

        logger.debug(f"Updated {self._name} {id}: {sorted(values)}")
        return await self.get_by_id(id)

    async def delete(self, id: uuid.UUID) -> bool:
        """Delete one row and commit. Returns False if no row has this id."""
        try:
            result = await self.db.execute(delete(self.model).where(self.model.id == id))
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete {self._name} {id}: {e}")
            raise

        return result.rowcount > 0

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """
        Count rows matching equality filters; a list value matches any of its items.
        Unknown column names are ignored.
        """
        query = select(func.count(self.model.id))
        for field, value in (filters or {}).items():
            column = getattr(self.model, field, None)
            if column is None:
                continue
            query = query.where(column.in_(value) if isinstance(value, list) else column == value)

        result = await self.db.execute(query)
        return result.scalar()

    async def get_by_field(self, field: str, value: Any) -> Optional[ModelType]:
        """
        Raises:
            ValueError: If the model has no such column
        """
        column = getattr(self.model, field, None)
        if column is None:
            raise ValueError(f"Field '{field}' does not exist on {self._name}")

        result = await self.db.execute(select(self.model).where(column == value))
        return result.scalar_one_or_none()
