"""
Base repository interfaces and utilities.

This module provides the foundational repository patterns used by every
table-specific repository. Built on async SQLAlchemy sessions with SQLModel
entities.

Write methods take a ``commit`` flag: request handlers that touch several
tables (checkout, webhooks, invoice generation) stage their writes with
``commit=False`` and commit once at the end.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from ..base import utc_now

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(ABC, Generic[EntityType]):
    """Base async repository interface with common CRUD operations using SQLModel."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with async database session and SQLModel entity class.

        Args:
            session: Async SQLAlchemy session for database operations
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model

    @abstractmethod
    async def create(self, entity: EntityType, commit: bool = True) -> EntityType:
        """Create a new entity record.

        Args:
            entity: SQLModel instance to persist
            commit: Commit the transaction, otherwise only flush

        Returns:
            Persisted entity with generated fields populated
        """

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        """Get entity by its primary identifier.

        Args:
            entity_id: Primary key value

        Returns:
            Entity instance or None if not found
        """

    @abstractmethod
    async def update(self, entity: EntityType, commit: bool = True) -> EntityType:
        """Update an existing entity record.

        Args:
            entity: SQLModel instance with updated fields
            commit: Commit the transaction, otherwise only flush

        Returns:
            Updated entity instance
        """

    @abstractmethod
    async def delete(self, entity_id: str, commit: bool = True) -> bool:
        """Delete entity by its primary identifier.

        Args:
            entity_id: Primary key value
            commit: Commit the transaction, otherwise only flush

        Returns:
            True if deleted, False if not found
        """

    @abstractmethod
    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """List entities with optional pagination and filtering.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip
            filters: Dictionary of field filters

        Returns:
            List of entity instances
        """


class SQLModelRepository(AsyncBaseRepository[EntityType]):
    """Generic CRUD implementation shared by the table repositories."""

    async def _persist(self, entity: EntityType, commit: bool) -> EntityType:
        self.session.add(entity)
        if commit:
            await self.session.commit()
            await self.session.refresh(entity)
        else:
            await self.session.flush()
        return entity

    async def create(self, entity: EntityType, commit: bool = True) -> EntityType:
        return await self._persist(entity, commit)

    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        return await self.session.get(self.model, entity_id)

    async def get_many(self, entity_ids: Sequence[str]) -> List[EntityType]:
        """Fetch several rows by primary key; missing ids are skipped."""
        if not entity_ids:
            return []
        stmt = select(self.model).where(self.model.id.in_(list(entity_ids)))  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, entity: EntityType, commit: bool = True) -> EntityType:
        if hasattr(entity, "updated_at"):
            entity.updated_at = utc_now()  # type: ignore[attr-defined]
        return await self._persist(entity, commit)

    async def delete(self, entity_id: str, commit: bool = True) -> bool:
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        if commit:
            await self.session.commit()
        else:
            await self.session.flush()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        stmt = select(self.model)
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        stmt = select(func.count()).select_from(self.model)
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def count_by(self, column_name: str, filters: Optional[Dict[str, Any]] = None) -> Dict[Any, int]:
        """Row counts grouped by ``column_name``."""
        column = getattr(self.model, column_name)
        stmt = select(column, func.count()).group_by(column)
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        result = await self.session.execute(stmt)
        return {key: int(total) for key, total in result.all()}


class QueryBuilder:
    """Utility class for building SQLModel-based database queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Apply equality filters to a select statement.

        ``None`` values are ignored and list/tuple values become ``IN`` clauses.

        Args:
            stmt: SQLModel select statement
            model: SQLModel entity class
            filters: Dictionary of field filters

        Returns:
            Modified select statement with filters applied
        """
        for key, value in filters.items():
            if value is None or not hasattr(model, key):
                continue
            column = getattr(model, key)
            if isinstance(value, (list, tuple, set)):
                stmt = stmt.where(column.in_(list(value)))
            else:
                stmt = stmt.where(column == value)
        return stmt

    @staticmethod
    def apply_search(stmt, columns: Sequence[Any], search: Optional[str]):
        """Case-insensitive substring match over any of ``columns``."""
        if not search:
            return stmt
        pattern = f"%{search.strip().lower()}%"
        return stmt.where(or_(*[func.lower(column).like(pattern) for column in columns]))

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        """Apply pagination to a SQLModel select statement.

        Args:
            stmt: SQLModel select statement
            limit: Maximum number of records
            offset: Number of records to skip

        Returns:
            Modified select statement with pagination applied
        """
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt
