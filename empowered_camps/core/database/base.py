"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the centralized database layer using SQLModel.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import ConfigDict
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize to aware UTC; naive values are taken to already be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator):
    """``timestamp with time zone`` that always hands back aware UTC datetimes.

    SQLite keeps no offset, so values read from it are re-tagged as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return as_utc(value)

    def process_result_value(self, value, dialect):
        return as_utc(value)


def new_id() -> str:
    return str(uuid.uuid4())


def apply_changes(entity: SQLModel, changes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy a partial update onto ``entity`` and return what was applied.

    An explicit ``None`` for a NOT NULL column leaves the stored value alone.
    """
    columns = entity.__table__.columns
    applied: Dict[str, Any] = {}
    for field, value in changes.items():
        column = columns.get(field)
        if value is None and column is not None and not column.nullable:
            continue
        setattr(entity, field, value)
        applied[field] = value
    return applied
