"""
Platform settings repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from empowered_camps.core.models.domain.enums import SettingScope

from ..entities.settings import Setting, SettingsAuditLog
from .base import SQLModelRepository


class SettingRepository(SQLModelRepository[Setting]):
    """Repository for stored setting values and their audit trail."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Setting)

    async def get_value_row(self, scope: SettingScope, key: str, tenant_id: Optional[str] = None) -> Optional[Setting]:
        stmt = select(Setting).where(Setting.scope == scope, Setting.key == key)
        if scope == SettingScope.TENANT:
            stmt = stmt.where(Setting.tenant_id == tenant_id)
        else:
            stmt = stmt.where(col(Setting.tenant_id).is_(None))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_scope(self, scope: SettingScope, tenant_id: Optional[str] = None) -> List[Setting]:
        stmt = select(Setting).where(Setting.scope == scope)
        if scope == SettingScope.TENANT:
            stmt = stmt.where(Setting.tenant_id == tenant_id)
        result = await self.session.execute(stmt.order_by(Setting.key))
        return list(result.scalars().all())

    async def add_audit(self, entry: SettingsAuditLog) -> None:
        self.session.add(entry)
        await self.session.flush()

    async def audit_log(
        self, tenant_id: Optional[str] = None, key: Optional[str] = None, limit: int = 50
    ) -> List[SettingsAuditLog]:
        """Most recent changes first; ``tenant_id`` narrows to one tenant's overrides."""
        stmt = select(SettingsAuditLog)
        if tenant_id:
            stmt = stmt.where(SettingsAuditLog.tenant_id == tenant_id)
        if key:
            stmt = stmt.where(SettingsAuditLog.key == key)
        stmt = stmt.order_by(col(SettingsAuditLog.changed_at).desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
