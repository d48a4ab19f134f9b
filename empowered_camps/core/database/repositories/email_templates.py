"""
Email template repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from empowered_camps.core.models.domain.enums import EmailType

from ..entities.email_templates import EmailTemplate
from .base import SQLModelRepository


class EmailTemplateRepository(SQLModelRepository[EmailTemplate]):
    """Repository for stored email template overrides."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, EmailTemplate)

    async def get_for(self, email_type: EmailType, tenant_id: Optional[str] = None) -> Optional[EmailTemplate]:
        """Exact-scope lookup: the tenant's own override, or the global one when ``tenant_id`` is None."""
        stmt = select(EmailTemplate).where(EmailTemplate.email_type == email_type)
        if tenant_id:
            stmt = stmt.where(EmailTemplate.tenant_id == tenant_id)
        else:
            stmt = stmt.where(col(EmailTemplate.tenant_id).is_(None))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_scope(self, tenant_id: Optional[str] = None) -> List[EmailTemplate]:
        """Global templates plus, when given, the tenant's overrides."""
        stmt = select(EmailTemplate)
        if tenant_id:
            stmt = stmt.where((col(EmailTemplate.tenant_id).is_(None)) | (EmailTemplate.tenant_id == tenant_id))
        else:
            stmt = stmt.where(col(EmailTemplate.tenant_id).is_(None))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
