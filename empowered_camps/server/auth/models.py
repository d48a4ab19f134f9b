"""
Authenticated caller model.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from empowered_camps.core.models.domain.enums import UserRole


class AuthUser(BaseModel):
    """Caller resolved from a verified token and its profile."""

    id: str
    email: Optional[str] = None
    role: UserRole = UserRole.parent
    tenant_id: Optional[str] = None

    @property
    def is_hq_admin(self) -> bool:
        return self.role == UserRole.hq_admin
