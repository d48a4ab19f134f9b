"""
Platform settings and email template I/O models.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from empowered_camps.core.models.domain.enums import EmailType, SettingAuditSource


class SettingUpdate(BaseModel):
    key: str
    value: Any = None


class SettingsUpdateRequest(BaseModel):
    """``tenant_id`` switches the update to tenant overrides."""

    tenant_id: Optional[str] = None
    updates: List[SettingUpdate] = Field(default_factory=list)
    source: SettingAuditSource = SettingAuditSource.ADMIN_UI


class SettingsUpdateResult(BaseModel):
    updated: int
    skipped: List[str] = Field(default_factory=list)


class EmailTemplateUpsert(BaseModel):
    """Create or replace a stored template. Without ``tenant_id`` the global template is written."""

    email_type: Optional[EmailType] = None
    tenant_id: Optional[str] = None
    name: Optional[str] = None
    subject: Optional[str] = None
    body_html: Optional[str] = None
    body_text: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True


class EmailTemplatePreviewRequest(BaseModel):
    email_type: EmailType
    tenant_id: Optional[str] = None
    variables: Dict[str, Any] = Field(default_factory=dict)
