"""
Platform setting entities.

Values are stored as JSON so every value type (string, number, boolean,
object) shares one column. Each write is mirrored into the audit log.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from empowered_camps.core.models.domain.enums import SettingAuditSource, SettingScope, SettingValueType

from ..base import Base, UTCDateTime, new_id, utc_now


class Setting(Base, table=True):
    """Global or tenant override of a platform setting.

    Table: settings
    """

    __tablename__ = "settings"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    scope: SettingScope = Field(default=SettingScope.GLOBAL, index=True)
    tenant_id: Optional[str] = Field(default=None, foreign_key="tenants.id", index=True)
    key: str = Field(index=True)
    value_json: Any = Field(default=None, sa_column=Column("value_json", JSON, nullable=True))
    value_type: SettingValueType = Field(default=SettingValueType.STRING)
    description: Optional[str] = Field(default=None)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_by_user_id: Optional[str] = Field(default=None)


class SettingsAuditLog(Base, table=True):
    """Change history of settings.

    Table: settings_audit_log
    """

    __tablename__ = "settings_audit_log"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    setting_id: Optional[str] = Field(default=None)
    scope: SettingScope
    tenant_id: Optional[str] = Field(default=None, index=True)
    key: str
    old_value: Any = Field(default=None, sa_column=Column("old_value", JSON, nullable=True))
    new_value: Any = Field(default=None, sa_column=Column("new_value", JSON, nullable=True))
    changed_at: datetime = Field(default_factory=utc_now, index=True, sa_type=UTCDateTime)
    changed_by_user_id: Optional[str] = Field(default=None)
    source: SettingAuditSource = Field(default=SettingAuditSource.ADMIN_UI)
