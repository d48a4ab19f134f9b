"""
Email template entity.

Stored templates override the built-in defaults for an email type, either
globally (``tenant_id`` is null) or for one tenant.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from empowered_camps.core.models.domain.enums import EmailType

from ..base import Base, UTCDateTime, new_id, utc_now


class EmailTemplate(Base, table=True):
    """Customized email template.

    Table: email_templates
    """

    __tablename__ = "email_templates"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    tenant_id: Optional[str] = Field(default=None, foreign_key="tenants.id", index=True)
    email_type: EmailType = Field(index=True)
    name: str
    subject: str
    body_html: str
    body_text: Optional[str] = Field(default=None)
    description: Optional[str] = Field(default=None)
    available_vars: List[str] = Field(default_factory=list, sa_column=Column("available_vars", JSON, nullable=False))
    is_active: bool = Field(default=True)
    created_by: Optional[str] = Field(default=None)
    updated_by: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=UTCDateTime)
