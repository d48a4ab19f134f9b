"""
Royalty invoice entities.

An invoice records what a licensee owes HQ for one camp session. Line items
break the gross revenue down per registration and per add-on.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlmodel import Field

from empowered_camps.core.models.domain.enums import RoyaltyInvoiceStatus

from ..base import Base, UTCDateTime, new_id, utc_now


class RoyaltyInvoice(Base, table=True):
    """Royalty owed by a licensee for a reporting period.

    Table: royalty_invoices
    """

    __tablename__ = "royalty_invoices"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    tenant_id: str = Field(foreign_key="tenants.id", index=True)
    camp_id: Optional[str] = Field(default=None, foreign_key="camps.id", index=True)
    invoice_number: str = Field(unique=True, index=True)

    period_start: date
    period_end: date
    period_type: str = Field(default="camp_session")

    registration_revenue_cents: int = Field(default=0)
    addon_revenue_cents: int = Field(default=0)
    gross_revenue_cents: int = Field(default=0)
    refunds_cents: int = Field(default=0)
    net_revenue_cents: int = Field(default=0)
    royalty_rate_bps: int = Field(default=1000)
    royalty_due_cents: int = Field(default=0)
    adjustment_cents: int = Field(default=0, description="Sum of manual adjustments, may be negative")
    total_due_cents: int = Field(default=0)

    status: RoyaltyInvoiceStatus = Field(default=RoyaltyInvoiceStatus.pending)
    generated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    generated_by_user_id: Optional[str] = Field(default=None)
    due_date: datetime = Field(sa_type=UTCDateTime)

    paid_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    paid_amount_cents: Optional[int] = Field(default=None)
    paid_by_user_id: Optional[str] = Field(default=None)
    payment_method: Optional[str] = Field(default=None)
    payment_reference: Optional[str] = Field(default=None)

    dispute_reason: Optional[str] = Field(default=None)
    disputed_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    resolved_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    notes: Optional[str] = Field(default=None)
    adjustment_notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"RoyaltyInvoice(number={self.invoice_number}, status={self.status}, due={self.royalty_due_cents})"


class RoyaltyLineItem(Base, table=True):
    """Single revenue line of a royalty invoice.

    Table: royalty_line_items
    """

    __tablename__ = "royalty_line_items"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    invoice_id: str = Field(foreign_key="royalty_invoices.id", index=True)
    registration_id: Optional[str] = Field(default=None)
    item_type: str = Field(default="registration", description="registration or addon")
    description: str
    quantity: int = Field(default=1)
    unit_price_cents: int = Field(default=0)
    total_cents: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
