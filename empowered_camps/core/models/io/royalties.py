"""
Royalty invoice I/O models.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from empowered_camps.core.models.domain.enums import RoyaltyInvoiceStatus


class RoyaltyLineItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    registration_id: Optional[str] = None
    item_type: str
    description: str
    quantity: int
    unit_price_cents: int
    total_cents: int


class RoyaltyInvoiceRead(BaseModel):
    """Royalty invoice with the display names of its tenant and camp."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    tenant_name: Optional[str] = None
    camp_id: Optional[str] = None
    camp_name: Optional[str] = None
    invoice_number: str
    period_start: date
    period_end: date
    period_type: str
    registration_revenue_cents: int
    addon_revenue_cents: int
    gross_revenue_cents: int
    refunds_cents: int
    net_revenue_cents: int
    royalty_rate_bps: int
    royalty_due_cents: int
    adjustment_cents: int = 0
    total_due_cents: int
    status: RoyaltyInvoiceStatus
    generated_at: datetime
    due_date: datetime
    paid_at: Optional[datetime] = None
    paid_amount_cents: Optional[int] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    dispute_reason: Optional[str] = None
    disputed_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    notes: Optional[str] = None
    adjustment_notes: Optional[str] = None
    line_items: List[RoyaltyLineItemRead] = Field(default_factory=list)


class RoyaltyActionRequest(BaseModel):
    """Body of ``POST /admin/royalties``; the fields used depend on ``action``."""

    action: Literal["generate", "bulk-generate", "update-status", "adjust", "mark-overdue"]
    camp_id: Optional[str] = None
    camp_ids: List[str] = Field(default_factory=list)
    due_in_days: Optional[int] = Field(default=None, ge=0, le=365)
    invoice_id: Optional[str] = None
    status: Optional[RoyaltyInvoiceStatus] = None
    notes: Optional[str] = None
    paid_amount_cents: Optional[int] = Field(default=None, ge=0)
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    adjustment_cents: Optional[int] = Field(default=None, description="Signed amount added to the total due")
