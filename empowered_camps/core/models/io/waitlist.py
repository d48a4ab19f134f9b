"""
Camp waitlist I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .registrations import CheckoutCamper, CheckoutParent


class WaitlistJoinRequest(BaseModel):
    """Body of ``POST /waitlist/join``; ``tenant_id`` defaults to the camp's tenant."""

    camp_id: Optional[str] = None
    tenant_id: Optional[str] = None
    parent: Optional[CheckoutParent] = None
    campers: List[CheckoutCamper] = Field(default_factory=list)
    promo_code: Optional[str] = None


class WaitlistJoinResult(BaseModel):
    registration_ids: List[str]
    waitlist_position: int


class WaitlistJoinResponse(BaseModel):
    data: WaitlistJoinResult


class WaitlistPosition(BaseModel):
    """Place of a parent's first waitlisted athlete in a camp's line."""

    registration_id: str
    position: Optional[int] = None
    total_waitlisted: int


class WaitlistEntry(BaseModel):
    """Row of the admin waitlist view."""

    registration_id: str
    position: Optional[int] = None
    athlete_id: str
    athlete_name: Optional[str] = None
    parent_name: Optional[str] = None
    parent_email: Optional[str] = None
    joined_at: Optional[datetime] = None
    offer_status: Literal["waiting", "offer_sent", "offer_expired"]
    offer_expires_at: Optional[datetime] = None
    total_price_cents: int


class WaitlistEntriesResponse(BaseModel):
    data: List[WaitlistEntry]
    total: int


class WaitlistOfferResponse(BaseModel):
    registration_id: str
    offer_expires_at: datetime


class WaitlistOfferAccepted(BaseModel):
    registration_id: str
    checkout_url: str
    session_id: str
