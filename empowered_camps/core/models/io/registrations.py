"""
Registration checkout and payment I/O models.

Checkout fields are optional at the schema level; the service reports a
single "Missing required fields" error instead of per-field validation.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class CheckoutParent(BaseModel):
    """Parent or guardian paying for the registration."""

    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    emergency_contact_relationship: Optional[str] = None


class CheckoutCamper(BaseModel):
    """Athlete being registered; ``existing_athlete_id`` reuses a saved athlete."""

    existing_athlete_id: Optional[str] = None
    first_name: str
    last_name: str
    date_of_birth: date
    grade: Optional[str] = None
    t_shirt_size: Optional[str] = None
    medical_notes: Optional[str] = None
    allergies: Optional[str] = None
    special_considerations: Optional[str] = None


class CheckoutAddon(BaseModel):
    """Selected add-on. ``camper_index`` ties it to one camper; unassigned add-ons go to the first camper."""

    addon_id: str
    variant_id: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    camper_index: Optional[int] = Field(default=None, ge=0)


class CheckoutRequest(BaseModel):
    """Body of ``POST /registrations/checkout``."""

    camp_id: Optional[str] = None
    tenant_id: Optional[str] = None
    parent: Optional[CheckoutParent] = None
    campers: List[CheckoutCamper] = Field(default_factory=list)
    addons: List[CheckoutAddon] = Field(default_factory=list)
    promo_code: Optional[str] = None
    success_url: Optional[str] = None
    cancel_url: Optional[str] = None


class CheckoutResult(BaseModel):
    registration_ids: List[str]
    checkout_url: str
    session_id: str


class CheckoutResponse(BaseModel):
    data: CheckoutResult


class DemoConfirmRequest(BaseModel):
    session_id: str


class DemoConfirmResponse(BaseModel):
    confirmed: int
    registration_ids: List[str]


class WebhookResult(BaseModel):
    """Outcome of a processed Stripe event."""

    processed: bool
    event_type: str
    resource_id: Optional[str] = None


class RefundRequest(BaseModel):
    """Body of ``POST /registrations/{id}/refund``; without ``amount_cents`` the rest of the payment is refunded."""

    amount_cents: Optional[int] = Field(default=None, ge=1)
    reason: Optional[str] = None


class RefundResponse(BaseModel):
    refund_id: str
    amount_cents: int
