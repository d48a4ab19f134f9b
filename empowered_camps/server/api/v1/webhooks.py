"""
Payment Webhook Endpoint.

Receives Stripe events. The raw request body is verified against the
``Stripe-Signature`` header before any event is applied.
"""

from typing import Optional

from fastapi import APIRouter, Header, Request

from empowered_camps.core.models.io.registrations import WebhookResult
from empowered_camps.server.services.deps import PaymentDep

router = APIRouter()


@router.post(
    "/stripe",
    response_model=WebhookResult,
    summary="Stripe Webhook",
    description=(
        "Apply checkout completion, payment intent and refund events to registrations. "
        "Unknown event types are acknowledged without changes."
    ),
    response_description="Whether the event was processed, its type and the affected resource.",
    responses={400: {"description": "Webhook signature verification failed"}},
)
async def stripe_webhook(
    request: Request,
    service: PaymentDep,
    stripe_signature: Optional[str] = Header(default=None, alias="Stripe-Signature"),
) -> WebhookResult:
    payload = await request.body()
    return WebhookResult(**await service.handle_webhook(payload, stripe_signature))
