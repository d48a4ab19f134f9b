"""
Registration Checkout Endpoints.

Parents (signed in or guests) register one or more campers for a camp and
are sent to payment. Demo checkout sessions, used when Stripe is not
configured, are settled through the demo confirmation endpoint. Admins
refund paid registrations through Stripe.
"""

from fastapi import APIRouter

from empowered_camps.core.models.io.registrations import (
    CheckoutRequest,
    CheckoutResponse,
    CheckoutResult,
    DemoConfirmRequest,
    DemoConfirmResponse,
    RefundRequest,
    RefundResponse,
)
from empowered_camps.server.auth import AdminUser, OptionalUser, scoped_tenant_id
from empowered_camps.server.services.deps import CheckoutDep, PaymentDep

router = APIRouter()


@router.post(
    "/checkout",
    response_model=CheckoutResponse,
    summary="Start Registration Checkout",
    description=(
        "Create pending registrations for every camper and a payment checkout session. "
        "Authentication is optional; guests are matched to a parent profile by email."
    ),
    response_description="Registration ids and the URL to redirect the parent to.",
    responses={
        400: {"description": "Missing fields or not enough spots"},
        404: {"description": "Camp not found"},
        500: {"description": "Checkout session could not be created"},
    },
)
async def checkout(request: CheckoutRequest, user: OptionalUser, service: CheckoutDep) -> CheckoutResponse:
    """
    Register campers and start payment.

    Pricing applies the early-bird price, sibling discounts, a promo code on
    the first camper, add-ons and sales tax. When the checkout session cannot
    be created the new registrations are cancelled.
    """
    result = await service.checkout(request, user)
    return CheckoutResponse(data=CheckoutResult(**result))


@router.post(
    "/demo-confirm",
    response_model=DemoConfirmResponse,
    summary="Confirm Demo Payment",
    description="Mark the registrations of a demo checkout session as paid.",
    responses={400: {"description": "Not a demo session"}, 404: {"description": "Registration not found"}},
)
async def confirm_demo_payment(request: DemoConfirmRequest, service: PaymentDep) -> DemoConfirmResponse:
    registration_ids = await service.confirm_demo_payment(request.session_id)
    return DemoConfirmResponse(confirmed=len(registration_ids), registration_ids=registration_ids)


@router.post(
    "/{registration_id}/refund",
    response_model=RefundResponse,
    summary="Refund Registration",
    description=(
        "Refund a paid registration through Stripe, fully or by ``amount_cents``. The registration "
        "is updated when Stripe confirms the refund through the webhook."
    ),
    responses={
        400: {"description": "Stripe not configured, nothing paid, or amount too large"},
        404: {"description": "Registration not found"},
        500: {"description": "Stripe rejected the refund"},
    },
)
async def refund_registration(
    registration_id: str, request: RefundRequest, user: AdminUser, service: PaymentDep
) -> RefundResponse:
    result = await service.refund_registration(
        registration_id,
        request.amount_cents,
        request.reason,
        tenant_id=scoped_tenant_id(user, None),
        user_id=user.id,
    )
    return RefundResponse(**result)
