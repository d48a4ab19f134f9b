"""
Stripe Gateway.

Thin wrapper over the official ``stripe`` SDK. Every call the platform makes
to Stripe goes through this class, and results are normalized to plain dicts
so services never depend on SDK object types. Tests replace the gateway via
the ``get_stripe_gateway`` dependency.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import stripe

from empowered_camps.core.errors import BadRequestError, PaymentProviderError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.server.core.config import StripeConfig, settings

logger = get_logger(__name__)

LIST_PAGE_SIZE = 100


def _metadata(obj: Any) -> Dict[str, str]:
    if not obj:
        return {}
    return {str(key): str(value) for key, value in obj.items()}


def _object_id(value: Any) -> Optional[str]:
    """Expandable fields arrive either as an id string or as the expanded object."""
    if value is None or isinstance(value, str):
        return value
    return getattr(value, "id", None)


class StripeGateway:
    """Checkout sessions, payment intents, refunds and webhook verification."""

    def __init__(self, config: StripeConfig) -> None:
        self.config = config
        self._client: Optional[stripe.StripeClient] = None

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    @property
    def currency(self) -> str:
        return self.config.currency.lower()

    @property
    def client(self) -> stripe.StripeClient:
        if not self.is_configured:
            raise BadRequestError("Stripe is not configured")
        if self._client is None:
            self._client = stripe.StripeClient(self.config.secret_key, http_client=stripe.HTTPXClient())
        return self._client

    async def create_checkout_session(
        self,
        line_items: List[Dict[str, Any]],
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
        customer_email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a one-off payment Checkout Session.

        The same metadata is attached to the session and to its payment intent
        so refunds and failed-payment events can be traced back to
        registrations.

        Returns:
            ``{"id": ..., "url": ...}``
        """
        params: Dict[str, Any] = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": line_items,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata,
            "payment_intent_data": {"metadata": metadata},
        }
        if customer_email:
            params["customer_email"] = customer_email
        try:
            session = await self.client.checkout.sessions.create_async(params=params)
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session creation failed: {e}")
            raise PaymentProviderError("Failed to create checkout session") from e
        return {"id": session.id, "url": session.url}

    async def list_completed_checkout_sessions(self) -> List[Dict[str, Any]]:
        """All completed Checkout Sessions, following ``starting_after`` pagination."""
        sessions: List[Dict[str, Any]] = []
        starting_after: Optional[str] = None
        while True:
            params: Dict[str, Any] = {"status": "complete", "limit": LIST_PAGE_SIZE}
            if starting_after:
                params["starting_after"] = starting_after
            try:
                page = await self.client.checkout.sessions.list_async(params=params)
            except stripe.StripeError as e:
                logger.error(f"Stripe checkout session listing failed: {e}")
                raise PaymentProviderError("Failed to list checkout sessions") from e

            for item in page.data:
                details = getattr(item, "customer_details", None)
                sessions.append(
                    {
                        "id": item.id,
                        "amount_total": item.amount_total or 0,
                        "payment_intent": _object_id(item.payment_intent),
                        "metadata": _metadata(item.metadata),
                        "customer_email": item.customer_email or (details.email if details else None),
                        "created": item.created,
                    }
                )
            if not page.has_more or not page.data:
                break
            starting_after = page.data[-1].id
        return sessions

    async def retrieve_payment_intent(self, payment_intent_id: str) -> Dict[str, Any]:
        try:
            intent = await self.client.payment_intents.retrieve_async(payment_intent_id)
        except stripe.StripeError as e:
            logger.error(f"Stripe payment intent lookup failed for {payment_intent_id}: {e}")
            raise PaymentProviderError("Failed to retrieve payment intent") from e
        return {"id": intent.id, "amount": intent.amount, "metadata": _metadata(intent.metadata)}

    async def create_refund(
        self,
        payment_intent_id: str,
        amount_cents: Optional[int] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Refund part or all of a payment intent; ``amount_cents=None`` refunds what is left.

        Returns:
            ``{"id": ..., "amount": ..., "status": ...}``
        """
        params: Dict[str, Any] = {"payment_intent": payment_intent_id, "reason": "requested_by_customer"}
        if amount_cents is not None:
            params["amount"] = amount_cents
        if metadata:
            params["metadata"] = metadata
        try:
            refund = await self.client.refunds.create_async(params=params)
        except stripe.StripeError as e:
            logger.error(f"Stripe refund failed for {payment_intent_id}: {e}")
            raise PaymentProviderError("Failed to process refund") from e
        return {"id": refund.id, "amount": refund.amount, "status": refund.status}

    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """
        Verify the ``Stripe-Signature`` header and return the decoded event.

        Raises:
            BadRequestError: Missing or invalid signature, or an unparseable payload.
        """
        try:
            stripe.WebhookSignature.verify_header(
                payload.decode("utf-8"), signature or "", self.config.webhook_secret
            )
            return json.loads(payload)
        except (stripe.SignatureVerificationError, ValueError) as e:
            logger.warning(f"Webhook signature verification failed: {e}")
            raise BadRequestError("Webhook signature verification failed") from e


def get_stripe_gateway() -> StripeGateway:
    """Dependency provider for the Stripe gateway."""
    return StripeGateway(settings.stripe)
