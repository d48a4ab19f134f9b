"""In-memory Stripe gateway used by the server tests."""

import json
from typing import Any, Dict, List

from empowered_camps.core.errors import BadRequestError, PaymentProviderError
from empowered_camps.server.core.config import StripeConfig
from empowered_camps.server.services.stripe_gateway import StripeGateway
from test.settings import test_settings

VALID_SIGNATURE = "t=1,v1=valid"


class FakeStripeGateway(StripeGateway):
    """Records checkout sessions and serves canned listings instead of calling Stripe."""

    def __init__(self, configured: bool = True) -> None:
        super().__init__(
            StripeConfig(
                secret_key=test_settings.stripe.secret_key if configured else "",
                webhook_secret=test_settings.stripe.webhook_secret,
            )
        )
        self.created_sessions: List[Dict[str, Any]] = []
        self.completed_sessions: List[Dict[str, Any]] = []
        self.payment_intents: Dict[str, Dict[str, Any]] = {}
        self.refunds: List[Dict[str, Any]] = []
        self.fail_checkout = False

    def unconfigure(self) -> None:
        self.config = StripeConfig(secret_key="", webhook_secret=self.config.webhook_secret)

    async def create_checkout_session(self, line_items, success_url, cancel_url, metadata, customer_email=None):
        if self.fail_checkout:
            raise PaymentProviderError("Failed to create checkout session")
        session_id = f"cs_test_{len(self.created_sessions) + 1}"
        self.created_sessions.append(
            {
                "id": session_id,
                "line_items": line_items,
                "success_url": success_url,
                "cancel_url": cancel_url,
                "metadata": metadata,
                "customer_email": customer_email,
            }
        )
        return {"id": session_id, "url": f"https://checkout.stripe.test/{session_id}"}

    async def list_completed_checkout_sessions(self):
        return list(self.completed_sessions)

    async def retrieve_payment_intent(self, payment_intent_id):
        return self.payment_intents[payment_intent_id]

    async def create_refund(self, payment_intent_id, amount_cents=None, metadata=None):
        refund = {
            "id": f"re_test_{len(self.refunds) + 1}",
            "payment_intent": payment_intent_id,
            "amount": amount_cents,
            "metadata": metadata,
            "status": "succeeded",
        }
        self.refunds.append(refund)
        return refund

    def verify_webhook(self, payload, signature):
        if signature != VALID_SIGNATURE:
            raise BadRequestError("Webhook signature verification failed")
        return json.loads(payload)
