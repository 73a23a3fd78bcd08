"""Adapter de la passerelle de paiement: SDK Stripe."""

import asyncio
import json
import logging
from typing import Optional

import stripe

from mat_backend.config import settings
from mat_backend.domain.exceptions import InvalidTriggerPayload, SubscriptionError
from mat_backend.domain.models.provisioning import VerifiedPaymentEvent
from mat_backend.domain.ports.payment_gateway_port import PaymentGatewayPort, SubscriptionStatus

logger = logging.getLogger(__name__)

ACTIVE_SUBSCRIPTION_STATUSES = ("active", "trialing")


class StripeGatewayAdapter(PaymentGatewayPort):
    """
    Verification des webhooks et gestion des abonnements Stripe.

    Le SDK est synchrone: les appels reseau passent par asyncio.to_thread().
    """

    def __init__(
        self,
        api_key: str = settings.STRIPE_SECRET_KEY,
        webhook_secret: str = settings.STRIPE_WEBHOOK_SECRET,
    ):
        self._api_key = api_key
        self._webhook_secret = webhook_secret

    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> VerifiedPaymentEvent:
        if not signature:
            raise InvalidTriggerPayload("missing Stripe-Signature header")

        # Verifier la signature AVANT de parser
        try:
            stripe.Webhook.construct_event(payload, signature, self._webhook_secret)
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Stripe webhook signature invalid: {e}")
            raise InvalidTriggerPayload("invalid webhook signature") from e
        except ValueError as e:
            raise InvalidTriggerPayload(f"malformed webhook body: {e}") from e

        event = json.loads(payload)
        session = (event.get("data") or {}).get("object") or {}
        logger.info(f"Stripe webhook verified: {event.get('type')} ({event.get('id')})")
        return VerifiedPaymentEvent(
            event_id=event.get("id", ""),
            event_type=event.get("type", ""),
            data=session,
        )

    async def cancel_subscription(self, subscription_id: str) -> str:
        try:
            subscription = await asyncio.to_thread(
                stripe.Subscription.cancel, subscription_id, api_key=self._api_key
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe cancellation failed for {subscription_id}: {e}")
            raise SubscriptionError(e.user_message or str(e), code=e.code) from e
        return subscription["status"]

    async def get_subscription_status(self, subscription_id: str) -> SubscriptionStatus:
        try:
            subscription = await asyncio.to_thread(
                stripe.Subscription.retrieve, subscription_id, api_key=self._api_key
            )
        except stripe.StripeError as e:
            if e.code == "resource_missing":
                return SubscriptionStatus(is_active=False, status="not_found")
            logger.error(f"Stripe status check failed for {subscription_id}: {e}")
            raise SubscriptionError(e.user_message or str(e), code=e.code) from e

        status = subscription["status"]
        return SubscriptionStatus(
            is_active=status in ACTIVE_SUBSCRIPTION_STATUSES,
            status=status,
            current_period_end=subscription.get("current_period_end"),
        )
