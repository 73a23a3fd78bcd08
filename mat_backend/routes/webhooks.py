"""Routes des webhooks entrants: paiement Stripe et evenements GoHighLevel."""

import logging
from typing import Any, Dict, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Body, Depends, Header, HTTPException, Request

from mat_backend.application.use_cases.handle_ghl_webhook import HandleGhlWebhookUseCase
from mat_backend.application.use_cases.provision_paid_signup import ProvisionPaidSignupUseCase
from mat_backend.domain.exceptions import ProvisioningError
from mat_backend.domain.models.provisioning import CHECKOUT_COMPLETED, parse_signup_event
from mat_backend.domain.ports.payment_gateway_port import PaymentGatewayPort
from mat_backend.infrastructure.container import Container
from mat_backend.routes.errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/payment-succeeded")
@inject
async def payment_succeeded(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
    payment_gateway: PaymentGatewayPort = Depends(Provide[Container.payment_gateway]),
    use_case: ProvisionPaidSignupUseCase = Depends(Provide[Container.provision_paid_signup]),
):
    """
    Webhook Stripe: provisionne le compte apres checkout.session.completed.

    Les autres types d'evenements sont acquittes sans traitement.
    Une livraison en double renvoie les IDs deja provisionnes.
    """
    payload = await request.body()
    try:
        event = payment_gateway.verify_webhook(payload, stripe_signature)
        if event.event_type != CHECKOUT_COMPLETED:
            logger.info(f"Ignoring payment event {event.event_type}")
            return {"success": True, "received": True}

        result = await use_case.execute(parse_signup_event(event))
    except ProvisioningError as e:
        logger.error(f"Payment webhook failed: {e}")
        raise to_http_exception(e)

    return {
        "success": True,
        "received": True,
        "userId": result.user_id,
        "companyId": result.company_id,
        "alreadyProvisioned": result.already_provisioned,
    }


@router.post("/ghl")
@inject
async def ghl_webhook(
    payload: Dict[str, Any] = Body(...),
    use_case: HandleGhlWebhookUseCase = Depends(Provide[Container.handle_ghl_webhook]),
):
    """Webhook GoHighLevel: rendez-vous, opportunites, suppressions de contacts."""
    try:
        event_type = await use_case.execute(payload)
    except Exception as e:
        logger.exception("GHL webhook processing error")
        raise HTTPException(status_code=500, detail=str(e))

    return {"success": True, "eventType": event_type}
