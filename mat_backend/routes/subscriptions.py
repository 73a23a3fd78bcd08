"""Routes de gestion d'abonnement Stripe."""

import logging

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from mat_backend.application.use_cases.subscriptions import (
    CancelSubscriptionUseCase,
    CheckSubscriptionStatusUseCase,
)
from mat_backend.domain.exceptions import ProvisioningError, SubscriptionError
from mat_backend.domain.models.subscription import (
    CancelSubscriptionRequest,
    SubscriptionStatusRequest,
    SubscriptionStatusResponse,
)
from mat_backend.infrastructure.container import Container
from mat_backend.routes.errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post("/cancel")
@inject
async def cancel_subscription(
    request: CancelSubscriptionRequest,
    use_case: CancelSubscriptionUseCase = Depends(Provide[Container.cancel_subscription]),
):
    """Annule l'abonnement; l'acces reste ouvert jusqu'a la fin de la periode."""
    try:
        status = await use_case.execute(request.user_id, request.subscription_id)
    except (ProvisioningError, SubscriptionError) as e:
        raise to_http_exception(e)

    return {"success": True, "message": "Subscription cancelled successfully", "status": status}


@router.post("/status", response_model=SubscriptionStatusResponse)
@inject
async def subscription_status(
    request: SubscriptionStatusRequest,
    use_case: CheckSubscriptionStatusUseCase = Depends(Provide[Container.check_subscription_status]),
):
    try:
        result = await use_case.execute(request.subscription_id)
    except (ProvisioningError, SubscriptionError) as e:
        raise to_http_exception(e)

    return SubscriptionStatusResponse(
        is_active=result.is_active,
        status=result.status,
        current_period_end=result.current_period_end,
    )
