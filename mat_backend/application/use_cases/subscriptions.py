"""Use cases: Annulation et verification d'un abonnement Stripe."""

import logging
from datetime import datetime, timezone
from typing import Optional

from mat_backend.application.validation import require_fields
from mat_backend.domain.exceptions import UserNotFound
from mat_backend.domain.ports.company_repository_port import CompanyRepositoryPort
from mat_backend.domain.ports.notifier_port import NotifierPort
from mat_backend.domain.ports.payment_gateway_port import PaymentGatewayPort, SubscriptionStatus
from mat_backend.domain.ports.user_repository_port import UserRepositoryPort

logger = logging.getLogger(__name__)


class CancelSubscriptionUseCase:
    """
    Annule l'abonnement chez Stripe puis detache l'entreprise de sa facturation.

    L'utilisateur garde l'acces jusqu'a la fin de la periode payee (gere par Stripe).
    """

    def __init__(
        self,
        payment_gateway: PaymentGatewayPort,
        user_repo: UserRepositoryPort,
        company_repo: CompanyRepositoryPort,
        notifier: NotifierPort,
    ):
        self._payment_gateway = payment_gateway
        self._user_repo = user_repo
        self._company_repo = company_repo
        self._notifier = notifier

    async def execute(self, user_id: Optional[str], subscription_id: Optional[str]) -> str:
        require_fields({"userId": user_id, "subscriptionId": subscription_id})

        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFound(user_id)
        company = await self._company_repo.get_by_id(user.company_id)

        status = await self._payment_gateway.cancel_subscription(subscription_id)
        logger.info(f"Subscription {subscription_id} cancelled for user {user_id} (status={status})")

        await self._company_repo.clear_subscription(user.company_id, datetime.now(timezone.utc))

        plan = company.plan if company and company.plan else "Unknown"
        await self._notifier.notify_cancellation(email=user.email, name=user.name, plan=plan)
        return status


class CheckSubscriptionStatusUseCase:
    def __init__(self, payment_gateway: PaymentGatewayPort):
        self._payment_gateway = payment_gateway

    async def execute(self, subscription_id: Optional[str]) -> SubscriptionStatus:
        require_fields({"subscriptionId": subscription_id})
        return await self._payment_gateway.get_subscription_status(subscription_id)
