"""Port abstrait pour la passerelle de paiement."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from mat_backend.domain.models.provisioning import VerifiedPaymentEvent


@dataclass
class SubscriptionStatus:
    is_active: bool
    status: str
    current_period_end: Optional[int] = None


class PaymentGatewayPort(ABC):
    """
    Interface pour la passerelle de paiement.

    Implementations possibles:
    - StripeGatewayAdapter (SDK stripe)
    - FakePaymentGateway (pour tests)
    """

    @abstractmethod
    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> VerifiedPaymentEvent:
        """
        Verifie la signature d'un webhook et retourne l'evenement.

        Raises:
            InvalidTriggerPayload: signature absente ou invalide
        """
        ...

    @abstractmethod
    async def cancel_subscription(self, subscription_id: str) -> str:
        """Annule un abonnement et retourne son nouveau statut."""
        ...

    @abstractmethod
    async def get_subscription_status(self, subscription_id: str) -> SubscriptionStatus:
        """Statut d'un abonnement ('not_found' s'il n'existe pas)."""
        ...
