"""Modele domain pour les entreprises (tenant / unite de facturation)."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

GIFTED_SUBSCRIPTION = "gifted"
GHL_BILLING = "ghl"

ACCOUNT_ACTIVE = "active"
ACCOUNT_DISABLED = "disabled"


def max_users_for_plan(plan: Optional[str]) -> int:
    """Nombre de sieges inclus dans un plan: solo=1, team=5, elite/autre=10."""
    normalized = (plan or "").strip().lower()
    if normalized == "solo":
        return 1
    if normalized == "team":
        return 5
    return 10


@dataclass
class Company:
    """
    Entite entreprise du domaine.

    Une entreprise avec un stripe_subscription_id est consideree facturee.
    Une entreprise offerte (is_gifted_account) doit avoir un sponsor.

    Utiliser Company.create_paid() ou Company.create_sponsored() pour creer
    une nouvelle entreprise. Le constructeur direct est reserve a la
    reconstitution depuis la persistence.
    """

    company_id: str
    name: str
    max_users: int = 10
    plan: Optional[str] = None
    subscription_tier: Optional[str] = None
    owner_id: Optional[str] = None
    stripe_customer_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    sponsored_by_user_id: Optional[str] = None
    is_gifted_account: bool = False
    gifted_at: Optional[datetime] = None
    account_status: str = ACCOUNT_ACTIVE
    cancellation_requested_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if self.is_gifted_account and not self.sponsored_by_user_id:
            raise ValueError("A gifted company must reference its sponsor")

    @property
    def is_billed(self) -> bool:
        return self.stripe_subscription_id is not None

    @classmethod
    def create_paid(
        cls,
        name: str,
        owner_id: str,
        plan: str,
        stripe_customer_id: Optional[str],
        stripe_subscription_id: Optional[str],
    ) -> "Company":
        """Factory method: entreprise creee par un paiement Stripe reussi."""
        return cls(
            company_id=str(uuid.uuid4()),
            name=name,
            owner_id=owner_id,
            plan=plan,
            subscription_tier=plan,
            max_users=max_users_for_plan(plan),
            stripe_customer_id=stripe_customer_id,
            stripe_subscription_id=stripe_subscription_id,
        )

    @classmethod
    def create_sponsored(
        cls,
        name: str,
        sponsor_user_id: str,
        billing_type: str,
        plan: Optional[str],
    ) -> "Company":
        """
        Factory method: entreprise creee par un sponsor.

        billing_type == "ghl" -> compte offert (subscription_tier="gifted",
        gifted_at renseigne). Sinon le plan fait office de tier.
        """
        gifted = billing_type == GHL_BILLING
        return cls(
            company_id=str(uuid.uuid4()),
            name=name,
            plan=plan,
            max_users=max_users_for_plan(plan),
            subscription_tier=GIFTED_SUBSCRIPTION if gifted else plan,
            sponsored_by_user_id=sponsor_user_id,
            is_gifted_account=gifted,
            gifted_at=datetime.now(timezone.utc) if gifted else None,
            account_status=ACCOUNT_ACTIVE,
        )
