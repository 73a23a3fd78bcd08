"""Modeles du workflow de provisioning: evenement de paiement, payload valide, resultats."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError

from mat_backend.domain.exceptions import InvalidTriggerPayload, MissingRequiredField

CHECKOUT_COMPLETED = "checkout.session.completed"

# Champs de metadata obligatoires dans la session Stripe
REQUIRED_SIGNUP_FIELDS = ("email", "password", "fullName", "planName")


@dataclass(frozen=True)
class VerifiedPaymentEvent:
    """
    Evenement de la passerelle de paiement dont la signature a ete verifiee.

    Seul PaymentGatewayPort.verify_webhook() en produit: un dict brut
    n'est jamais accepte par le workflow.
    """

    event_id: str
    event_type: str
    data: Dict[str, Any]


class ValidatedSignupPayload(BaseModel):
    """Variante stricte et interne du payload d'inscription payante."""

    model_config = ConfigDict(frozen=True)

    session_id: Optional[str] = None
    email: EmailStr
    password: str
    full_name: str
    company_name: Optional[str] = None
    phone: Optional[str] = None
    plan_name: str
    customer_id: Optional[str] = None
    subscription_id: Optional[str] = None

    @property
    def display_company_name(self) -> str:
        return self.company_name or self.full_name

    @classmethod
    def from_event(cls, event: Any) -> "ValidatedSignupPayload":
        """
        Construit le payload depuis un evenement checkout.session.completed verifie.

        Raises:
            InvalidTriggerPayload: evenement non verifie, mauvais type ou mal forme
            MissingRequiredField: metadata incomplete
        """
        if not isinstance(event, VerifiedPaymentEvent):
            raise InvalidTriggerPayload("payment event has not been verified")
        if event.event_type != CHECKOUT_COMPLETED:
            raise InvalidTriggerPayload(f"unsupported event type {event.event_type}")

        session = event.data
        metadata = session.get("metadata")
        if not isinstance(metadata, dict):
            raise MissingRequiredField(REQUIRED_SIGNUP_FIELDS)

        missing = [name for name in REQUIRED_SIGNUP_FIELDS if not metadata.get(name)]
        if missing:
            raise MissingRequiredField(missing)

        try:
            return cls(
                session_id=session.get("id"),
                email=metadata["email"],
                password=metadata["password"],
                full_name=metadata["fullName"],
                company_name=metadata.get("company") or None,
                phone=metadata.get("phone") or None,
                plan_name=metadata["planName"],
                customer_id=session.get("customer"),
                subscription_id=session.get("subscription"),
            )
        except ValidationError as e:
            raise InvalidTriggerPayload(str(e)) from e


@dataclass
class ProvisioningResult:
    """Identifiants produits par un provisioning (ou retrouves si deja fait)."""

    user_id: str
    company_id: Optional[str] = None
    already_provisioned: bool = False
    compensations: List[str] = field(default_factory=list)


# --- Schemas API (Pydantic) ---


class TeamMemberCreate(BaseModel):
    """Schema pour la creation d'un membre d'equipe dans une entreprise existante."""

    model_config = ConfigDict(populate_by_name=True)

    company_id: Optional[str] = Field(None, alias="companyId")
    email: Optional[str] = None
    name: Optional[str] = None
    password: Optional[str] = None


class SponsoredAccountCreate(BaseModel):
    """Schema pour la creation d'un compte autonome sponsorise (offert ou Stripe)."""

    model_config = ConfigDict(populate_by_name=True)

    sponsor_user_id: Optional[str] = Field(None, alias="sponsorUserId")
    email: Optional[str] = None
    name: Optional[str] = None
    company_name: Optional[str] = Field(None, alias="companyName")
    password: Optional[str] = None
    billing_type: str = Field("stripe", alias="billingType")
    plan: Optional[str] = None


class DeleteUserRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")


class ProvisioningResponse(BaseModel):
    """Schema de reponse commun aux endpoints de creation de compte."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    user_id: str = Field(alias="userId")
    company_id: Optional[str] = Field(None, alias="companyId")
    email: Optional[str] = None
    name: Optional[str] = None


def parse_signup_event(event: Any) -> ValidatedSignupPayload:
    """Point d'entree du parsing: evenement de paiement verifie -> payload strict."""
    return ValidatedSignupPayload.from_event(event)
