"""Schemas des operations d'abonnement (annulation, statut)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Schemas API (Pydantic) ---


class CancelSubscriptionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    subscription_id: Optional[str] = Field(None, alias="subscriptionId")


class SubscriptionStatusRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subscription_id: Optional[str] = Field(None, alias="subscriptionId")


class SubscriptionStatusResponse(BaseModel):
    """Reponse de /subscriptions/status."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    is_active: bool = Field(alias="isActive")
    status: str
    current_period_end: Optional[int] = Field(None, alias="currentPeriodEnd")
