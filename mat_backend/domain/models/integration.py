"""Modele domain pour l'integration GoHighLevel d'une entreprise."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class IntegrationCredential:
    """
    Cle API + location GoHighLevel d'une entreprise.

    Au plus un credential actif par entreprise: l'ecriture se fait
    toujours par upsert sur company_id.
    """

    integration_id: str
    company_id: str
    ghl_api_key: str
    ghl_location_id: Optional[str]
    is_active: bool = True
    last_sync_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(cls, company_id: str, ghl_api_key: str, ghl_location_id: Optional[str]) -> "IntegrationCredential":
        return cls(
            integration_id=str(uuid.uuid4()),
            company_id=company_id,
            ghl_api_key=ghl_api_key,
            ghl_location_id=ghl_location_id,
            is_active=True,
        )


# --- Schemas API (Pydantic) ---


class IntegrationConnect(BaseModel):
    """Schema pour connecter (ou reconnecter) GoHighLevel a une entreprise."""

    model_config = ConfigDict(populate_by_name=True)

    company_id: Optional[str] = Field(None, alias="companyId")
    api_key: Optional[str] = Field(None, alias="apiKey")
    location_id: Optional[str] = Field(None, alias="locationId")


class IntegrationCompanyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    company_id: Optional[str] = Field(None, alias="companyId")


class IntegrationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    company_id: str = Field(alias="companyId")
    is_active: bool = Field(alias="isActive")
    location_name: Optional[str] = Field(None, alias="locationName")
