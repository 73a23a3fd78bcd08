"""Use cases: Connexion, deconnexion et test de l'integration GoHighLevel."""

import logging
from typing import Optional

from mat_backend.application.validation import require_fields
from mat_backend.domain.exceptions import IntegrationNotActive
from mat_backend.domain.models.integration import IntegrationCredential
from mat_backend.domain.ports.crm_client_port import CrmClientFactory
from mat_backend.domain.ports.integration_repository_port import IntegrationRepositoryPort

logger = logging.getLogger(__name__)


class ConnectIntegrationUseCase:
    """
    Enregistre la cle API et la location d'une entreprise, et active l'integration.

    L'upsert sur company_id garantit un seul credential par entreprise:
    une reconnexion remplace la cle precedente.
    """

    def __init__(self, integration_repo: IntegrationRepositoryPort):
        self._integration_repo = integration_repo

    async def execute(
        self,
        company_id: Optional[str],
        api_key: Optional[str],
        location_id: Optional[str],
    ) -> IntegrationCredential:
        require_fields({"companyId": company_id, "apiKey": api_key, "locationId": location_id})

        credential = await self._integration_repo.upsert(
            IntegrationCredential.create(company_id, api_key, location_id)
        )
        logger.info(f"GHL integration connected for company {company_id} (location={location_id})")
        return credential


class DisconnectIntegrationUseCase:
    """Desactive l'integration (soft): le credential est conserve mais inactif."""

    def __init__(self, integration_repo: IntegrationRepositoryPort):
        self._integration_repo = integration_repo

    async def execute(self, company_id: Optional[str]) -> None:
        require_fields({"companyId": company_id})

        if await self._integration_repo.get_by_company(company_id) is None:
            raise IntegrationNotActive(company_id)

        await self._integration_repo.deactivate(company_id)
        logger.info(f"GHL integration disconnected for company {company_id}")


class CheckIntegrationUseCase:
    """
    Teste une cle API en recuperant la location configuree.

    La cle et la location fournies sont prioritaires; a defaut, celles
    enregistrees pour l'entreprise sont utilisees.
    """

    __test__ = False  # pas une classe de test pytest

    def __init__(self, integration_repo: IntegrationRepositoryPort, crm_client_factory: CrmClientFactory):
        self._integration_repo = integration_repo
        self._crm_client_factory = crm_client_factory

    async def execute(
        self,
        company_id: Optional[str],
        api_key: Optional[str] = None,
        location_id: Optional[str] = None,
    ) -> str:
        """Retourne le nom de la location; CrmApiError si la cle est refusee."""
        require_fields({"companyId": company_id})

        stored = await self._integration_repo.get_by_company(company_id)
        api_key = api_key or (stored.ghl_api_key if stored else None)
        location_id = location_id or (stored.ghl_location_id if stored else None)
        require_fields({"apiKey": api_key, "locationId": location_id})

        client = self._crm_client_factory(IntegrationCredential.create(company_id, api_key, location_id))
        try:
            location = await client.get_location()
        finally:
            await client.close()

        name = location.get("name") or "Unknown"
        logger.info(f"GHL connection test succeeded for company {company_id}: {name}")
        return name
