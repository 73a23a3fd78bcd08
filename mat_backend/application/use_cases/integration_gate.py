"""Garde commune a toutes les operations de synchronisation GoHighLevel."""

import logging

from mat_backend.domain.exceptions import IntegrationNotActive
from mat_backend.domain.models.integration import IntegrationCredential
from mat_backend.domain.ports.integration_repository_port import IntegrationRepositoryPort

logger = logging.getLogger(__name__)


class IntegrationGate:
    """
    Verifie qu'un credential GoHighLevel present ET actif existe pour l'entreprise.

    is_active() sert aux points d'entree qui no-op silencieusement,
    require_active() aux use cases qui ont besoin du credential.
    """

    def __init__(self, integration_repo: IntegrationRepositoryPort):
        self._integration_repo = integration_repo

    async def is_active(self, company_id: str) -> bool:
        credential = await self._integration_repo.get_active(company_id)
        if credential is None:
            logger.info(f"GHL integration not active for company {company_id}, skipping sync")
            return False
        return True

    async def require_active(self, company_id: str) -> IntegrationCredential:
        credential = await self._integration_repo.get_active(company_id)
        if credential is None:
            raise IntegrationNotActive(company_id)
        return credential
