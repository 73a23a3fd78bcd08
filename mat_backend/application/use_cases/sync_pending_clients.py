"""Use case: Synchronisation en masse des clients non synchronises d'une entreprise."""

import logging

from mat_backend.application.use_cases.sync_client import SyncClientUseCase
from mat_backend.domain.models.sync import BulkSyncSummary
from mat_backend.domain.ports.client_repository_port import ClientRepositoryPort

logger = logging.getLogger(__name__)


class SyncPendingClientsUseCase:
    """
    Tente SyncClientUseCase sur chaque client dont sync_status est NULL,
    'pending' ou 'error'. Un echec est journalise et la boucle continue.
    """

    def __init__(self, client_repo: ClientRepositoryPort, sync_client: SyncClientUseCase):
        self._client_repo = client_repo
        self._sync_client = sync_client

    async def execute(self, company_id: str) -> BulkSyncSummary:
        clients = await self._client_repo.list_pending_sync(company_id)
        summary = BulkSyncSummary(attempted=len(clients))

        for client in clients:
            try:
                await self._sync_client.execute(client.client_id)
                summary.synced += 1
            except Exception as e:
                logger.warning(f"Failed to sync client {client.client_id}: {e}")

        logger.info(f"Bulk sync for company {company_id}: {summary.synced}/{summary.attempted} synced")
        return summary
