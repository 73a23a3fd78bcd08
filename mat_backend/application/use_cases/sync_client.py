"""Use case: Export d'un client MAT vers un contact GoHighLevel."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from mat_backend.application.use_cases.integration_gate import IntegrationGate
from mat_backend.domain.exceptions import ClientNotFound
from mat_backend.domain.models.client import Client
from mat_backend.domain.models.integration import IntegrationCredential
from mat_backend.domain.ports.client_repository_port import ClientRepositoryPort
from mat_backend.domain.ports.crm_client_port import CrmClientFactory
from mat_backend.domain.ports.integration_repository_port import IntegrationRepositoryPort

logger = logging.getLogger(__name__)


class SyncClientUseCase:
    """
    Cree ou met a jour le contact GoHighLevel d'un client.

    Succes: ghl_contact_id + sync_status='synced' persistes sur le client.
    Echec: sync_status='error' persiste, puis l'erreur est relevee.
    """

    def __init__(
        self,
        gate: IntegrationGate,
        client_repo: ClientRepositoryPort,
        integration_repo: IntegrationRepositoryPort,
        crm_client_factory: CrmClientFactory,
        contact_tag: str = "mat-prospect",
    ):
        self._gate = gate
        self._client_repo = client_repo
        self._integration_repo = integration_repo
        self._crm_client_factory = crm_client_factory
        self._contact_tag = contact_tag

    async def execute(self, client_id: str) -> str:
        client = await self._client_repo.get_by_id(client_id)
        if client is None:
            raise ClientNotFound(client_id)

        try:
            credential = await self._gate.require_active(client.company_id)
            contact = self._contact_payload(client, credential)

            crm = self._crm_client_factory(credential)
            try:
                if client.is_synced:
                    ghl_contact_id = await crm.update_contact(client.ghl_contact_id, contact)
                else:
                    ghl_contact_id = await crm.create_contact(contact)
            finally:
                await crm.close()

            synced_at = datetime.now(timezone.utc)
            await self._client_repo.mark_synced(client_id, ghl_contact_id, synced_at)
            await self._integration_repo.touch_last_sync(client.company_id, synced_at)
        except Exception as e:
            logger.error(f"Error syncing client {client_id} to GHL: {e}")
            try:
                await self._client_repo.mark_sync_error(client_id)
            except Exception as status_error:
                logger.error(f"Could not mark client {client_id} as sync error: {status_error}")
            raise

        logger.info(f"Client {client_id} synced to GHL contact {ghl_contact_id}")
        return ghl_contact_id

    def _contact_payload(self, client: Client, credential: IntegrationCredential) -> Dict[str, Any]:
        first_name, last_name = client.split_name()
        contact: Dict[str, Any] = {
            "firstName": first_name,
            "lastName": last_name,
            "tags": [self._contact_tag],
            "locationId": credential.ghl_location_id,
        }
        if client.email:
            contact["email"] = client.email
        if client.phone:
            contact["phone"] = client.phone
        return contact
