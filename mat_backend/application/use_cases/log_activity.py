"""Use case: Journalisation d'une activite MAT comme note GoHighLevel."""

import logging

from mat_backend.application.use_cases.integration_gate import IntegrationGate
from mat_backend.domain.exceptions import ActivityNotFound, ClientNotSynced
from mat_backend.domain.models.client import Activity
from mat_backend.domain.ports.activity_repository_port import ActivityRepositoryPort
from mat_backend.domain.ports.client_repository_port import ClientRepositoryPort
from mat_backend.domain.ports.crm_client_port import CrmClientFactory

logger = logging.getLogger(__name__)


def format_activity_note(activity: Activity) -> str:
    """Corps de note: [MAT] CALL logged on 2024-05-01, suivi des notes eventuelles."""
    body = f"[MAT] {activity.activity_type.upper()} logged on {activity.activity_date}"
    if activity.notes:
        body += f"\n\n{activity.notes}"
    return body


class LogActivityUseCase:
    """Le client de l'activite doit deja etre lie a un contact GoHighLevel."""

    def __init__(
        self,
        gate: IntegrationGate,
        activity_repo: ActivityRepositoryPort,
        client_repo: ClientRepositoryPort,
        crm_client_factory: CrmClientFactory,
    ):
        self._gate = gate
        self._activity_repo = activity_repo
        self._client_repo = client_repo
        self._crm_client_factory = crm_client_factory

    async def execute(self, activity_id: str) -> None:
        activity = await self._activity_repo.get_activity(activity_id)
        if activity is None:
            raise ActivityNotFound(activity_id)

        client = await self._client_repo.get_by_id(activity.client_id) if activity.client_id else None
        if client is None or not client.is_synced:
            raise ClientNotSynced(activity.client_id)

        credential = await self._gate.require_active(activity.company_id)
        crm = self._crm_client_factory(credential)
        try:
            await crm.add_note(client.ghl_contact_id, format_activity_note(activity))
        finally:
            await crm.close()

        logger.info(f"Activity {activity_id} logged to GHL for contact {client.ghl_contact_id}")
