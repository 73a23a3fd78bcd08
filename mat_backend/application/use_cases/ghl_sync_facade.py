"""
Points d'entree de synchronisation appeles par l'interface.

Chaque point d'entree passe d'abord par l'IntegrationGate. Une integration
absente ou inactive est un cas normal: retour False / 0 sans aucun appel
au CRM, sans lever d'exception.
"""

import logging
from typing import Optional

from mat_backend.application.use_cases.create_appointment import CreateAppointmentUseCase
from mat_backend.application.use_cases.import_contacts import ImportContactsUseCase
from mat_backend.application.use_cases.integration_gate import IntegrationGate
from mat_backend.application.use_cases.log_activity import LogActivityUseCase
from mat_backend.application.use_cases.sync_client import SyncClientUseCase
from mat_backend.application.use_cases.sync_pending_clients import SyncPendingClientsUseCase
from mat_backend.domain.models.sync import ImportSummary
from mat_backend.domain.ports.activity_repository_port import ActivityRepositoryPort
from mat_backend.domain.ports.client_repository_port import ClientRepositoryPort

logger = logging.getLogger(__name__)


class GhlSyncFacade:
    def __init__(
        self,
        gate: IntegrationGate,
        client_repo: ClientRepositoryPort,
        activity_repo: ActivityRepositoryPort,
        sync_client: SyncClientUseCase,
        log_activity: LogActivityUseCase,
        create_appointment: CreateAppointmentUseCase,
        sync_pending: SyncPendingClientsUseCase,
        import_contacts: ImportContactsUseCase,
    ):
        self._gate = gate
        self._client_repo = client_repo
        self._activity_repo = activity_repo
        self._sync_client = sync_client
        self._log_activity = log_activity
        self._create_appointment = create_appointment
        self._sync_pending = sync_pending
        self._import_contacts = import_contacts

    async def sync_client(self, client_id: str) -> bool:
        client = await self._client_repo.get_by_id(client_id)
        if client is None:
            logger.warning(f"Client {client_id} not found, nothing to sync")
            return False
        if not await self._gate.is_active(client.company_id):
            return False
        try:
            await self._sync_client.execute(client_id)
        except Exception as e:
            logger.error(f"Client sync failed for {client_id}: {e}")
            return False
        return True

    async def log_activity(self, activity_id: str) -> bool:
        activity = await self._activity_repo.get_activity(activity_id)
        if activity is None:
            logger.warning(f"Activity {activity_id} not found, nothing to log")
            return False
        if not await self._gate.is_active(activity.company_id):
            return False
        try:
            await self._log_activity.execute(activity_id)
        except Exception as e:
            logger.error(f"Activity log failed for {activity_id}: {e}")
            return False
        return True

    async def create_appointment(self, appointment_id: str) -> bool:
        appointment = await self._activity_repo.get_appointment(appointment_id)
        if appointment is None:
            logger.warning(f"Appointment {appointment_id} not found, nothing to create")
            return False
        if not await self._gate.is_active(appointment.company_id):
            return False
        try:
            await self._create_appointment.execute(appointment_id)
        except Exception as e:
            logger.error(f"Appointment creation failed for {appointment_id}: {e}")
            return False
        return True

    async def sync_pending_clients(self, company_id: str) -> int:
        if not await self._gate.is_active(company_id):
            return 0
        summary = await self._sync_pending.execute(company_id)
        return summary.synced

    async def import_all_contacts(self, company_id: str, user_id: Optional[str] = None) -> ImportSummary:
        if not await self._gate.is_active(company_id):
            return ImportSummary()
        return await self._import_contacts.execute(company_id, user_id)
