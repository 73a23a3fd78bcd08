"""Use case: Creation d'un rendez-vous MAT dans le premier calendrier GoHighLevel."""

import logging

from mat_backend.application.use_cases.integration_gate import IntegrationGate
from mat_backend.domain.exceptions import AppointmentNotFound, ClientNotSynced, NoCalendarsFound
from mat_backend.domain.ports.activity_repository_port import ActivityRepositoryPort
from mat_backend.domain.ports.client_repository_port import ClientRepositoryPort
from mat_backend.domain.ports.crm_client_port import CrmClientFactory

logger = logging.getLogger(__name__)


class CreateAppointmentUseCase:
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

    async def execute(self, appointment_id: str) -> str:
        """Retourne l'ID de l'evenement GoHighLevel, persiste sur le rendez-vous."""
        appointment = await self._activity_repo.get_appointment(appointment_id)
        if appointment is None:
            raise AppointmentNotFound(appointment_id)

        client = await self._client_repo.get_by_id(appointment.client_id) if appointment.client_id else None
        if client is None or not client.is_synced:
            raise ClientNotSynced(appointment.client_id)

        credential = await self._gate.require_active(appointment.company_id)
        crm = self._crm_client_factory(credential)
        try:
            calendars = await crm.list_calendars()
            if not calendars:
                raise NoCalendarsFound()
            event_id = await crm.create_calendar_event(
                calendar_id=calendars[0]["id"],
                contact_id=client.ghl_contact_id,
                start_time=appointment.start_time,
                end_time=appointment.end_time,
                title=appointment.title,
            )
        finally:
            await crm.close()

        await self._activity_repo.set_appointment_event_id(appointment_id, event_id)
        logger.info(f"Appointment {appointment_id} created in GHL as event {event_id}")
        return event_id
