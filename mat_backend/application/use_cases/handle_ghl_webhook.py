"""Use case: Traitement des webhooks entrants GoHighLevel."""

import logging
from datetime import date
from typing import Any, Dict, Optional

from mat_backend.domain.models.client import Appointment, Client, RevenueRecord
from mat_backend.domain.ports.activity_repository_port import ActivityRepositoryPort
from mat_backend.domain.ports.client_repository_port import ClientRepositoryPort
from mat_backend.domain.ports.webhook_log_port import WebhookLogPort

logger = logging.getLogger(__name__)

APPOINTMENT_EVENTS = ("AppointmentCreate", "AppointmentUpdate")
OPPORTUNITY_EVENTS = ("OpportunityStatusChange", "OpportunityUpdate")
CONTACT_DELETE_EVENT = "ContactDelete"

WON_STATUS = "won"
CUSTOMER_STATUS = "customer"
DELETED_STATUS = "deleted"


def _first(payload: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if payload.get(key):
            return payload[key]
    return default


class HandleGhlWebhookUseCase:
    """
    Journalise chaque webhook dans webhook_logs puis le route selon son type.

    - AppointmentCreate/Update: upsert du rendez-vous par ghl_event_id
    - OpportunityStatusChange/Update: upsert de l'affaire; "won" -> client "customer"
    - ContactDelete: client marque "deleted" et delie du contact

    Un contact inconnu n'est pas une erreur: l'evenement est ignore.
    """

    def __init__(
        self,
        webhook_log: WebhookLogPort,
        client_repo: ClientRepositoryPort,
        activity_repo: ActivityRepositoryPort,
    ):
        self._webhook_log = webhook_log
        self._client_repo = client_repo
        self._activity_repo = activity_repo

    async def execute(self, payload: Dict[str, Any]) -> Optional[str]:
        """Retourne le type d'evenement traite."""
        event_type = _first(payload, "type", "event_type")
        logger.info(f"GHL webhook received: {event_type}")
        log_id = await self._webhook_log.record(event_type, payload)

        try:
            if event_type in APPOINTMENT_EVENTS:
                await self._handle_appointment(payload)
            elif event_type in OPPORTUNITY_EVENTS:
                await self._handle_opportunity(payload)
            elif event_type == CONTACT_DELETE_EVENT:
                await self._handle_contact_delete(payload)
            else:
                logger.info(f"Unhandled GHL event type: {event_type}")
        except Exception as e:
            logger.error(f"GHL webhook processing error ({event_type}): {e}")
            await self._webhook_log.mark_processed(log_id, error_message=str(e))
            raise

        await self._webhook_log.mark_processed(log_id)
        return event_type

    async def _find_client(self, payload: Dict[str, Any]) -> Optional[Client]:
        contact_id = _first(payload, "contact_id", "contactId")
        client = await self._client_repo.get_by_ghl_contact_id(contact_id) if contact_id else None
        if client is None:
            logger.info(f"Client not found for GHL contact: {contact_id}")
        return client

    async def _handle_appointment(self, payload: Dict[str, Any]) -> None:
        client = await self._find_client(payload)
        if client is None:
            return

        event_id = _first(payload, "id", "event_id")
        fields = {
            "title": _first(payload, "title", default="Appointment"),
            "start_time": _first(payload, "start_time", "startTime"),
            "end_time": _first(payload, "end_time", "endTime"),
            "status": _first(payload, "appointment_status", "status", default="scheduled"),
        }

        existing = await self._activity_repo.get_appointment_by_event_id(event_id) if event_id else None
        if existing is not None:
            existing.title = fields["title"]
            existing.start_time = fields["start_time"]
            existing.end_time = fields["end_time"]
            existing.status = fields["status"]
            await self._activity_repo.update_appointment(existing)
            logger.info(f"Updated appointment {existing.appointment_id} from GHL event {event_id}")
            return

        appointment = Appointment.create(
            company_id=client.company_id,
            user_id=client.user_id,
            client_id=client.client_id,
            ghl_event_id=event_id,
            **fields,
        )
        await self._activity_repo.create_appointment(appointment)
        logger.info(f"Created appointment {appointment.appointment_id} for client {client.client_id}")

    async def _handle_opportunity(self, payload: Dict[str, Any]) -> None:
        client = await self._find_client(payload)
        if client is None:
            return

        status = str(payload.get("status") or "").lower()
        record = RevenueRecord(
            company_id=client.company_id,
            client_id=client.client_id,
            user_id=client.user_id,
            ghl_opportunity_id=_first(payload, "id", "opportunity_id"),
            deal_amount=float(_first(payload, "monetary_value", "value", default=0)),
            deal_status=status,
            product_name=_first(payload, "name", default="Deal"),
            closed_date=date.today() if status == WON_STATUS else None,
        )
        await self._client_repo.upsert_revenue(record)

        if status == WON_STATUS:
            await self._client_repo.update_status(client.client_id, CUSTOMER_STATUS)
            logger.info(f"Client {client.client_id} marked as customer (deal won)")

    async def _handle_contact_delete(self, payload: Dict[str, Any]) -> None:
        client = await self._find_client(payload)
        if client is None:
            return
        await self._client_repo.update_status(client.client_id, DELETED_STATUS, unlink=True)
        logger.info(f"Marked client {client.client_id} as deleted")
