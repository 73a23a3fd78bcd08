"""Unit tests for incoming GoHighLevel webhook handling."""

from datetime import date

import pytest

from mat_backend.application.use_cases.handle_ghl_webhook import HandleGhlWebhookUseCase
from mat_backend.domain.models.client import Client
from tests.conftest import COMPANY_ID


@pytest.fixture
def use_case(webhook_log, client_repo, activity_repo) -> HandleGhlWebhookUseCase:
    return HandleGhlWebhookUseCase(webhook_log, client_repo, activity_repo)


@pytest.fixture
def linked_client(client_repo) -> Client:
    return client_repo.add(Client.create(COMPANY_ID, "user-1", "Lee Linked", ghl_contact_id="ghl-1"))


class TestHandleGhlWebhook:
    async def test_appointment_create_then_update(self, use_case, linked_client, activity_repo, webhook_log) -> None:
        payload = {
            "type": "AppointmentCreate",
            "id": "evt-1",
            "contactId": "ghl-1",
            "title": "Kickoff",
            "startTime": "2024-05-01T10:00:00Z",
            "endTime": "2024-05-01T11:00:00Z",
        }
        await use_case.execute(payload)
        await use_case.execute({**payload, "type": "AppointmentUpdate", "title": "Kickoff (moved)"})

        appointments = list(activity_repo.appointments.values())
        assert len(appointments) == 1
        assert appointments[0].title == "Kickoff (moved)"
        assert appointments[0].client_id == linked_client.client_id
        assert all(entry["processed"] for entry in webhook_log.entries.values())

    async def test_won_opportunity_marks_customer(self, use_case, linked_client, client_repo) -> None:
        await use_case.execute({
            "type": "OpportunityStatusChange",
            "id": "opp-1",
            "contact_id": "ghl-1",
            "status": "Won",
            "monetary_value": 2500,
            "name": "Annual plan",
        })

        record = client_repo.revenue["opp-1"]
        assert record.deal_amount == 2500
        assert record.deal_status == "won"
        assert record.closed_date == date.today()
        assert client_repo.clients[linked_client.client_id].status == "customer"

    async def test_open_opportunity_keeps_status(self, use_case, linked_client, client_repo) -> None:
        await use_case.execute({"type": "OpportunityUpdate", "id": "opp-2", "contactId": "ghl-1", "status": "open"})

        assert client_repo.revenue["opp-2"].closed_date is None
        assert client_repo.clients[linked_client.client_id].status is None

    async def test_contact_delete_unlinks(self, use_case, linked_client, client_repo) -> None:
        await use_case.execute({"type": "ContactDelete", "contactId": "ghl-1"})

        client = client_repo.clients[linked_client.client_id]
        assert client.status == "deleted"
        assert client.ghl_contact_id is None

    async def test_unknown_contact_is_ignored(self, use_case, client_repo, webhook_log) -> None:
        event_type = await use_case.execute({"type": "ContactDelete", "contactId": "nobody"})

        assert event_type == "ContactDelete"
        assert list(webhook_log.entries.values())[0]["processed"] is True

    async def test_processing_error_is_logged(self, use_case, linked_client, webhook_log) -> None:
        with pytest.raises(ValueError):
            await use_case.execute({
                "type": "OpportunityUpdate",
                "id": "opp-3",
                "contactId": "ghl-1",
                "monetary_value": "not-a-number",
            })

        entry = list(webhook_log.entries.values())[0]
        assert entry["processed"] is False
        assert entry["error"]
