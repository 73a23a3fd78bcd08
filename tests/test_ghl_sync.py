"""Unit tests for client export, activity notes, appointments and the sync facade."""

import pytest

from mat_backend.application.use_cases.create_appointment import CreateAppointmentUseCase
from mat_backend.application.use_cases.ghl_sync_facade import GhlSyncFacade
from mat_backend.application.use_cases.import_contacts import ImportContactsUseCase
from mat_backend.application.use_cases.log_activity import LogActivityUseCase, format_activity_note
from mat_backend.application.use_cases.sync_client import SyncClientUseCase
from mat_backend.application.use_cases.sync_pending_clients import SyncPendingClientsUseCase
from mat_backend.domain.exceptions import ClientNotSynced, CrmApiError, NoCalendarsFound
from mat_backend.domain.models.client import Activity, Appointment, Client
from tests.conftest import COMPANY_ID


@pytest.fixture
def sync_client(gate, client_repo, integration_repo, crm_factory) -> SyncClientUseCase:
    return SyncClientUseCase(gate, client_repo, integration_repo, crm_factory)


@pytest.fixture
def log_activity(gate, activity_repo, client_repo, crm_factory) -> LogActivityUseCase:
    return LogActivityUseCase(gate, activity_repo, client_repo, crm_factory)


@pytest.fixture
def create_appointment(gate, activity_repo, client_repo, crm_factory) -> CreateAppointmentUseCase:
    return CreateAppointmentUseCase(gate, activity_repo, client_repo, crm_factory)


@pytest.fixture
def facade(
    gate, client_repo, activity_repo, integration_repo, crm_factory, sync_client, log_activity, create_appointment
) -> GhlSyncFacade:
    return GhlSyncFacade(
        gate=gate,
        client_repo=client_repo,
        activity_repo=activity_repo,
        sync_client=sync_client,
        log_activity=log_activity,
        create_appointment=create_appointment,
        sync_pending=SyncPendingClientsUseCase(client_repo, sync_client),
        import_contacts=ImportContactsUseCase(gate, client_repo, integration_repo, crm_factory),
    )


@pytest.fixture
def synced_client(client_repo) -> Client:
    return client_repo.add(
        Client.create(COMPANY_ID, "user-1", "Sam Synced", ghl_contact_id="ghl-7", sync_status="synced")
    )


class TestSyncClient:
    async def test_creates_contact_and_links_client(
        self, sync_client, active_integration, unsynced_client, crm, client_repo, integration_repo
    ) -> None:
        ghl_id = await sync_client.execute(unsynced_client.client_id)

        name, payload = crm.calls[0]
        assert name == "create_contact"
        assert payload == {
            "firstName": "Jane",
            "lastName": "Doe",
            "tags": ["mat-prospect"],
            "locationId": "loc-1",
            "email": "jane@example.com",
            "phone": "555-0100",
        }
        client = client_repo.clients[unsynced_client.client_id]
        assert client.ghl_contact_id == ghl_id
        assert client.sync_status == "synced"
        assert client.last_synced_to_ghl is not None
        assert COMPANY_ID in integration_repo.last_sync

    async def test_single_name_is_used_twice(self, sync_client, active_integration, client_repo, crm) -> None:
        client = client_repo.add(Client.create(COMPANY_ID, "user-1", "Cher"))

        await sync_client.execute(client.client_id)

        payload = crm.calls[0][1]
        assert (payload["firstName"], payload["lastName"]) == ("Cher", "Cher")
        assert "email" not in payload

    async def test_updates_existing_contact(self, sync_client, active_integration, synced_client, crm) -> None:
        await sync_client.execute(synced_client.client_id)

        assert crm.calls[0][0] == "update_contact"
        assert crm.calls[0][1] == "ghl-7"

    async def test_api_error_marks_client(self, sync_client, active_integration, unsynced_client, crm, client_repo) -> None:
        crm.fail_with = CrmApiError(401, "Unauthorized")

        with pytest.raises(CrmApiError):
            await sync_client.execute(unsynced_client.client_id)

        assert client_repo.clients[unsynced_client.client_id].sync_status == "error"
        assert client_repo.clients[unsynced_client.client_id].ghl_contact_id is None
        assert crm.closed == 1

    async def test_status_write_failure_keeps_api_error(
        self, sync_client, active_integration, unsynced_client, crm, client_repo
    ) -> None:
        crm.fail_with = CrmApiError(503, "GHL down")

        async def store_unavailable(client_id):
            raise RuntimeError("store unavailable")

        client_repo.mark_sync_error = store_unavailable

        with pytest.raises(CrmApiError) as exc_info:
            await sync_client.execute(unsynced_client.client_id)

        assert exc_info.value.status_code == 503


class TestActivityAndAppointment:
    async def test_activity_note(self, log_activity, active_integration, synced_client, activity_repo, crm) -> None:
        activity_repo.activities["a1"] = Activity(
            "a1", COMPANY_ID, "user-1", synced_client.client_id, "call", "2024-05-01", notes="Left voicemail"
        )

        await log_activity.execute("a1")

        assert crm.calls == [("add_note", "ghl-7", "[MAT] CALL logged on 2024-05-01\n\nLeft voicemail")]

    async def test_activity_for_unsynced_client(self, log_activity, active_integration, unsynced_client, activity_repo, crm) -> None:
        activity_repo.activities["a1"] = Activity("a1", COMPANY_ID, "user-1", unsynced_client.client_id, "email", "2024-05-01")

        with pytest.raises(ClientNotSynced):
            await log_activity.execute("a1")
        assert crm.calls == []

    def test_note_without_notes(self) -> None:
        activity = Activity("a1", COMPANY_ID, None, None, "sms", "2024-05-02")
        assert format_activity_note(activity) == "[MAT] SMS logged on 2024-05-02"

    async def test_appointment_uses_first_calendar(
        self, create_appointment, active_integration, synced_client, activity_repo, crm
    ) -> None:
        crm.calendars = [{"id": "cal-a"}, {"id": "cal-b"}]
        activity_repo.appointments["ap1"] = Appointment(
            "ap1", COMPANY_ID, "user-1", synced_client.client_id, "Demo", "2024-05-01T10:00:00Z", "2024-05-01T11:00:00Z"
        )

        event_id = await create_appointment.execute("ap1")

        assert crm.calls[-1] == ("create_calendar_event", "cal-a", "ghl-7", "Demo")
        assert activity_repo.appointments["ap1"].ghl_event_id == event_id

    async def test_no_calendars(self, create_appointment, active_integration, synced_client, activity_repo, crm) -> None:
        crm.calendars = []
        activity_repo.appointments["ap1"] = Appointment(
            "ap1", COMPANY_ID, "user-1", synced_client.client_id, "Demo", "t0", "t1"
        )

        with pytest.raises(NoCalendarsFound):
            await create_appointment.execute("ap1")
        assert crm.closed == 1


class TestGhlSyncFacade:
    async def test_inactive_integration_makes_no_crm_call(
        self, facade, integration_repo, active_integration, unsynced_client, synced_client, activity_repo, crm, crm_factory
    ) -> None:
        active_integration.is_active = False
        activity_repo.activities["a1"] = Activity("a1", COMPANY_ID, None, synced_client.client_id, "call", "2024-05-01")
        activity_repo.appointments["ap1"] = Appointment(
            "ap1", COMPANY_ID, None, synced_client.client_id, "Demo", "t0", "t1"
        )

        assert await facade.sync_client(unsynced_client.client_id) is False
        assert await facade.log_activity("a1") is False
        assert await facade.create_appointment("ap1") is False
        assert await facade.sync_pending_clients(COMPANY_ID) == 0
        summary = await facade.import_all_contacts(COMPANY_ID)

        assert (summary.imported, summary.skipped, summary.total_found) == (0, 0, 0)
        assert crm.calls == []
        assert crm_factory.credentials == []
        assert unsynced_client.sync_status is None

    async def test_missing_integration_makes_no_crm_call(self, facade, unsynced_client, crm) -> None:
        assert await facade.sync_client(unsynced_client.client_id) is False
        assert crm.calls == []

    async def test_sync_failure_returns_false(self, facade, active_integration, unsynced_client, crm) -> None:
        crm.fail_with = CrmApiError(500, "boom")

        assert await facade.sync_client(unsynced_client.client_id) is False

    async def test_unknown_entities_return_false(self, facade, active_integration) -> None:
        assert await facade.sync_client("missing") is False
        assert await facade.log_activity("missing") is False
        assert await facade.create_appointment("missing") is False

    async def test_bulk_sync_continues_past_failures(
        self, facade, active_integration, client_repo, synced_client, crm
    ) -> None:
        pending = client_repo.add(Client.create(COMPANY_ID, "user-1", "Pat Pending", sync_status="pending"))
        errored = client_repo.add(Client.create(COMPANY_ID, "user-1", "Eve Error", sync_status="error"))
        client_repo.add(Client.create("other-company", "user-9", "Not Mine"))

        original_create = crm.create_contact

        async def flaky_create(contact):
            if contact["firstName"] == "Pat":
                raise CrmApiError(422, "invalid phone")
            return await original_create(contact)

        crm.create_contact = flaky_create

        synced = await facade.sync_pending_clients(COMPANY_ID)

        assert synced == 1
        assert client_repo.clients[pending.client_id].sync_status == "error"
        assert client_repo.clients[errored.client_id].sync_status == "synced"
