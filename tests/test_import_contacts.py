"""Unit tests for the GoHighLevel contact import and financial derivation."""

from datetime import date

import pytest

from mat_backend.application.use_cases.import_contacts import ImportContactsUseCase
from mat_backend.domain.exceptions import IntegrationNotActive
from mat_backend.domain.models.client import Client
from mat_backend.domain.models.sync import CrmContact, CrmTransaction, derive_financials
from tests.conftest import COMPANY_ID


def contact(contact_id, **fields):
    return {"id": contact_id, "firstName": "First", "lastName": contact_id, **fields}


def transaction(contact_id, amount, source="Invoice", status="succeeded", created_at="2024-03-05T10:00:00Z"):
    return {
        "_id": f"tx-{contact_id}-{amount}",
        "contactId": contact_id,
        "amount": amount,
        "entitySourceName": source,
        "status": status,
        "createdAt": created_at,
    }


@pytest.fixture
def use_case(gate, client_repo, integration_repo, crm_factory) -> ImportContactsUseCase:
    return ImportContactsUseCase(gate, client_repo, integration_repo, crm_factory, page_size=2)


class TestImportContacts:
    async def test_imports_contacts_with_revenue(self, use_case, active_integration, crm, client_repo) -> None:
        crm.contacts = [contact("c1", email="c1@x.com", companyName="C1 Inc")]
        crm.transactions = [
            transaction("c1", 100, source="Monthly Subscription", created_at="2024-02-01T00:00:00Z"),
            transaction("c1", 50, source="Setup fee"),
            transaction("c1", 999, status="failed"),
        ]

        summary = await use_case.execute(COMPANY_ID, user_id="owner-1")

        assert (summary.imported, summary.skipped, summary.total_found) == (1, 0, 1)
        client = await client_repo.get_by_ghl_contact_id("c1", COMPANY_ID)
        assert client.user_id == "owner-1"
        assert client.monthly_contract_value == 100
        assert client.initial_amount_collected == 50
        assert client.stage == "Closed"
        assert client.close_date == date(2024, 2, 1)
        assert client.sync_status == "synced"
        assert client.email == "c1@x.com"

    async def test_existing_link_is_never_modified(self, use_case, active_integration, crm, client_repo) -> None:
        existing = client_repo.add(
            Client.create(COMPANY_ID, "user-1", "Kept Name", ghl_contact_id="c1", stage="Negotiation")
        )
        crm.contacts = [contact("c1"), contact("c2")]
        crm.transactions = [transaction("c1", 500)]

        summary = await use_case.execute(COMPANY_ID)

        assert (summary.imported, summary.skipped) == (1, 1)
        assert client_repo.clients[existing.client_id].name == "Kept Name"
        assert client_repo.clients[existing.client_id].stage == "Negotiation"
        assert len(client_repo.clients) == 2

    async def test_failed_insert_does_not_abort_batch(self, use_case, active_integration, crm, client_repo) -> None:
        crm.contacts = [contact(f"c{n}") for n in range(1, 6)]
        client_repo.fail_create_for = {"c3"}

        summary = await use_case.execute(COMPANY_ID)

        assert (summary.imported, summary.skipped, summary.total_found) == (4, 1, 5)
        assert await client_repo.get_by_ghl_contact_id("c3") is None

    async def test_contacts_are_paginated_by_cursor(self, use_case, active_integration, crm) -> None:
        crm.contacts = [contact(f"c{n}") for n in range(1, 6)]

        await use_case.execute(COMPANY_ID)

        cursors = [call[2] for call in crm.calls if call[0] == "list_contacts"]
        assert cursors == [None, "c2", "c4"]
        assert crm.closed == 1

    async def test_transaction_errors_keep_contacts(self, use_case, active_integration, crm, client_repo) -> None:
        crm.contacts = [contact("c1")]
        crm.transactions = [transaction("c1", 10), transaction("c1", 20), transaction("c1", 30)]
        crm.fail_transactions_at = 2

        summary = await use_case.execute(COMPANY_ID)

        assert summary.imported == 1
        client = await client_repo.get_by_ghl_contact_id("c1")
        assert client.initial_amount_collected == 30

    async def test_contact_without_id_is_skipped(self, use_case, active_integration, crm) -> None:
        crm.contacts = [{"firstName": "No", "lastName": "Id"}]

        summary = await use_case.execute(COMPANY_ID)

        assert (summary.imported, summary.skipped) == (0, 1)

    async def test_updates_last_sync(self, use_case, active_integration, crm, integration_repo) -> None:
        await use_case.execute(COMPANY_ID)
        assert COMPANY_ID in integration_repo.last_sync

    async def test_requires_active_integration(self, use_case, crm) -> None:
        with pytest.raises(IntegrationNotActive):
            await use_case.execute(COMPANY_ID)
        assert crm.calls == []


class TestDeriveFinancials:
    def test_no_transactions(self) -> None:
        financials = derive_financials([], today=date(2024, 6, 1))

        assert financials.stage == "New"
        assert financials.total_revenue == 0
        assert financials.close_date == date(2024, 6, 1)

    def test_recurring_and_one_time_split(self) -> None:
        transactions = [
            CrmTransaction.from_api(transaction("c1", 100, source="Recurring plan")),
            CrmTransaction.from_api(transaction("c1", 50)),
        ]

        financials = derive_financials(transactions)

        assert financials.monthly_contract_value == 100
        assert financials.annual_contract_value == 1200
        assert financials.one_time_revenue == 50
        assert financials.total_revenue == 150

    def test_amount_received_is_in_cents(self) -> None:
        parsed = CrmTransaction.from_api({"amount": 99, "amount_received": 4500, "status": "success"})

        assert parsed.amount == 45
        assert parsed.is_successful


def test_contact_display_name_fallbacks() -> None:
    assert CrmContact.from_api({"id": "1", "contactName": "Full Name"}).display_name == "Full Name"
    assert CrmContact.from_api({"id": "1", "firstName": "Ann"}).display_name == "Ann"
    assert CrmContact.from_api({"id": "1"}).display_name == "Unknown Contact"
