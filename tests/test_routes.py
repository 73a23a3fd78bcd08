"""API tests: FastAPI TestClient with container providers overridden by in-memory fakes."""

import json

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from mat_backend.app import create_app
from mat_backend.domain.models.user import UserRecord
from mat_backend.infrastructure.container import Container
from tests.conftest import COMPANY_ID


@pytest.fixture
def container(
    identity_provider,
    company_repo,
    user_repo,
    client_repo,
    integration_repo,
    activity_repo,
    webhook_log,
    payment_gateway,
    notifier,
    crm_factory,
):
    container = Container()
    container.identity_provider.override(providers.Object(identity_provider))
    container.company_repository.override(providers.Object(company_repo))
    container.user_repository.override(providers.Object(user_repo))
    container.client_repository.override(providers.Object(client_repo))
    container.integration_repository.override(providers.Object(integration_repo))
    container.activity_repository.override(providers.Object(activity_repo))
    container.webhook_log.override(providers.Object(webhook_log))
    container.payment_gateway.override(providers.Object(payment_gateway))
    container.notifier.override(providers.Object(notifier))
    container.crm_client_factory.override(providers.Object(crm_factory))
    yield container
    container.unwire()


@pytest.fixture
def api(container) -> TestClient:
    return TestClient(create_app(container))


def stripe_event(event_type="checkout.session.completed", **metadata) -> str:
    return json.dumps({
        "id": "evt_1",
        "type": event_type,
        "data": {"object": {
            "id": "cs_1",
            "customer": "cus_1",
            "subscription": "sub_1",
            "metadata": {
                "email": "owner@acme.com",
                "password": "s3cret!!",
                "fullName": "Olivia Owner",
                "planName": "solo",
                **metadata,
            },
        }},
    })


class TestPaymentWebhook:
    def test_get_is_not_allowed(self, api) -> None:
        response = api.get("/webhooks/payment-succeeded")

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}

    def test_missing_signature(self, api, company_repo) -> None:
        response = api.post("/webhooks/payment-succeeded", content=stripe_event())

        assert response.status_code == 400
        assert company_repo.companies == {}

    def test_provisions_account(self, api, company_repo) -> None:
        response = api.post(
            "/webhooks/payment-succeeded", content=stripe_event(), headers={"Stripe-Signature": "valid"}
        )

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["received"] is True
        assert company_repo.companies[body["companyId"]].max_users == 1

    def test_duplicate_delivery(self, api, company_repo) -> None:
        headers = {"Stripe-Signature": "valid"}
        first = api.post("/webhooks/payment-succeeded", content=stripe_event(), headers=headers).json()
        second = api.post("/webhooks/payment-succeeded", content=stripe_event(), headers=headers).json()

        assert second["alreadyProvisioned"] is True
        assert second["userId"] == first["userId"]
        assert len(company_repo.companies) == 1

    def test_other_events_are_acknowledged(self, api, identity_provider) -> None:
        response = api.post(
            "/webhooks/payment-succeeded",
            content=stripe_event(event_type="invoice.paid"),
            headers={"Stripe-Signature": "valid"},
        )

        assert response.status_code == 200
        assert identity_provider.identities == {}

    def test_incomplete_metadata(self, api) -> None:
        response = api.post(
            "/webhooks/payment-succeeded",
            content=stripe_event(planName=""),
            headers={"Stripe-Signature": "valid"},
        )

        assert response.status_code == 400
        assert response.json()["required"] == ["planName"]

    def test_step_failure_reports_compensations(self, api, user_repo) -> None:
        user_repo.fail_create = RuntimeError("insert failed")

        response = api.post(
            "/webhooks/payment-succeeded", content=stripe_event(), headers={"Stripe-Signature": "valid"}
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to create user record"
        assert body["compensations"] == ["company", "identity"]


class TestAccountRoutes:
    member = {"companyId": COMPANY_ID, "email": "rep@acme.com", "name": "Sam Rep", "password": "hunter22"}

    def test_team_member_created(self, api, team_company) -> None:
        response = api.post("/accounts/team-member", json=self.member)

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["companyId"] == COMPANY_ID
        assert body["email"] == "rep@acme.com"

    def test_missing_fields(self, api) -> None:
        response = api.post("/accounts/team-member", json={"companyId": COMPANY_ID})

        assert response.status_code == 400
        assert response.json()["required"] == ["email", "name", "password"]

    def test_unknown_company(self, api) -> None:
        assert api.post("/accounts/team-member", json=self.member).status_code == 404

    def test_duplicate_email(self, api, team_company, user_repo) -> None:
        user_repo.users["u1"] = UserRecord("u1", "rep@acme.com", "Sam", COMPANY_ID)

        assert api.post("/accounts/team-member", json=self.member).status_code == 409

    def test_malformed_body(self, api) -> None:
        response = api.post(
            "/accounts/team-member", content="{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert "error" in response.json()

    def test_store_failure_returns_json_error(self, container, team_company, user_repo) -> None:
        async def connection_lost(email):
            raise RuntimeError("db connection lost")

        user_repo.email_exists = connection_lost
        api = TestClient(create_app(container), raise_server_exceptions=False)

        response = api.post("/accounts/team-member", json=self.member)

        assert response.status_code == 500
        assert response.json() == {"error": "db connection lost"}

    def test_standalone_account(self, api, company_repo) -> None:
        response = api.post("/accounts/standalone", json={
            "sponsorUserId": "sponsor-1",
            "email": "new@solo.com",
            "name": "Nina New",
            "companyName": "Solo LLC",
            "password": "hunter22",
            "billingType": "ghl",
            "plan": "solo",
        })

        assert response.status_code == 200
        assert company_repo.companies[response.json()["companyId"]].is_gifted_account is True


class TestIntegrationAndSyncRoutes:
    def test_connect_then_disconnect(self, api, integration_repo) -> None:
        connected = api.post(
            "/integrations/ghl/connect", json={"companyId": COMPANY_ID, "apiKey": "k", "locationId": "loc-1"}
        )
        disconnected = api.post("/integrations/ghl/disconnect", json={"companyId": COMPANY_ID})

        assert connected.json()["isActive"] is True
        assert disconnected.status_code == 200
        assert integration_repo.credentials[COMPANY_ID].is_active is False

    def test_disconnect_unknown(self, api) -> None:
        assert api.post("/integrations/ghl/disconnect", json={"companyId": COMPANY_ID}).status_code == 404

    def test_sync_without_integration_is_a_noop(self, api, unsynced_client, crm) -> None:
        response = api.post(f"/sync/clients/{unsynced_client.client_id}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "synced": False}
        assert crm.calls == []

    def test_sync_with_integration(self, api, active_integration, unsynced_client, client_repo) -> None:
        response = api.post(f"/sync/clients/{unsynced_client.client_id}")

        assert response.json()["synced"] is True
        assert client_repo.clients[unsynced_client.client_id].sync_status == "synced"


def test_health(api) -> None:
    assert api.get("/health").json()["status"] == "ok"
