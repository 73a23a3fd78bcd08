"""Unit tests for HTTP adapters, using httpx.MockTransport instead of the network."""

import hashlib
import hmac
import json
import time

import httpx
import pytest

from mat_backend.domain.exceptions import CrmApiError, DuplicateAccount, InvalidTriggerPayload
from mat_backend.infrastructure.adapters.ghl_client import GhlClient
from mat_backend.infrastructure.adapters.http_notifier_adapter import HttpNotifierAdapter
from mat_backend.infrastructure.adapters.stripe_gateway_adapter import StripeGatewayAdapter
from mat_backend.infrastructure.adapters.supabase_identity_adapter import (
    SupabaseAdminError,
    SupabaseIdentityAdapter,
)


class Recorder:
    """Handler MockTransport: enregistre les requetes et rejoue des reponses fixes."""

    def __init__(self, *responses: httpx.Response):
        self.requests = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]


class TestGhlClient:
    def client(self, recorder: Recorder) -> GhlClient:
        return GhlClient(
            "secret-key", "loc-1", base_url="https://ghl.test", transport=httpx.MockTransport(recorder)
        )

    async def test_create_contact_sends_auth_headers(self) -> None:
        recorder = Recorder(httpx.Response(201, json={"contact": {"id": "ghl-1"}}))
        ghl = self.client(recorder)

        contact_id = await ghl.create_contact({"firstName": "Jane"})
        await ghl.close()

        request = recorder.requests[0]
        assert contact_id == "ghl-1"
        assert request.url.path == "/contacts/"
        assert request.headers["Authorization"] == "Bearer secret-key"
        assert request.headers["Version"] == "2021-07-28"
        assert json.loads(request.content) == {"firstName": "Jane", "locationId": "loc-1"}

    async def test_update_contact_drops_location(self) -> None:
        recorder = Recorder(httpx.Response(200, json={"contact": {"id": "ghl-1"}}))
        ghl = self.client(recorder)

        await ghl.update_contact("ghl-1", {"firstName": "Jane", "locationId": "loc-1"})

        assert recorder.requests[0].method == "PUT"
        assert json.loads(recorder.requests[0].content) == {"firstName": "Jane"}

    async def test_list_contacts_pagination_params(self) -> None:
        recorder = Recorder(httpx.Response(200, json={"contacts": [{"id": "c3", "firstName": "Al"}]}))
        ghl = self.client(recorder)

        contacts = await ghl.list_contacts(limit=100, start_after_id="c2")

        params = recorder.requests[0].url.params
        assert (params["locationId"], params["limit"], params["startAfterId"]) == ("loc-1", "100", "c2")
        assert contacts[0].contact_id == "c3"

    async def test_transactions_query(self) -> None:
        recorder = Recorder(httpx.Response(200, json={"data": [{"_id": "t1", "amount": 10, "status": "succeeded"}]}))
        ghl = self.client(recorder)

        transactions = await ghl.list_transactions(limit=100, offset=200)

        params = recorder.requests[0].url.params
        assert params["altType"] == "location"
        assert params["offset"] == "200"
        assert transactions[0].amount == 10

    async def test_error_status_raises(self) -> None:
        ghl = self.client(Recorder(httpx.Response(401, text="Invalid JWT")))

        with pytest.raises(CrmApiError) as exc_info:
            await ghl.list_calendars()

        assert exc_info.value.status_code == 401
        assert "Invalid JWT" in str(exc_info.value)

    async def test_network_error_raises(self) -> None:
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        ghl = GhlClient("k", "loc-1", base_url="https://ghl.test", transport=httpx.MockTransport(unreachable))

        with pytest.raises(CrmApiError) as exc_info:
            await ghl.get_location()
        assert exc_info.value.status_code == 0


class TestSupabaseIdentityAdapter:
    def adapter(self, recorder: Recorder) -> SupabaseIdentityAdapter:
        return SupabaseIdentityAdapter(
            base_url="https://project.supabase.test",
            service_role_key="service-key",
            transport=httpx.MockTransport(recorder),
        )

    async def test_create_identity(self) -> None:
        recorder = Recorder(httpx.Response(200, json={"id": "u1", "email": "a@b.co", "email_confirmed_at": "2024-01-01T00:00:00Z"}))

        identity = await self.adapter(recorder).create_identity("a@b.co", "pw123456", True, {"name": "A"})

        request = recorder.requests[0]
        assert request.url.path == "/auth/v1/admin/users"
        assert request.headers["apikey"] == "service-key"
        assert json.loads(request.content)["email_confirm"] is True
        assert identity.identity_id == "u1"
        assert identity.email_confirmed is True

    async def test_existing_email_is_duplicate(self) -> None:
        recorder = Recorder(httpx.Response(422, json={"error_code": "email_exists", "msg": "exists"}))

        with pytest.raises(DuplicateAccount):
            await self.adapter(recorder).create_identity("a@b.co", "pw123456", False)

    async def test_other_errors_are_provider_errors(self) -> None:
        recorder = Recorder(httpx.Response(500, json={"msg": "database error"}))

        with pytest.raises(SupabaseAdminError) as exc_info:
            await self.adapter(recorder).delete_identity("u1")
        assert str(exc_info.value) == "database error"

    async def test_find_by_email_is_case_insensitive(self) -> None:
        recorder = Recorder(httpx.Response(200, json={"users": [{"id": "u1", "email": "Owner@Acme.com"}]}))

        identity = await self.adapter(recorder).find_by_email("owner@acme.com")

        assert identity.identity_id == "u1"


class TestHttpNotifierAdapter:
    async def test_unconfigured_notifier_sends_nothing(self) -> None:
        recorder = Recorder(httpx.Response(200))
        notifier = HttpNotifierAdapter(
            resend_api_key="", email_to="", lead_webhook_url="", transport=httpx.MockTransport(recorder)
        )

        await notifier.notify_new_subscription("a@b.co", "A", "solo", "Acme")
        await notifier.push_lead("a@b.co", "A", "Acme", None, "solo")

        assert recorder.requests == []

    async def test_failures_are_not_propagated(self) -> None:
        recorder = Recorder(httpx.Response(503, text="unavailable"))
        notifier = HttpNotifierAdapter(
            resend_api_key="re_key",
            email_to="ops@acme.com, sales@acme.com",
            lead_webhook_url="https://hooks.test/lead",
            transport=httpx.MockTransport(recorder),
        )

        await notifier.notify_cancellation("a@b.co", "A", "team")
        await notifier.push_lead("a@b.co", "A", "Acme", "555", "team")

        email, lead = recorder.requests
        assert json.loads(email.content)["to"] == ["ops@acme.com", "sales@acme.com"]
        assert json.loads(lead.content)["source"] == "TrueXpanse MAT"


class TestStripeGatewayAdapter:
    SECRET = "whsec_test"

    def sign(self, payload: bytes, secret: str = SECRET) -> str:
        timestamp = int(time.time())
        signed = f"{timestamp}.{payload.decode()}".encode()
        digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
        return f"t={timestamp},v1={digest}"

    def payload(self) -> bytes:
        return json.dumps({
            "id": "evt_1",
            "object": "event",
            "type": "checkout.session.completed",
            "data": {"object": {"id": "cs_1", "metadata": {"email": "a@b.co"}}},
        }).encode()

    def test_valid_signature(self) -> None:
        gateway = StripeGatewayAdapter(api_key="sk_test", webhook_secret=self.SECRET)
        payload = self.payload()

        event = gateway.verify_webhook(payload, self.sign(payload))

        assert event.event_type == "checkout.session.completed"
        assert event.data["id"] == "cs_1"

    def test_wrong_secret_is_rejected(self) -> None:
        gateway = StripeGatewayAdapter(api_key="sk_test", webhook_secret=self.SECRET)
        payload = self.payload()

        with pytest.raises(InvalidTriggerPayload):
            gateway.verify_webhook(payload, self.sign(payload, secret="whsec_other"))

    def test_missing_signature_is_rejected(self) -> None:
        gateway = StripeGatewayAdapter(api_key="sk_test", webhook_secret=self.SECRET)

        with pytest.raises(InvalidTriggerPayload):
            gateway.verify_webhook(self.payload(), None)
