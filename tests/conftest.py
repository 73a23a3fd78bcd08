"""Pytest configuration and shared fixtures."""

import pytest

from mat_backend.application.use_cases.integration_gate import IntegrationGate
from mat_backend.domain.models.client import Client
from mat_backend.domain.models.company import Company
from mat_backend.domain.models.integration import IntegrationCredential
from tests.fakes import (
    CrmFactory,
    FakeCrmClient,
    FakePaymentGateway,
    InMemoryActivityRepository,
    InMemoryClientRepository,
    InMemoryCompanyRepository,
    InMemoryIdentityProvider,
    InMemoryIntegrationRepository,
    InMemoryUserRepository,
    InMemoryWebhookLog,
    RecordingNotifier,
)

COMPANY_ID = "company-1"


@pytest.fixture
def identity_provider() -> InMemoryIdentityProvider:
    return InMemoryIdentityProvider()


@pytest.fixture
def company_repo() -> InMemoryCompanyRepository:
    return InMemoryCompanyRepository()


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def client_repo() -> InMemoryClientRepository:
    return InMemoryClientRepository()


@pytest.fixture
def integration_repo() -> InMemoryIntegrationRepository:
    return InMemoryIntegrationRepository()


@pytest.fixture
def activity_repo() -> InMemoryActivityRepository:
    return InMemoryActivityRepository()


@pytest.fixture
def webhook_log() -> InMemoryWebhookLog:
    return InMemoryWebhookLog()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def payment_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def crm() -> FakeCrmClient:
    return FakeCrmClient()


@pytest.fixture
def crm_factory(crm: FakeCrmClient) -> CrmFactory:
    return CrmFactory(crm)


@pytest.fixture
def gate(integration_repo: InMemoryIntegrationRepository) -> IntegrationGate:
    return IntegrationGate(integration_repo)


@pytest.fixture
def active_integration(integration_repo: InMemoryIntegrationRepository) -> IntegrationCredential:
    """Credential GoHighLevel actif pour COMPANY_ID."""
    credential = IntegrationCredential.create(COMPANY_ID, "ghl-key", "loc-1")
    integration_repo.credentials[COMPANY_ID] = credential
    return credential


@pytest.fixture
def team_company(company_repo: InMemoryCompanyRepository) -> Company:
    company = Company(company_id=COMPANY_ID, name="Acme", plan="team", max_users=5)
    company_repo.companies[company.company_id] = company
    return company


@pytest.fixture
def unsynced_client(client_repo: InMemoryClientRepository) -> Client:
    return client_repo.add(
        Client.create(COMPANY_ID, "user-1", "Jane Doe", email="jane@example.com", phone="555-0100")
    )
