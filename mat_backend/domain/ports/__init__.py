"""
Ports (Interfaces) - Contrats que les adapters doivent implementer.

Les ports definissent les abstractions dont depend la couche application.
"""

from mat_backend.domain.ports.activity_repository_port import ActivityRepositoryPort
from mat_backend.domain.ports.client_repository_port import ClientRepositoryPort
from mat_backend.domain.ports.company_repository_port import CompanyRepositoryPort
from mat_backend.domain.ports.crm_client_port import CrmClientFactory, CrmClientPort
from mat_backend.domain.ports.identity_provider_port import IdentityProviderPort
from mat_backend.domain.ports.integration_repository_port import IntegrationRepositoryPort
from mat_backend.domain.ports.notifier_port import NotifierPort
from mat_backend.domain.ports.payment_gateway_port import PaymentGatewayPort, SubscriptionStatus
from mat_backend.domain.ports.user_repository_port import UserRepositoryPort
from mat_backend.domain.ports.webhook_log_port import WebhookLogPort

__all__ = [
    "ActivityRepositoryPort",
    "ClientRepositoryPort",
    "CompanyRepositoryPort",
    "CrmClientFactory",
    "CrmClientPort",
    "IdentityProviderPort",
    "IntegrationRepositoryPort",
    "NotifierPort",
    "PaymentGatewayPort",
    "SubscriptionStatus",
    "UserRepositoryPort",
    "WebhookLogPort",
]
