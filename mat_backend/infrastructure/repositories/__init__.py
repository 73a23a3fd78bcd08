from mat_backend.infrastructure.repositories.activity_repository import PostgresActivityRepository
from mat_backend.infrastructure.repositories.client_repository import PostgresClientRepository
from mat_backend.infrastructure.repositories.company_repository import PostgresCompanyRepository
from mat_backend.infrastructure.repositories.integration_repository import PostgresIntegrationRepository
from mat_backend.infrastructure.repositories.user_repository import PostgresUserRepository
from mat_backend.infrastructure.repositories.webhook_log_repository import PostgresWebhookLogRepository

__all__ = [
    "PostgresActivityRepository",
    "PostgresClientRepository",
    "PostgresCompanyRepository",
    "PostgresIntegrationRepository",
    "PostgresUserRepository",
    "PostgresWebhookLogRepository",
]
