"""
Container DI declaratif avec dependency-injector.

Ce module utilise la librairie dependency-injector pour:
- Providers declaratifs (Singleton, Factory, Object)
- Override pour tests sans modifier le code
- Wiring automatique avec @inject dans les routes

Documentation: https://python-dependency-injector.ets-labs.org/
"""

import logging

from dependency_injector import containers, providers

from mat_backend.application.saga import RetryPolicy
from mat_backend.application.use_cases.create_appointment import CreateAppointmentUseCase
from mat_backend.application.use_cases.create_sponsored_account import CreateSponsoredAccountUseCase
from mat_backend.application.use_cases.create_team_member import CreateTeamMemberUseCase
from mat_backend.application.use_cases.delete_user import DeleteUserUseCase
from mat_backend.application.use_cases.ghl_sync_facade import GhlSyncFacade
from mat_backend.application.use_cases.handle_ghl_webhook import HandleGhlWebhookUseCase
from mat_backend.application.use_cases.import_contacts import ImportContactsUseCase
from mat_backend.application.use_cases.integration_gate import IntegrationGate
from mat_backend.application.use_cases.log_activity import LogActivityUseCase
from mat_backend.application.use_cases.manage_integration import (
    ConnectIntegrationUseCase,
    DisconnectIntegrationUseCase,
    CheckIntegrationUseCase,
)
from mat_backend.application.use_cases.provision_paid_signup import ProvisionPaidSignupUseCase
from mat_backend.application.use_cases.subscriptions import (
    CancelSubscriptionUseCase,
    CheckSubscriptionStatusUseCase,
)
from mat_backend.application.use_cases.sync_client import SyncClientUseCase
from mat_backend.application.use_cases.sync_pending_clients import SyncPendingClientsUseCase
from mat_backend.config import settings
from mat_backend.infrastructure.adapters.ghl_client import create_ghl_client
from mat_backend.infrastructure.adapters.http_notifier_adapter import HttpNotifierAdapter
from mat_backend.infrastructure.adapters.stripe_gateway_adapter import StripeGatewayAdapter
from mat_backend.infrastructure.adapters.supabase_identity_adapter import SupabaseIdentityAdapter
from mat_backend.infrastructure.repositories.activity_repository import PostgresActivityRepository
from mat_backend.infrastructure.repositories.client_repository import PostgresClientRepository
from mat_backend.infrastructure.repositories.company_repository import PostgresCompanyRepository
from mat_backend.infrastructure.repositories.integration_repository import PostgresIntegrationRepository
from mat_backend.infrastructure.repositories.user_repository import PostgresUserRepository
from mat_backend.infrastructure.repositories.webhook_log_repository import PostgresWebhookLogRepository

logger = logging.getLogger(__name__)


class Container(containers.DeclarativeContainer):
    """
    Container DI declaratif.

    Usage Production:
        container = Container()
        use_case = container.create_team_member()

    Usage Tests (override sans modifier le code):
        with container.identity_provider.override(InMemoryIdentityProvider()):
            use_case = container.create_team_member()
            # Le use case utilise le fake

    Changer d'implementation:
        # Pour utiliser un autre fournisseur d'identite:
        # 1. Creer un adapter qui implemente IdentityProviderPort
        # 2. Changer: identity_provider = providers.Singleton(MonAdapter)
    """

    # Configuration du wiring automatique
    wiring_config = containers.WiringConfiguration(
        modules=[
            "mat_backend.routes.webhooks",
            "mat_backend.routes.accounts",
            "mat_backend.routes.subscriptions",
            "mat_backend.routes.integrations",
            "mat_backend.routes.sync",
        ]
    )

    # =========================================================================
    # REPOSITORIES (PostgreSQL)
    # =========================================================================

    company_repository = providers.Singleton(PostgresCompanyRepository)
    user_repository = providers.Singleton(PostgresUserRepository)
    client_repository = providers.Singleton(PostgresClientRepository)
    integration_repository = providers.Singleton(PostgresIntegrationRepository)
    activity_repository = providers.Singleton(PostgresActivityRepository)
    webhook_log = providers.Singleton(PostgresWebhookLogRepository)

    # =========================================================================
    # ADAPTERS EXTERNES
    # =========================================================================

    identity_provider = providers.Singleton(SupabaseIdentityAdapter)
    """Supabase GoTrue (API admin, service role key)."""

    payment_gateway = providers.Singleton(StripeGatewayAdapter)

    notifier = providers.Singleton(HttpNotifierAdapter)
    """Emails Resend + webhook de leads GoHighLevel (best-effort)."""

    crm_client_factory = providers.Object(create_ghl_client)
    """
    Fabrique de client GoHighLevel (un client par credential).

    Usage:
        crm = container.crm_client_factory()(credential)
    """

    # =========================================================================
    # PROVISIONING
    # =========================================================================

    retry_policy = providers.Singleton(
        RetryPolicy,
        max_attempts=settings.COMPENSATION_MAX_ATTEMPTS,
        backoff_seconds=settings.COMPENSATION_BACKOFF_SECONDS,
    )
    """Politique de rejeu des compensations (1 tentative = best-effort)."""

    provision_paid_signup = providers.Factory(
        ProvisionPaidSignupUseCase,
        identity_provider=identity_provider,
        company_repo=company_repository,
        user_repo=user_repository,
        notifier=notifier,
        timeout=settings.EXTERNAL_CALL_TIMEOUT_SECONDS,
        retry_policy=retry_policy,
    )

    create_team_member = providers.Factory(
        CreateTeamMemberUseCase,
        identity_provider=identity_provider,
        company_repo=company_repository,
        user_repo=user_repository,
        min_password_length=settings.MIN_PASSWORD_LENGTH,
        timeout=settings.EXTERNAL_CALL_TIMEOUT_SECONDS,
        retry_policy=retry_policy,
    )

    create_sponsored_account = providers.Factory(
        CreateSponsoredAccountUseCase,
        identity_provider=identity_provider,
        company_repo=company_repository,
        user_repo=user_repository,
        min_password_length=settings.MIN_PASSWORD_LENGTH,
        timeout=settings.EXTERNAL_CALL_TIMEOUT_SECONDS,
        retry_policy=retry_policy,
    )

    delete_user = providers.Factory(
        DeleteUserUseCase,
        identity_provider=identity_provider,
        user_repo=user_repository,
        timeout=settings.EXTERNAL_CALL_TIMEOUT_SECONDS,
    )

    # =========================================================================
    # FACTURATION
    # =========================================================================

    cancel_subscription = providers.Factory(
        CancelSubscriptionUseCase,
        payment_gateway=payment_gateway,
        user_repo=user_repository,
        company_repo=company_repository,
        notifier=notifier,
    )

    check_subscription_status = providers.Factory(
        CheckSubscriptionStatusUseCase,
        payment_gateway=payment_gateway,
    )

    # =========================================================================
    # SYNCHRONISATION GOHIGHLEVEL
    # =========================================================================

    integration_gate = providers.Factory(IntegrationGate, integration_repo=integration_repository)

    connect_integration = providers.Factory(ConnectIntegrationUseCase, integration_repo=integration_repository)
    disconnect_integration = providers.Factory(DisconnectIntegrationUseCase, integration_repo=integration_repository)
    check_integration = providers.Factory(
        CheckIntegrationUseCase,
        integration_repo=integration_repository,
        crm_client_factory=crm_client_factory,
    )

    sync_client = providers.Factory(
        SyncClientUseCase,
        gate=integration_gate,
        client_repo=client_repository,
        integration_repo=integration_repository,
        crm_client_factory=crm_client_factory,
        contact_tag=settings.GHL_CONTACT_TAG,
    )

    log_activity = providers.Factory(
        LogActivityUseCase,
        gate=integration_gate,
        activity_repo=activity_repository,
        client_repo=client_repository,
        crm_client_factory=crm_client_factory,
    )

    create_appointment = providers.Factory(
        CreateAppointmentUseCase,
        gate=integration_gate,
        activity_repo=activity_repository,
        client_repo=client_repository,
        crm_client_factory=crm_client_factory,
    )

    sync_pending_clients = providers.Factory(
        SyncPendingClientsUseCase,
        client_repo=client_repository,
        sync_client=sync_client,
    )

    import_contacts = providers.Factory(
        ImportContactsUseCase,
        gate=integration_gate,
        client_repo=client_repository,
        integration_repo=integration_repository,
        crm_client_factory=crm_client_factory,
        page_size=settings.GHL_PAGE_SIZE,
    )

    ghl_sync_facade = providers.Factory(
        GhlSyncFacade,
        gate=integration_gate,
        client_repo=client_repository,
        activity_repo=activity_repository,
        sync_client=sync_client,
        log_activity=log_activity,
        create_appointment=create_appointment,
        sync_pending=sync_pending_clients,
        import_contacts=import_contacts,
    )
    """
    Points d'entree de synchronisation (gate + use cases).

    Graphe de dependances:
        ghl_sync_facade
            ├── integration_gate ── integration_repository
            ├── sync_client ── crm_client_factory
            ├── log_activity / create_appointment ── activity_repository
            ├── sync_pending_clients ── sync_client
            └── import_contacts ── client_repository
    """

    handle_ghl_webhook = providers.Factory(
        HandleGhlWebhookUseCase,
        webhook_log=webhook_log,
        client_repo=client_repository,
        activity_repo=activity_repository,
    )
