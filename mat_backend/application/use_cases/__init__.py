"""Use cases: un point d'entree `execute()` par operation metier."""

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

__all__ = [
    "CancelSubscriptionUseCase",
    "CheckSubscriptionStatusUseCase",
    "ConnectIntegrationUseCase",
    "CreateAppointmentUseCase",
    "CreateSponsoredAccountUseCase",
    "CreateTeamMemberUseCase",
    "DeleteUserUseCase",
    "DisconnectIntegrationUseCase",
    "GhlSyncFacade",
    "HandleGhlWebhookUseCase",
    "ImportContactsUseCase",
    "IntegrationGate",
    "LogActivityUseCase",
    "ProvisionPaidSignupUseCase",
    "SyncClientUseCase",
    "SyncPendingClientsUseCase",
    "CheckIntegrationUseCase",
]
