"""Entites et schemas du domaine."""

from mat_backend.domain.models.client import (
    Activity,
    Appointment,
    Client,
    RevenueRecord,
    SyncStatus,
)
from mat_backend.domain.models.company import Company, max_users_for_plan
from mat_backend.domain.models.integration import IntegrationCredential
from mat_backend.domain.models.user import Identity, UserRecord, UserRole

__all__ = [
    "Activity",
    "Appointment",
    "Client",
    "Company",
    "Identity",
    "IntegrationCredential",
    "RevenueRecord",
    "SyncStatus",
    "UserRecord",
    "UserRole",
    "max_users_for_plan",
]
