"""
Application layer - Use cases et orchestration.

Cette couche contient la logique metier (saga de provisioning, sync CRM).
Elle depend uniquement des ports du domain (pas des implementations).
"""

from mat_backend.application.saga import NO_RETRY, RetryPolicy, Saga

__all__ = ["NO_RETRY", "RetryPolicy", "Saga"]
