"""Port abstrait pour le repository des entreprises."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from mat_backend.domain.models.company import Company


class CompanyRepositoryPort(ABC):
    """
    Interface pour l'acces aux entreprises en base.

    Implementations possibles:
    - PostgresCompanyRepository (psycopg3 async)
    - InMemoryCompanyRepository (pour tests)
    """

    @abstractmethod
    async def create(self, company: Company) -> None:
        """Sauvegarde une nouvelle entreprise."""
        ...

    @abstractmethod
    async def get_by_id(self, company_id: str) -> Optional[Company]:
        """Recupere une entreprise par son ID."""
        ...

    @abstractmethod
    async def delete(self, company_id: str) -> None:
        """Supprime une entreprise (compensation du provisioning uniquement)."""
        ...

    @abstractmethod
    async def clear_subscription(self, company_id: str, cancelled_at: datetime) -> None:
        """Retire l'abonnement Stripe et horodate la demande d'annulation."""
        ...
