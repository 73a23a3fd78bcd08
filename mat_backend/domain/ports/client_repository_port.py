"""Port abstrait pour le repository des clients/prospects."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from mat_backend.domain.models.client import Client, RevenueRecord


class ClientRepositoryPort(ABC):
    """
    Interface pour l'acces aux clients en base.

    Implementations possibles:
    - PostgresClientRepository (psycopg3 async)
    - InMemoryClientRepository (pour tests)
    """

    @abstractmethod
    async def create(self, client: Client) -> None:
        """Sauvegarde un nouveau client."""
        ...

    @abstractmethod
    async def get_by_id(self, client_id: str) -> Optional[Client]:
        """Recupere un client par son ID."""
        ...

    @abstractmethod
    async def get_by_ghl_contact_id(
        self, ghl_contact_id: str, company_id: Optional[str] = None
    ) -> Optional[Client]:
        """Recupere le client lie a un contact GoHighLevel (filtre entreprise optionnel)."""
        ...

    @abstractmethod
    async def list_pending_sync(self, company_id: str) -> List[Client]:
        """Clients dont sync_status est NULL, 'pending' ou 'error'."""
        ...

    @abstractmethod
    async def mark_synced(self, client_id: str, ghl_contact_id: str, synced_at: datetime) -> None:
        """Enregistre le lien GoHighLevel et passe sync_status a 'synced'."""
        ...

    @abstractmethod
    async def mark_sync_error(self, client_id: str) -> None:
        """Passe sync_status a 'error'."""
        ...

    @abstractmethod
    async def update_status(self, client_id: str, status: str, unlink: bool = False) -> None:
        """Met a jour le statut commercial; unlink retire le lien GoHighLevel."""
        ...

    @abstractmethod
    async def upsert_revenue(self, record: RevenueRecord) -> None:
        """Cree ou met a jour l'affaire identifiee par ghl_opportunity_id."""
        ...
