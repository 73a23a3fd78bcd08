"""Port abstrait pour le repository des integrations GoHighLevel."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from mat_backend.domain.models.integration import IntegrationCredential


class IntegrationRepositoryPort(ABC):
    """
    Interface pour l'acces aux credentials GoHighLevel.

    L'ecriture passe uniquement par upsert() (cle: company_id), ce qui
    garantit au plus un credential par entreprise.

    Implementations possibles:
    - PostgresIntegrationRepository (psycopg3 async)
    - InMemoryIntegrationRepository (pour tests)
    """

    @abstractmethod
    async def get_active(self, company_id: str) -> Optional[IntegrationCredential]:
        """Credential present ET is_active pour l'entreprise, sinon None."""
        ...

    @abstractmethod
    async def get_by_company(self, company_id: str) -> Optional[IntegrationCredential]:
        """Credential de l'entreprise, actif ou non."""
        ...

    @abstractmethod
    async def upsert(self, credential: IntegrationCredential) -> IntegrationCredential:
        """Cree ou remplace le credential de l'entreprise et l'active."""
        ...

    @abstractmethod
    async def deactivate(self, company_id: str) -> None:
        """Desactive (soft) le credential de l'entreprise."""
        ...

    @abstractmethod
    async def touch_last_sync(self, company_id: str, synced_at: datetime) -> None:
        """Met a jour last_sync_at."""
        ...
