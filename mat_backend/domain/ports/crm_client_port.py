"""Port abstrait pour le client de l'API GoHighLevel."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from mat_backend.domain.models.integration import IntegrationCredential
from mat_backend.domain.models.sync import CrmContact, CrmTransaction


class CrmClientPort(ABC):
    """
    Interface pour les appels au CRM externe (GoHighLevel).

    Toute reponse en echec leve CrmApiError.

    Implementations possibles:
    - GhlClient (httpx async)
    - FakeCrmClient (pour tests)
    """

    @abstractmethod
    async def create_contact(self, contact: Dict[str, Any]) -> str:
        """Cree un contact et retourne son ID."""
        ...

    @abstractmethod
    async def update_contact(self, contact_id: str, updates: Dict[str, Any]) -> str:
        """Met a jour un contact et retourne son ID."""
        ...

    @abstractmethod
    async def list_contacts(self, limit: int, start_after_id: Optional[str] = None) -> List[CrmContact]:
        """Retourne une page de contacts (curseur: ID du dernier contact recu)."""
        ...

    @abstractmethod
    async def list_transactions(self, limit: int, offset: int) -> List[CrmTransaction]:
        """Retourne une page de transactions en mode de paiement 'live'."""
        ...

    @abstractmethod
    async def add_note(self, contact_id: str, body: str) -> None:
        """Ajoute une note a la timeline d'un contact."""
        ...

    @abstractmethod
    async def list_calendars(self) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def create_calendar_event(
        self,
        calendar_id: str,
        contact_id: str,
        start_time: str,
        end_time: str,
        title: str,
    ) -> str:
        """Cree un rendez-vous et retourne l'ID de l'evenement."""
        ...

    @abstractmethod
    async def get_location(self) -> Dict[str, Any]:
        """Recupere la location (sous-compte) configuree."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Ferme la connexion HTTP."""
        ...


# Fabrique d'un client CRM pour un credential donne
CrmClientFactory = Callable[[IntegrationCredential], CrmClientPort]
