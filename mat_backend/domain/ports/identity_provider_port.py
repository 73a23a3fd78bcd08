"""Port abstrait pour le fournisseur d'identite."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from mat_backend.domain.models.user import Identity


class IdentityProviderPort(ABC):
    """
    Interface pour la creation et la suppression des comptes d'authentification.

    Implementations possibles:
    - SupabaseIdentityAdapter (API admin GoTrue via httpx)
    - InMemoryIdentityProvider (pour tests)
    """

    @abstractmethod
    async def create_identity(
        self,
        email: str,
        password: str,
        email_confirm: bool,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Identity:
        """
        Cree une identite.

        Args:
            email_confirm: True = identite confirmee immediatement,
                False = verification email requise
        """
        ...

    @abstractmethod
    async def delete_identity(self, identity_id: str) -> None:
        """Supprime une identite."""
        ...

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Identity]:
        """Recherche une identite existante par email."""
        ...
