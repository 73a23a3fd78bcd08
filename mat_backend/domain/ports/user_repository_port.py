"""Port abstrait pour le repository des utilisateurs."""

from abc import ABC, abstractmethod
from typing import Optional

from mat_backend.domain.models.user import UserRecord


class UserRepositoryPort(ABC):
    """
    Interface pour l'acces aux profils utilisateurs en base.

    Implementations possibles:
    - PostgresUserRepository (psycopg3 async)
    - InMemoryUserRepository (pour tests)
    """

    @abstractmethod
    async def create(self, user: UserRecord) -> None:
        """Sauvegarde un nouveau profil utilisateur."""
        ...

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        """Recupere un utilisateur par son ID."""
        ...

    @abstractmethod
    async def email_exists(self, email: str) -> bool:
        """Verifie si un email est deja utilise."""
        ...

    @abstractmethod
    async def count_by_company(self, company_id: str) -> int:
        """Compte les utilisateurs d'une entreprise."""
        ...

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        """Supprime un profil utilisateur."""
        ...
