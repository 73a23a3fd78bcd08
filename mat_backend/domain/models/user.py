"""Modele domain pour les identites et les profils utilisateurs."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    OWNER = "Owner"
    MANAGER = "Manager"
    ADMIN = "Admin"
    SALES_REP = "Sales Rep"


@dataclass
class Identity:
    """
    Compte d'authentification emis par le fournisseur d'identite.

    Distinct du profil applicatif (UserRecord): seul le fournisseur
    le cree et le supprime.
    """

    identity_id: str
    email: str
    email_confirmed: bool = False
    created_at: Optional[datetime] = None


@dataclass
class UserRecord:
    """
    Profil applicatif rattache a une Identity et a une Company.

    user_id est toujours egal a l'identity_id du fournisseur.
    """

    user_id: str
    email: str
    name: str
    company_id: str
    role: str = UserRole.SALES_REP.value
    status: str = "active"
    created_at: Optional[datetime] = None

    @classmethod
    def for_identity(
        cls,
        identity: Identity,
        name: str,
        company_id: str,
        role: UserRole,
        status: str,
    ) -> "UserRecord":
        """Factory method: profil lie a une identite fraichement creee."""
        return cls(
            user_id=identity.identity_id,
            email=identity.email,
            name=name,
            company_id=company_id,
            role=role.value,
            status=status,
        )
