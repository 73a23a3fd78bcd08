"""Use case: Suppression d'un utilisateur (identite puis profil)."""

import asyncio
import logging
from typing import Optional

from mat_backend.application.validation import require_fields
from mat_backend.domain.exceptions import UserDeletionFailed
from mat_backend.domain.ports.identity_provider_port import IdentityProviderPort
from mat_backend.domain.ports.user_repository_port import UserRepositoryPort

logger = logging.getLogger(__name__)


class DeleteUserUseCase:
    """
    Supprime l'identite chez le fournisseur, puis le profil applicatif.

    La suppression de l'identite est l'etape critique: son echec fait
    echouer la demande. L'echec sur le profil est seulement journalise
    (la cle etrangere peut deja l'avoir supprime en cascade).
    """

    def __init__(
        self,
        identity_provider: IdentityProviderPort,
        user_repo: UserRepositoryPort,
        timeout: Optional[float] = None,
    ):
        self._identity_provider = identity_provider
        self._user_repo = user_repo
        self._timeout = timeout

    async def execute(self, user_id: Optional[str]) -> None:
        require_fields({"userId": user_id})

        try:
            await asyncio.wait_for(self._identity_provider.delete_identity(user_id), timeout=self._timeout)
        except Exception as e:
            logger.error(f"Error deleting identity {user_id}: {e}")
            raise UserDeletionFailed(str(e) or type(e).__name__) from e

        try:
            await self._user_repo.delete(user_id)
        except Exception as e:
            logger.warning(f"Identity {user_id} deleted but user record cleanup failed: {e}")

        logger.info(f"User {user_id} deleted")
