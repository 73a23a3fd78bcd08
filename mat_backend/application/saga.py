"""
Saga: execution sequentielle d'etapes avec compensation en ordre inverse.

Chaque etape reussie empile son action d'annulation. Si une etape echoue,
les annulations sont depilees (LIFO) puis l'erreur typee de l'etape est levee.
Une annulation qui echoue est journalisee et n'empeche pas les suivantes.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Tuple, Type, TypeVar

from mat_backend.domain.exceptions import ProvisioningError, StepFailed

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Politique de rejeu des compensations (backoff exponentiel borne).

    max_attempts=1 correspond au comportement best-effort sans rejeu.
    """

    max_attempts: int = 1
    backoff_seconds: float = 0.5

    def delay(self, attempt: int) -> float:
        """Delai avant la tentative attempt+1 (attempt commence a 1)."""
        return self.backoff_seconds * (2 ** (attempt - 1))


NO_RETRY = RetryPolicy(max_attempts=1)


class Saga:
    """
    Orchestrateur d'etapes compensables pour un workflow de provisioning.

    Usage:
        saga = Saga("paid-signup", timeout=15)
        identity = await saga.step(
            "identity",
            lambda: idp.create_identity(...),
            compensation=lambda ident: idp.delete_identity(ident.identity_id),
            error=IdentityCreationFailed,
        )

    L'etat en memoire (pile de compensations) reflete exactement les
    enregistrements durables crees par ce workflow.
    """

    def __init__(
        self,
        name: str,
        timeout: Optional[float] = None,
        retry_policy: RetryPolicy = NO_RETRY,
    ):
        self.name = name
        self._timeout = timeout
        self._retry_policy = retry_policy
        self._stack: List[Tuple[str, Callable[[], Awaitable[None]]]] = []
        self.completed: List[str] = []
        self.compensated: List[str] = []
        self.compensation_failures: List[str] = []

    async def step(
        self,
        name: str,
        action: Callable[[], Awaitable[T]],
        compensation: Optional[Callable[[T], Awaitable[None]]] = None,
        error: Type[StepFailed] = StepFailed,
    ) -> T:
        """
        Execute une etape bornee par le timeout.

        En cas d'echec: compense les etapes precedentes puis leve `error`.
        Les erreurs domain deja typees (ex: DuplicateAccount) sont relevees telles quelles.
        """
        try:
            result = await self._bounded(action())
        except Exception as e:
            cause = self._describe(e)
            logger.error(f"[{self.name}] step '{name}' failed: {cause}")
            await self.compensate()
            if isinstance(e, ProvisioningError) and not isinstance(e, StepFailed):
                raise
            raise error(
                cause,
                compensations=list(self.compensated),
                compensation_failures=list(self.compensation_failures),
            ) from e

        self.completed.append(name)
        if compensation is not None:
            self._stack.append((name, lambda: compensation(result)))
        logger.info(f"[{self.name}] step '{name}' completed")
        return result

    async def compensate(self) -> None:
        """Depile et execute toutes les compensations en attente (ordre inverse)."""
        while self._stack:
            name, undo = self._stack.pop()
            await self._run_compensation(name, undo)

    async def _run_compensation(self, name: str, undo: Callable[[], Awaitable[None]]) -> None:
        attempts = max(1, self._retry_policy.max_attempts)
        for attempt in range(1, attempts + 1):
            try:
                await self._bounded(undo())
            except Exception as e:
                logger.warning(
                    f"[{self.name}] compensation '{name}' attempt {attempt}/{attempts} failed: "
                    f"{self._describe(e)}"
                )
                if attempt < attempts:
                    await asyncio.sleep(self._retry_policy.delay(attempt))
                continue
            self.compensated.append(name)
            logger.info(f"[{self.name}] compensation '{name}' done")
            return

        # Incoherence durable: l'erreur d'origine reste celle remontee a l'appelant
        self.compensation_failures.append(name)
        logger.error(
            f"[{self.name}] INCONSISTENT STATE: compensation '{name}' failed after "
            f"{attempts} attempt(s), manual cleanup required"
        )

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        if self._timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=self._timeout)

    def _describe(self, error: Exception) -> str:
        if isinstance(error, asyncio.TimeoutError):
            return f"timed out after {self._timeout}s"
        return str(error) or type(error).__name__
