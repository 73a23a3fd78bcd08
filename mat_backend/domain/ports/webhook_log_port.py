"""Port abstrait pour le journal des webhooks entrants."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class WebhookLogPort(ABC):
    """
    Journal des webhooks GoHighLevel recus.

    Implementations possibles:
    - PostgresWebhookLogRepository (psycopg3 async)
    - InMemoryWebhookLog (pour tests)
    """

    @abstractmethod
    async def record(self, event_type: Optional[str], payload: Dict[str, Any]) -> str:
        """Enregistre le webhook (processed=false) et retourne l'ID du log."""
        ...

    @abstractmethod
    async def mark_processed(self, log_id: str, error_message: Optional[str] = None) -> None:
        """processed=true si error_message est None, sinon enregistre l'erreur."""
        ...
