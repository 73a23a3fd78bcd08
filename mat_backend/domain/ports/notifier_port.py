"""Port abstrait pour les notifications sortantes (email, webhook de leads)."""

from abc import ABC, abstractmethod
from typing import Optional


class NotifierPort(ABC):
    """
    Notifications best-effort: les implementations ne levent jamais,
    elles journalisent les echecs.

    Implementations possibles:
    - HttpNotifierAdapter (Resend + webhook GoHighLevel via httpx)
    - RecordingNotifier (pour tests)
    """

    @abstractmethod
    async def notify_new_subscription(self, email: str, name: str, plan: str, company: str) -> None:
        ...

    @abstractmethod
    async def notify_cancellation(self, email: str, name: str, plan: str) -> None:
        ...

    @abstractmethod
    async def push_lead(
        self, email: str, full_name: str, company: str, phone: Optional[str], plan: str
    ) -> None:
        """Transmet le nouvel abonne au webhook GoHighLevel s'il est configure."""
        ...
