"""Port abstrait pour le repository des activites et rendez-vous."""

from abc import ABC, abstractmethod
from typing import Optional

from mat_backend.domain.models.client import Activity, Appointment


class ActivityRepositoryPort(ABC):
    """
    Interface pour l'acces aux activites et rendez-vous en base.

    Implementations possibles:
    - PostgresActivityRepository (psycopg3 async)
    - InMemoryActivityRepository (pour tests)
    """

    @abstractmethod
    async def get_activity(self, activity_id: str) -> Optional[Activity]:
        ...

    @abstractmethod
    async def get_appointment(self, appointment_id: str) -> Optional[Appointment]:
        ...

    @abstractmethod
    async def get_appointment_by_event_id(self, ghl_event_id: str) -> Optional[Appointment]:
        ...

    @abstractmethod
    async def create_appointment(self, appointment: Appointment) -> None:
        ...

    @abstractmethod
    async def update_appointment(self, appointment: Appointment) -> None:
        """Met a jour titre, horaires et statut."""
        ...

    @abstractmethod
    async def set_appointment_event_id(self, appointment_id: str, ghl_event_id: str) -> None:
        """Enregistre l'ID de l'evenement GoHighLevel cree."""
        ...
