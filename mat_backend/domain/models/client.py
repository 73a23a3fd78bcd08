"""Modele domain pour les clients/prospects et les donnees qui s'y rattachent."""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class SyncStatus(str, Enum):
    PENDING = "pending"
    SYNCED = "synced"
    ERROR = "error"


# Statuts consideres comme "a synchroniser" par la synchro en masse (None inclus)
PENDING_SYNC_STATUSES = (None, SyncStatus.PENDING.value, SyncStatus.ERROR.value)


@dataclass
class Client:
    """
    Prospect ou client appartenant a un utilisateur d'une entreprise.

    Un client avec ghl_contact_id non nul est considere synchronise;
    sync_status reflete le resultat de la derniere tentative.
    """

    client_id: str
    company_id: str
    user_id: Optional[str]
    name: str
    email: str = ""
    phone: str = ""
    company_name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    status: Optional[str] = None
    stage: str = "New"
    monthly_contract_value: float = 0.0
    initial_amount_collected: float = 0.0
    close_date: Optional[date] = None
    ghl_contact_id: Optional[str] = None
    sync_status: Optional[str] = None
    last_synced_to_ghl: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def is_synced(self) -> bool:
        return self.ghl_contact_id is not None

    def split_name(self) -> tuple:
        """Decoupe le nom en (prenom, nom); le prenom sert de nom a defaut."""
        parts = self.name.split(" ")
        first = parts[0]
        last = " ".join(parts[1:]) or first
        return first, last

    @classmethod
    def create(cls, company_id: str, user_id: Optional[str], name: str, **fields) -> "Client":
        return cls(
            client_id=str(uuid.uuid4()),
            company_id=company_id,
            user_id=user_id,
            name=name,
            **fields,
        )


@dataclass
class Activity:
    """Activite commerciale (appel, email, sms...) journalisee sur un client."""

    activity_id: str
    company_id: str
    user_id: Optional[str]
    client_id: Optional[str]
    activity_type: str
    activity_date: str
    notes: Optional[str] = None


@dataclass
class Appointment:
    """Rendez-vous planifie avec un client, eventuellement lie a un evenement GHL."""

    appointment_id: str
    company_id: str
    user_id: Optional[str]
    client_id: Optional[str]
    title: str
    start_time: str
    end_time: str
    status: str = "scheduled"
    ghl_event_id: Optional[str] = None

    @classmethod
    def create(cls, company_id: str, user_id: Optional[str], client_id: str, **fields) -> "Appointment":
        return cls(
            appointment_id=str(uuid.uuid4()),
            company_id=company_id,
            user_id=user_id,
            client_id=client_id,
            **fields,
        )


@dataclass
class RevenueRecord:
    """Affaire suivie depuis une opportunite GoHighLevel."""

    company_id: str
    client_id: str
    user_id: Optional[str]
    ghl_opportunity_id: str
    deal_amount: float
    deal_status: str
    product_name: str
    closed_date: Optional[date] = None
    revenue_id: str = field(default_factory=lambda: str(uuid.uuid4()))
