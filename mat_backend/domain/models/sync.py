"""Modeles de synchronisation GoHighLevel: contacts, transactions et bilans."""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, Optional

RECURRING_MARKERS = ("recurring", "subscription")
SUCCESSFUL_TRANSACTION_STATUSES = ("succeeded", "success")


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class CrmContact:
    """Contact GoHighLevel normalise a la frontiere de l'API."""

    contact_id: Optional[str]
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str = ""
    phone: str = ""
    company_name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""

    @property
    def display_name(self) -> str:
        """name -> prenom + nom -> "Unknown Contact"."""
        if self.name:
            return self.name
        full = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full or "Unknown Contact"

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "CrmContact":
        return cls(
            contact_id=raw.get("id") or None,
            name=raw.get("name") or raw.get("contactName") or None,
            first_name=raw.get("firstName"),
            last_name=raw.get("lastName"),
            email=raw.get("email") or "",
            phone=raw.get("phone") or "",
            company_name=raw.get("companyName") or "",
            address=raw.get("address1") or "",
            city=raw.get("city") or "",
            state=raw.get("state") or "",
            postal_code=raw.get("postalCode") or "",
        )


@dataclass(frozen=True)
class CrmTransaction:
    """
    Transaction de paiement GoHighLevel.

    amount est le montant net: amount_received (en cents) s'il est present,
    sinon amount.
    """

    transaction_id: Optional[str]
    contact_id: Optional[str]
    amount: float
    source_name: str = ""
    status: str = ""
    created_at: Optional[datetime] = None

    @property
    def is_successful(self) -> bool:
        return self.status.lower() in SUCCESSFUL_TRANSACTION_STATUSES

    @property
    def is_recurring(self) -> bool:
        label = self.source_name.lower()
        return any(marker in label for marker in RECURRING_MARKERS)

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "CrmTransaction":
        if raw.get("amount_received"):
            amount = float(raw["amount_received"]) / 100
        else:
            amount = float(raw.get("amount") or 0)
        return cls(
            transaction_id=raw.get("_id") or raw.get("id"),
            contact_id=raw.get("contactId"),
            amount=amount,
            source_name=raw.get("entitySourceName") or "",
            status=raw.get("status") or "",
            created_at=_parse_datetime(raw.get("createdAt")),
        )


@dataclass(frozen=True)
class Financials:
    total_revenue: float
    recurring_revenue: float
    one_time_revenue: float
    monthly_contract_value: float
    annual_contract_value: float
    close_date: date
    stage: str


def derive_financials(transactions: Iterable[CrmTransaction], today: Optional[date] = None) -> Financials:
    """
    Calcule les indicateurs financiers d'un contact a partir de ses transactions.

    MCV = revenu recurrent, ACV = MCV * 12. La date de cloture est la plus
    ancienne transaction (aujourd'hui sinon); stage "Closed" des qu'une
    transaction existe.
    """
    transactions = list(transactions)
    recurring = sum(t.amount for t in transactions if t.is_recurring)
    one_time = sum(t.amount for t in transactions if not t.is_recurring)
    dates = [t.created_at for t in transactions if t.created_at is not None]

    close_date = min(dates).date() if dates else (today or date.today())
    return Financials(
        total_revenue=recurring + one_time,
        recurring_revenue=recurring,
        one_time_revenue=one_time,
        monthly_contract_value=recurring,
        annual_contract_value=recurring * 12,
        close_date=close_date,
        stage="Closed" if transactions else "New",
    )


@dataclass
class ImportSummary:
    imported: int = 0
    skipped: int = 0
    total_found: int = 0


@dataclass
class BulkSyncSummary:
    synced: int = 0
    attempted: int = 0
