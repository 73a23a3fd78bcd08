"""
Client HTTP de l'API GoHighLevel (LeadConnector).

Un client par credential: la cle API et la location sont fixees a la
construction. Toute reponse non-2xx ou erreur reseau leve CrmApiError.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from mat_backend.config import settings
from mat_backend.domain.exceptions import CrmApiError
from mat_backend.domain.models.integration import IntegrationCredential
from mat_backend.domain.models.sync import CrmContact, CrmTransaction
from mat_backend.domain.ports.crm_client_port import CrmClientPort

logger = logging.getLogger(__name__)


class GhlClient(CrmClientPort):
    def __init__(
        self,
        api_key: str,
        location_id: Optional[str],
        base_url: str = settings.GHL_API_BASE_URL,
        api_version: str = settings.GHL_API_VERSION,
        timeout: float = settings.EXTERNAL_CALL_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            transport: transport httpx optionnel (httpx.MockTransport en test)
        """
        self._location_id = location_id
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Version": api_version,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"GHL API request failed: {method} {path}: {e}")
            raise CrmApiError(0, str(e) or type(e).__name__) from e

        if response.is_error:
            logger.error(f"GHL API error {response.status_code} on {method} {path}")
            raise CrmApiError(response.status_code, response.text)

        if not response.content:
            return {}
        return response.json()

    # --- Contacts ---

    async def create_contact(self, contact: Dict[str, Any]) -> str:
        payload = {**contact, "locationId": self._location_id or contact.get("locationId")}
        data = await self._request("POST", "/contacts/", json=payload)
        return data["contact"]["id"]

    async def update_contact(self, contact_id: str, updates: Dict[str, Any]) -> str:
        # locationId est refuse par l'endpoint de mise a jour
        payload = {key: value for key, value in updates.items() if key != "locationId"}
        data = await self._request("PUT", f"/contacts/{contact_id}", json=payload)
        return data.get("contact", {}).get("id") or contact_id

    async def list_contacts(self, limit: int, start_after_id: Optional[str] = None) -> List[CrmContact]:
        params: Dict[str, Any] = {"locationId": self._location_id, "limit": limit}
        if start_after_id:
            params["startAfterId"] = start_after_id
        data = await self._request("GET", "/contacts/", params=params)
        return [CrmContact.from_api(raw) for raw in data.get("contacts") or []]

    async def add_note(self, contact_id: str, body: str) -> None:
        await self._request("POST", f"/contacts/{contact_id}/notes", json={"body": body})

    # --- Paiements ---

    async def list_transactions(self, limit: int, offset: int) -> List[CrmTransaction]:
        params = {
            "altId": self._location_id,
            "altType": "location",
            "limit": limit,
            "offset": offset,
            "paymentMode": "live",
        }
        data = await self._request("GET", "/payments/transactions", params=params)
        return [CrmTransaction.from_api(raw) for raw in data.get("data") or []]

    # --- Calendriers ---

    async def list_calendars(self) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/calendars/", params={"locationId": self._location_id})
        return data.get("calendars") or []

    async def create_calendar_event(
        self,
        calendar_id: str,
        contact_id: str,
        start_time: str,
        end_time: str,
        title: str,
    ) -> str:
        payload = {
            "calendarId": calendar_id,
            "contactId": contact_id,
            "startTime": start_time,
            "endTime": end_time,
            "title": title,
            "appointmentStatus": "confirmed",
        }
        data = await self._request("POST", f"/calendars/{calendar_id}/events", json=payload)
        event = data.get("event") or data
        return event["id"]

    # --- Location ---

    async def get_location(self) -> Dict[str, Any]:
        data = await self._request("GET", f"/locations/{self._location_id}")
        return data.get("location") or {}

    async def close(self) -> None:
        await self._http.aclose()


def create_ghl_client(credential: IntegrationCredential) -> GhlClient:
    """Fabrique enregistree dans le Container (providers.Object)."""
    return GhlClient(api_key=credential.ghl_api_key, location_id=credential.ghl_location_id)
