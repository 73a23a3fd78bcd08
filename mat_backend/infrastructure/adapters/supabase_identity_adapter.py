"""Adapter du fournisseur d'identite: API admin GoTrue de Supabase via httpx."""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

import httpx

from mat_backend.config import settings
from mat_backend.domain.exceptions import DuplicateAccount
from mat_backend.domain.models.user import Identity
from mat_backend.domain.ports.identity_provider_port import IdentityProviderPort

logger = logging.getLogger(__name__)

EMAIL_EXISTS_CODES = ("email_exists", "user_already_exists")


class SupabaseAdminError(Exception):
    """Reponse en echec de l'API admin GoTrue."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _to_identity(raw: Dict[str, Any]) -> Identity:
    return Identity(
        identity_id=raw["id"],
        email=raw.get("email", ""),
        email_confirmed=bool(raw.get("email_confirmed_at")),
        created_at=_parse_timestamp(raw.get("created_at")),
    )


class SupabaseIdentityAdapter(IdentityProviderPort):
    """
    Cree et supprime les comptes d'authentification avec la service role key.

    Endpoints:
    - POST   /auth/v1/admin/users
    - DELETE /auth/v1/admin/users/{id}
    - GET    /auth/v1/admin/users?page=&per_page=
    """

    PER_PAGE = 1000

    def __init__(
        self,
        base_url: str = settings.SUPABASE_URL,
        service_role_key: str = settings.SUPABASE_SERVICE_ROLE_KEY,
        timeout: float = settings.EXTERNAL_CALL_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "apikey": service_role_key,
            "Authorization": f"Bearer {service_role_key}",
            "Content-Type": "application/json",
        }
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self._base_url}/auth/v1/admin",
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    @staticmethod
    def _error_from(response: httpx.Response) -> SupabaseAdminError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("msg") or body.get("message") or body.get("error_description") or response.text
        return SupabaseAdminError(response.status_code, message)

    async def create_identity(
        self,
        email: str,
        password: str,
        email_confirm: bool,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Identity:
        payload = {
            "email": email,
            "password": password,
            "email_confirm": email_confirm,
            "user_metadata": metadata or {},
        }
        async with self._client() as client:
            response = await client.post("/users", json=payload)

        if response.is_error:
            error = self._error_from(response)
            try:
                code = response.json().get("error_code")
            except ValueError:
                code = None
            if code in EMAIL_EXISTS_CODES or "already been registered" in str(error):
                raise DuplicateAccount(email)
            logger.error(f"Error creating identity for {email}: {error}")
            raise error

        identity = _to_identity(response.json())
        logger.info(f"Identity created: {identity.identity_id} ({email}, confirmed={email_confirm})")
        return identity

    async def delete_identity(self, identity_id: str) -> None:
        async with self._client() as client:
            response = await client.delete(f"/users/{identity_id}")

        if response.is_error:
            raise self._error_from(response)
        logger.info(f"Identity deleted: {identity_id}")

    async def find_by_email(self, email: str) -> Optional[Identity]:
        target = email.strip().lower()
        page = 1
        async with self._client() as client:
            while True:
                response = await client.get("/users", params={"page": page, "per_page": self.PER_PAGE})
                if response.is_error:
                    raise self._error_from(response)

                users = response.json().get("users") or []
                for raw in users:
                    if (raw.get("email") or "").lower() == target:
                        return _to_identity(raw)
                if len(users) < self.PER_PAGE:
                    return None
                page += 1
