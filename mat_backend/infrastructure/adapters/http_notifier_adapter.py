"""Adapter de notifications: emails Resend et webhook de leads GoHighLevel (httpx)."""

import html
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from mat_backend.config import settings
from mat_backend.domain.ports.notifier_port import NotifierPort

logger = logging.getLogger(__name__)

LEAD_SOURCE = "TrueXpanse MAT"


class HttpNotifierAdapter(NotifierPort):
    """
    Notifications best-effort.

    Une cle Resend ou un destinataire absent desactive les emails; une URL
    de webhook vide desactive l'envoi des leads. Les echecs HTTP sont
    journalises et jamais propages.
    """

    def __init__(
        self,
        resend_api_key: str = settings.RESEND_API_KEY,
        resend_api_url: str = settings.RESEND_API_URL,
        email_from: str = settings.NOTIFICATION_EMAIL_FROM,
        email_to: str = settings.NOTIFICATION_EMAIL_TO,
        lead_webhook_url: str = settings.GHL_WEBHOOK_URL,
        timeout: float = settings.EXTERNAL_CALL_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._resend_api_key = resend_api_key
        self._resend_api_url = resend_api_url
        self._email_from = email_from
        self._recipients: List[str] = [addr.strip() for addr in email_to.split(",") if addr.strip()]
        self._lead_webhook_url = lead_webhook_url
        self._timeout = timeout
        self._transport = transport

    async def _post(self, url: str, payload: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Notification to {url} failed: {e}")
            return False

        if response.is_error:
            logger.error(f"Notification to {url} rejected ({response.status_code}): {response.text}")
            return False
        return True

    async def _send_email(self, subject: str, body_html: str) -> None:
        if not self._resend_api_key or not self._recipients:
            logger.info(f"Email notifications not configured, skipping '{subject}'")
            return

        sent = await self._post(
            self._resend_api_url,
            {"from": self._email_from, "to": self._recipients, "subject": subject, "html": body_html},
            headers={"Authorization": f"Bearer {self._resend_api_key}"},
        )
        if sent:
            logger.info(f"Email sent: {subject}")

    async def notify_new_subscription(self, email: str, name: str, plan: str, company: str) -> None:
        now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
        await self._send_email(
            "New Subscription - TrueXpanse MAT",
            f"""
            <h2>New Subscription!</h2>
            <p><strong>User:</strong> {html.escape(name)} ({html.escape(email)})</p>
            <p><strong>Company:</strong> {html.escape(company)}</p>
            <p><strong>Plan:</strong> {html.escape(plan)}</p>
            <p><strong>Subscribed at:</strong> {now}</p>
            """,
        )

    async def notify_cancellation(self, email: str, name: str, plan: str) -> None:
        now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
        await self._send_email(
            "Subscription Cancelled - TrueXpanse MAT",
            f"""
            <h2>Subscription Cancelled</h2>
            <p><strong>User:</strong> {html.escape(name)} ({html.escape(email)})</p>
            <p><strong>Plan:</strong> {html.escape(plan)}</p>
            <p><strong>Cancelled at:</strong> {now}</p>
            <p>The user will have access until the end of their billing period.</p>
            """,
        )

    async def push_lead(
        self, email: str, full_name: str, company: str, phone: Optional[str], plan: str
    ) -> None:
        if not self._lead_webhook_url:
            logger.info("GHL_WEBHOOK_URL not configured, skipping lead notification")
            return

        sent = await self._post(
            self._lead_webhook_url,
            {
                "email": email,
                "fullName": full_name,
                "company": company,
                "phone": phone or "",
                "plan": plan,
                "subscribedAt": datetime.now(timezone.utc).isoformat(),
                "source": LEAD_SOURCE,
            },
        )
        if sent:
            logger.info(f"Lead {email} sent to GHL webhook")
