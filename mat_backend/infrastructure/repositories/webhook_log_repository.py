"""Repository pour le journal des webhooks GoHighLevel dans PostgreSQL."""

import uuid
from typing import Any, Dict, Optional

import psycopg
from psycopg.types.json import Jsonb

from mat_backend.config import settings
from mat_backend.domain.ports.webhook_log_port import WebhookLogPort


class PostgresWebhookLogRepository(WebhookLogPort):
    async def record(self, event_type: Optional[str], payload: Dict[str, Any]) -> str:
        log_id = str(uuid.uuid4())
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    INSERT INTO webhook_logs (log_id, event_type, payload, processed)
                    VALUES (%s, %s, %s, FALSE)
                    """,
                    (log_id, event_type, Jsonb(payload)),
                )
            await conn.commit()
        return log_id

    async def mark_processed(self, log_id: str, error_message: Optional[str] = None) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    UPDATE webhook_logs
                    SET processed = %s, error_message = %s
                    WHERE log_id = %s
                    """,
                    (error_message is None, error_message, log_id),
                )
            await conn.commit()
