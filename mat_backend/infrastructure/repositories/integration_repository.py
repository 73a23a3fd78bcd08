"""Repository pour les integrations GoHighLevel dans PostgreSQL."""

import logging
from datetime import datetime
from typing import Optional

import psycopg

from mat_backend.config import settings
from mat_backend.domain.models.integration import IntegrationCredential
from mat_backend.domain.ports.integration_repository_port import IntegrationRepositoryPort

logger = logging.getLogger(__name__)

INTEGRATION_COLUMNS = """
    integration_id, company_id, ghl_api_key, ghl_location_id,
    is_active, last_sync_at, created_at, updated_at
"""


def _row_to_credential(row) -> IntegrationCredential:
    return IntegrationCredential(
        integration_id=row[0],
        company_id=row[1],
        ghl_api_key=row[2],
        ghl_location_id=row[3],
        is_active=row[4],
        last_sync_at=row[5],
        created_at=row[6],
        updated_at=row[7],
    )


class PostgresIntegrationRepository(IntegrationRepositoryPort):
    """
    Acces aux credentials GoHighLevel dans PostgreSQL.

    La contrainte UNIQUE sur company_id + INSERT ... ON CONFLICT garantit
    un seul credential par entreprise.
    """

    async def get_active(self, company_id: str) -> Optional[IntegrationCredential]:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"""
                    SELECT {INTEGRATION_COLUMNS}
                    FROM ghl_integrations
                    WHERE company_id = %s AND is_active = TRUE
                    """,
                    (company_id,),
                )
                row = await cur.fetchone()
                return _row_to_credential(row) if row else None

    async def get_by_company(self, company_id: str) -> Optional[IntegrationCredential]:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"SELECT {INTEGRATION_COLUMNS} FROM ghl_integrations WHERE company_id = %s",
                    (company_id,),
                )
                row = await cur.fetchone()
                return _row_to_credential(row) if row else None

    async def upsert(self, credential: IntegrationCredential) -> IntegrationCredential:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"""
                    INSERT INTO ghl_integrations (
                        integration_id, company_id, ghl_api_key, ghl_location_id, is_active
                    ) VALUES (%s, %s, %s, %s, TRUE)
                    ON CONFLICT (company_id) DO UPDATE SET
                        ghl_api_key = EXCLUDED.ghl_api_key,
                        ghl_location_id = EXCLUDED.ghl_location_id,
                        is_active = TRUE,
                        updated_at = NOW()
                    RETURNING {INTEGRATION_COLUMNS}
                    """,
                    (
                        credential.integration_id,
                        credential.company_id,
                        credential.ghl_api_key,
                        credential.ghl_location_id,
                    ),
                )
                row = await cur.fetchone()
            await conn.commit()

        logger.info(f"GHL integration {row[0]} saved for company {credential.company_id}")
        return _row_to_credential(row)

    async def deactivate(self, company_id: str) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    UPDATE ghl_integrations
                    SET is_active = FALSE, updated_at = NOW()
                    WHERE company_id = %s
                    """,
                    (company_id,),
                )
            await conn.commit()

    async def touch_last_sync(self, company_id: str, synced_at: datetime) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    "UPDATE ghl_integrations SET last_sync_at = %s WHERE company_id = %s",
                    (synced_at, company_id),
                )
            await conn.commit()
