"""Repository pour les clients/prospects et le suivi des affaires dans PostgreSQL."""

import logging
from datetime import datetime
from typing import List, Optional

import psycopg

from mat_backend.config import settings
from mat_backend.domain.models.client import Client, RevenueRecord, SyncStatus
from mat_backend.domain.ports.client_repository_port import ClientRepositoryPort

logger = logging.getLogger(__name__)

CLIENT_COLUMNS = """
    client_id, company_id, user_id, name, email, phone, company_name,
    address, city, state, zip, status, stage, monthly_contract_value,
    initial_amount_collected, close_date, ghl_contact_id, sync_status,
    last_synced_to_ghl, created_at
"""


def _row_to_client(row) -> Client:
    return Client(
        client_id=row[0],
        company_id=row[1],
        user_id=row[2],
        name=row[3],
        email=row[4] or "",
        phone=row[5] or "",
        company_name=row[6] or "",
        address=row[7] or "",
        city=row[8] or "",
        state=row[9] or "",
        zip=row[10] or "",
        status=row[11],
        stage=row[12],
        monthly_contract_value=float(row[13] or 0),
        initial_amount_collected=float(row[14] or 0),
        close_date=row[15],
        ghl_contact_id=row[16],
        sync_status=row[17],
        last_synced_to_ghl=row[18],
        created_at=row[19],
    )


class PostgresClientRepository(ClientRepositoryPort):
    """
    Acces aux clients dans PostgreSQL.
    Utilise psycopg3 async, une connexion par operation.
    """

    async def create(self, client: Client) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    INSERT INTO clients (
                        client_id, company_id, user_id, name, email, phone,
                        company_name, address, city, state, zip, status, stage,
                        monthly_contract_value, initial_amount_collected,
                        close_date, ghl_contact_id, sync_status, last_synced_to_ghl
                    ) VALUES (
                        %s, %s, %s, %s, %s, %s, %s, %s, %s, %s,
                        %s, %s, %s, %s, %s, %s, %s, %s, %s
                    )
                    """,
                    (
                        client.client_id,
                        client.company_id,
                        client.user_id,
                        client.name,
                        client.email,
                        client.phone,
                        client.company_name,
                        client.address,
                        client.city,
                        client.state,
                        client.zip,
                        client.status,
                        client.stage,
                        client.monthly_contract_value,
                        client.initial_amount_collected,
                        client.close_date,
                        client.ghl_contact_id,
                        client.sync_status,
                        client.last_synced_to_ghl,
                    ),
                )
            await conn.commit()

    async def get_by_id(self, client_id: str) -> Optional[Client]:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"SELECT {CLIENT_COLUMNS} FROM clients WHERE client_id = %s",
                    (client_id,),
                )
                row = await cur.fetchone()
                return _row_to_client(row) if row else None

    async def get_by_ghl_contact_id(
        self, ghl_contact_id: str, company_id: Optional[str] = None
    ) -> Optional[Client]:
        query = f"SELECT {CLIENT_COLUMNS} FROM clients WHERE ghl_contact_id = %s"
        params = [ghl_contact_id]
        if company_id is not None:
            query += " AND company_id = %s"
            params.append(company_id)

        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(query + " LIMIT 1", params)
                row = await cur.fetchone()
                return _row_to_client(row) if row else None

    async def list_pending_sync(self, company_id: str) -> List[Client]:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"""
                    SELECT {CLIENT_COLUMNS}
                    FROM clients
                    WHERE company_id = %s
                      AND (sync_status IS NULL OR sync_status IN (%s, %s))
                    ORDER BY created_at
                    """,
                    (company_id, SyncStatus.PENDING.value, SyncStatus.ERROR.value),
                )
                rows = await cur.fetchall()
                return [_row_to_client(row) for row in rows]

    async def mark_synced(self, client_id: str, ghl_contact_id: str, synced_at: datetime) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    UPDATE clients
                    SET ghl_contact_id = %s, last_synced_to_ghl = %s, sync_status = %s
                    WHERE client_id = %s
                    """,
                    (ghl_contact_id, synced_at, SyncStatus.SYNCED.value, client_id),
                )
            await conn.commit()

    async def mark_sync_error(self, client_id: str) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    "UPDATE clients SET sync_status = %s WHERE client_id = %s",
                    (SyncStatus.ERROR.value, client_id),
                )
            await conn.commit()

    async def update_status(self, client_id: str, status: str, unlink: bool = False) -> None:
        query = "UPDATE clients SET status = %s"
        if unlink:
            query += ", ghl_contact_id = NULL"

        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(query + " WHERE client_id = %s", (status, client_id))
            await conn.commit()

    async def upsert_revenue(self, record: RevenueRecord) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    INSERT INTO revenue_tracking (
                        revenue_id, company_id, client_id, user_id,
                        ghl_opportunity_id, deal_amount, deal_status,
                        product_name, closed_date
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                    ON CONFLICT (ghl_opportunity_id) DO UPDATE SET
                        deal_amount = EXCLUDED.deal_amount,
                        deal_status = EXCLUDED.deal_status,
                        product_name = EXCLUDED.product_name,
                        closed_date = EXCLUDED.closed_date,
                        updated_at = NOW()
                    """,
                    (
                        record.revenue_id,
                        record.company_id,
                        record.client_id,
                        record.user_id,
                        record.ghl_opportunity_id,
                        record.deal_amount,
                        record.deal_status,
                        record.product_name,
                        record.closed_date,
                    ),
                )
            await conn.commit()

        logger.info(f"Revenue record for opportunity {record.ghl_opportunity_id} saved ({record.deal_status})")
