"""Repository pour les entreprises dans PostgreSQL."""

import logging
from datetime import datetime
from typing import Optional

import psycopg

from mat_backend.config import settings
from mat_backend.domain.models.company import Company
from mat_backend.domain.ports.company_repository_port import CompanyRepositoryPort

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = """
    company_id, name, max_users, plan, subscription_tier, owner_id,
    stripe_customer_id, stripe_subscription_id, sponsored_by_user_id,
    is_gifted_account, gifted_at, account_status, cancellation_requested_at,
    created_at
"""


class PostgresCompanyRepository(CompanyRepositoryPort):
    """
    Acces aux entreprises dans PostgreSQL.
    Utilise psycopg3 async, une connexion par operation.
    """

    async def create(self, company: Company) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    INSERT INTO companies (
                        company_id, name, max_users, plan, subscription_tier,
                        owner_id, stripe_customer_id, stripe_subscription_id,
                        sponsored_by_user_id, is_gifted_account, gifted_at,
                        account_status
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        company.company_id,
                        company.name,
                        company.max_users,
                        company.plan,
                        company.subscription_tier,
                        company.owner_id,
                        company.stripe_customer_id,
                        company.stripe_subscription_id,
                        company.sponsored_by_user_id,
                        company.is_gifted_account,
                        company.gifted_at,
                        company.account_status,
                    ),
                )
            await conn.commit()

        logger.info(f"Company '{company.name}' ({company.company_id}) created")

    async def get_by_id(self, company_id: str) -> Optional[Company]:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"SELECT {COMPANY_COLUMNS} FROM companies WHERE company_id = %s",
                    (company_id,),
                )
                row = await cur.fetchone()

                if row:
                    return Company(
                        company_id=row[0],
                        name=row[1],
                        max_users=row[2],
                        plan=row[3],
                        subscription_tier=row[4],
                        owner_id=row[5],
                        stripe_customer_id=row[6],
                        stripe_subscription_id=row[7],
                        sponsored_by_user_id=row[8],
                        is_gifted_account=row[9],
                        gifted_at=row[10],
                        account_status=row[11],
                        cancellation_requested_at=row[12],
                        created_at=row[13],
                    )
                return None

    async def delete(self, company_id: str) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    "DELETE FROM companies WHERE company_id = %s",
                    (company_id,),
                )
            await conn.commit()

        logger.info(f"Company {company_id} deleted")

    async def clear_subscription(self, company_id: str, cancelled_at: datetime) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    UPDATE companies
                    SET stripe_subscription_id = NULL,
                        cancellation_requested_at = %s,
                        updated_at = NOW()
                    WHERE company_id = %s
                    """,
                    (cancelled_at, company_id),
                )
            await conn.commit()
