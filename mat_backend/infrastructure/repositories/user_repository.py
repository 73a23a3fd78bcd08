"""Repository pour les profils utilisateurs dans PostgreSQL."""

import logging
from typing import Optional

import psycopg

from mat_backend.config import settings
from mat_backend.domain.models.user import UserRecord
from mat_backend.domain.ports.user_repository_port import UserRepositoryPort

logger = logging.getLogger(__name__)


class PostgresUserRepository(UserRepositoryPort):
    """
    Acces aux profils utilisateurs dans PostgreSQL.
    Utilise psycopg3 async, meme pattern que CompanyRepository.
    """

    async def create(self, user: UserRecord) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    INSERT INTO users (
                        user_id, email, name, company_id, role, status
                    ) VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (
                        user.user_id,
                        user.email,
                        user.name,
                        user.company_id,
                        user.role,
                        user.status,
                    ),
                )
            await conn.commit()

        logger.info(f"User '{user.email}' ({user.user_id}) created for company {user.company_id}")

    async def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    SELECT user_id, email, name, company_id, role, status, created_at
                    FROM users
                    WHERE user_id = %s
                    """,
                    (user_id,),
                )
                row = await cur.fetchone()

                if row:
                    return UserRecord(
                        user_id=row[0],
                        email=row[1],
                        name=row[2],
                        company_id=row[3],
                        role=row[4],
                        status=row[5],
                        created_at=row[6],
                    )
                return None

    async def email_exists(self, email: str) -> bool:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    "SELECT 1 FROM users WHERE lower(email) = lower(%s) LIMIT 1",
                    (email,),
                )
                row = await cur.fetchone()
                return row is not None

    async def count_by_company(self, company_id: str) -> int:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    "SELECT COUNT(*) FROM users WHERE company_id = %s",
                    (company_id,),
                )
                row = await cur.fetchone()
                return row[0] if row else 0

    async def delete(self, user_id: str) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute("DELETE FROM users WHERE user_id = %s", (user_id,))
            await conn.commit()

        logger.info(f"User record {user_id} deleted")
