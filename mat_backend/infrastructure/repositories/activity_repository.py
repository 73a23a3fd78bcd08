"""Repository pour les activites et rendez-vous dans PostgreSQL."""

import logging
from typing import Optional

import psycopg

from mat_backend.config import settings
from mat_backend.domain.models.client import Activity, Appointment
from mat_backend.domain.ports.activity_repository_port import ActivityRepositoryPort

logger = logging.getLogger(__name__)

APPOINTMENT_COLUMNS = """
    appointment_id, company_id, user_id, client_id, title,
    start_time, end_time, status, ghl_event_id
"""


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _row_to_appointment(row) -> Appointment:
    return Appointment(
        appointment_id=row[0],
        company_id=row[1],
        user_id=row[2],
        client_id=row[3],
        title=row[4],
        start_time=_iso(row[5]),
        end_time=_iso(row[6]),
        status=row[7],
        ghl_event_id=row[8],
    )


class PostgresActivityRepository(ActivityRepositoryPort):
    """
    Acces aux activites et rendez-vous dans PostgreSQL.
    Les horaires sont exposes au domaine en ISO 8601.
    """

    async def get_activity(self, activity_id: str) -> Optional[Activity]:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    SELECT activity_id, company_id, user_id, client_id,
                           activity_type, activity_date, notes
                    FROM activities
                    WHERE activity_id = %s
                    """,
                    (activity_id,),
                )
                row = await cur.fetchone()

                if row:
                    return Activity(
                        activity_id=row[0],
                        company_id=row[1],
                        user_id=row[2],
                        client_id=row[3],
                        activity_type=row[4],
                        activity_date=row[5],
                        notes=row[6],
                    )
                return None

    async def get_appointment(self, appointment_id: str) -> Optional[Appointment]:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"SELECT {APPOINTMENT_COLUMNS} FROM appointments WHERE appointment_id = %s",
                    (appointment_id,),
                )
                row = await cur.fetchone()
                return _row_to_appointment(row) if row else None

    async def get_appointment_by_event_id(self, ghl_event_id: str) -> Optional[Appointment]:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"SELECT {APPOINTMENT_COLUMNS} FROM appointments WHERE ghl_event_id = %s",
                    (ghl_event_id,),
                )
                row = await cur.fetchone()
                return _row_to_appointment(row) if row else None

    async def create_appointment(self, appointment: Appointment) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    INSERT INTO appointments (
                        appointment_id, company_id, user_id, client_id, title,
                        start_time, end_time, status, ghl_event_id
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        appointment.appointment_id,
                        appointment.company_id,
                        appointment.user_id,
                        appointment.client_id,
                        appointment.title,
                        appointment.start_time,
                        appointment.end_time,
                        appointment.status,
                        appointment.ghl_event_id,
                    ),
                )
            await conn.commit()

    async def update_appointment(self, appointment: Appointment) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    UPDATE appointments
                    SET title = %s, start_time = %s, end_time = %s,
                        status = %s, updated_at = NOW()
                    WHERE appointment_id = %s
                    """,
                    (
                        appointment.title,
                        appointment.start_time,
                        appointment.end_time,
                        appointment.status,
                        appointment.appointment_id,
                    ),
                )
            await conn.commit()

    async def set_appointment_event_id(self, appointment_id: str, ghl_event_id: str) -> None:
        async with await psycopg.AsyncConnection.connect(
            settings.get_postgres_uri()
        ) as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    UPDATE appointments
                    SET ghl_event_id = %s, updated_at = NOW()
                    WHERE appointment_id = %s
                    """,
                    (ghl_event_id, appointment_id),
                )
            await conn.commit()
