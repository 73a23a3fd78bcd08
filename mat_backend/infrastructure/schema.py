"""
Schema PostgreSQL du backend Massive Action Tracker.

Ce module fournit des fonctions pour:
1. Tester la connexion a PostgreSQL
2. Creer les tables necessaires (idempotent: CREATE ... IF NOT EXISTS)
"""

import logging

import psycopg

from mat_backend.config import settings

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS companies (
        company_id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        max_users INTEGER NOT NULL DEFAULT 10,
        plan TEXT,
        subscription_tier TEXT,
        owner_id TEXT,
        stripe_customer_id TEXT,
        stripe_subscription_id TEXT,
        sponsored_by_user_id TEXT,
        is_gifted_account BOOLEAN NOT NULL DEFAULT FALSE,
        gifted_at TIMESTAMPTZ,
        account_status TEXT NOT NULL DEFAULT 'active',
        cancellation_requested_at TIMESTAMPTZ,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        CONSTRAINT gifted_requires_sponsor
            CHECK (NOT is_gifted_account OR sponsored_by_user_id IS NOT NULL)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS users (
        user_id TEXT PRIMARY KEY,
        email TEXT NOT NULL UNIQUE,
        name TEXT NOT NULL,
        company_id TEXT NOT NULL REFERENCES companies(company_id),
        role TEXT NOT NULL,
        status TEXT NOT NULL DEFAULT 'active',
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS clients (
        client_id TEXT PRIMARY KEY,
        company_id TEXT NOT NULL REFERENCES companies(company_id),
        user_id TEXT,
        name TEXT NOT NULL,
        email TEXT,
        phone TEXT,
        company_name TEXT,
        address TEXT,
        city TEXT,
        state TEXT,
        zip TEXT,
        status TEXT,
        stage TEXT NOT NULL DEFAULT 'New',
        sales_process_length TEXT NOT NULL DEFAULT '0',
        monthly_contract_value NUMERIC(12, 2) NOT NULL DEFAULT 0,
        initial_amount_collected NUMERIC(12, 2) NOT NULL DEFAULT 0,
        close_date DATE,
        ghl_contact_id TEXT,
        sync_status TEXT,
        last_synced_to_ghl TIMESTAMPTZ,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    # Garde-fou de l'import insert-only: un contact GHL = un client par entreprise
    """
    CREATE UNIQUE INDEX IF NOT EXISTS clients_company_ghl_contact_idx
        ON clients (company_id, ghl_contact_id)
        WHERE ghl_contact_id IS NOT NULL
    """,
    """
    CREATE TABLE IF NOT EXISTS activities (
        activity_id TEXT PRIMARY KEY,
        company_id TEXT NOT NULL REFERENCES companies(company_id),
        user_id TEXT,
        client_id TEXT REFERENCES clients(client_id),
        activity_type TEXT NOT NULL,
        activity_date TEXT NOT NULL,
        notes TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS appointments (
        appointment_id TEXT PRIMARY KEY,
        company_id TEXT NOT NULL REFERENCES companies(company_id),
        user_id TEXT,
        client_id TEXT REFERENCES clients(client_id),
        title TEXT NOT NULL,
        start_time TIMESTAMPTZ,
        end_time TIMESTAMPTZ,
        status TEXT NOT NULL DEFAULT 'scheduled',
        ghl_event_id TEXT UNIQUE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ghl_integrations (
        integration_id TEXT PRIMARY KEY,
        company_id TEXT NOT NULL UNIQUE REFERENCES companies(company_id),
        ghl_api_key TEXT NOT NULL,
        ghl_location_id TEXT,
        is_active BOOLEAN NOT NULL DEFAULT TRUE,
        last_sync_at TIMESTAMPTZ,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS webhook_logs (
        log_id TEXT PRIMARY KEY,
        event_type TEXT,
        payload JSONB NOT NULL,
        processed BOOLEAN NOT NULL DEFAULT FALSE,
        error_message TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS revenue_tracking (
        revenue_id TEXT PRIMARY KEY,
        company_id TEXT NOT NULL REFERENCES companies(company_id),
        client_id TEXT REFERENCES clients(client_id),
        user_id TEXT,
        ghl_opportunity_id TEXT NOT NULL UNIQUE,
        deal_amount NUMERIC(12, 2) NOT NULL DEFAULT 0,
        deal_status TEXT NOT NULL,
        product_name TEXT,
        closed_date DATE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
]

TABLES = [
    "companies",
    "users",
    "clients",
    "activities",
    "appointments",
    "ghl_integrations",
    "webhook_logs",
    "revenue_tracking",
]


def check_connection() -> bool:
    """
    Teste la connexion a PostgreSQL.

    Returns:
        bool: True si la connexion est reussie, False sinon
    """
    try:
        with psycopg.connect(settings.get_postgres_uri()) as conn:
            conn.execute("SELECT 1")
        return True
    except psycopg.Error as e:
        logger.error(f"PostgreSQL connection failed: {e}")
        return False


def create_tables() -> None:
    """Cree toutes les tables et index (transaction unique)."""
    with psycopg.connect(settings.get_postgres_uri()) as conn:
        with conn.cursor() as cur:
            for statement in SCHEMA_STATEMENTS:
                cur.execute(statement)
        conn.commit()
    logger.info(f"Schema ready ({len(TABLES)} tables)")
