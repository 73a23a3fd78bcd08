"""
Configuration centralisee pour le backend Massive Action Tracker

Ce fichier charge toutes les variables d'environnement et fournit
une interface unique pour acceder a la configuration.
"""

import os
from dotenv import load_dotenv

# Charger les variables d'environnement depuis .env
load_dotenv()


class Settings:
    """
    Classe de configuration centralisee.
    Toutes les variables d'environnement sont accessibles via cette classe.
    """

    # === CONFIGURATION POSTGRESQL ===
    POSTGRES_HOST: str = os.getenv("POSTGRES_HOST", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "massive_action")
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "postgres")

    # === CONFIGURATION SUPABASE (fournisseur d'identite) ===
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "http://localhost:54321")
    SUPABASE_SERVICE_ROLE_KEY: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")

    # === CONFIGURATION STRIPE ===
    STRIPE_SECRET_KEY: str = os.getenv("STRIPE_SECRET_KEY", "")
    STRIPE_WEBHOOK_SECRET: str = os.getenv("STRIPE_WEBHOOK_SECRET", "")

    # === CONFIGURATION NOTIFICATIONS ===
    RESEND_API_KEY: str = os.getenv("RESEND_API_KEY", "")
    RESEND_API_URL: str = os.getenv("RESEND_API_URL", "https://api.resend.com/emails")
    NOTIFICATION_EMAIL_FROM: str = os.getenv(
        "NOTIFICATION_EMAIL_FROM", "TrueXpanse <notifications@truexpanse.com>"
    )
    NOTIFICATION_EMAIL_TO: str = os.getenv("NOTIFICATION_EMAIL_TO", "")
    GHL_WEBHOOK_URL: str = os.getenv("GHL_WEBHOOK_URL", "")  # vide = desactive

    # === CONFIGURATION GOHIGHLEVEL ===
    GHL_API_BASE_URL: str = os.getenv("GHL_API_BASE_URL", "https://services.leadconnectorhq.com")
    GHL_API_VERSION: str = os.getenv("GHL_API_VERSION", "2021-07-28")
    GHL_PAGE_SIZE: int = int(os.getenv("GHL_PAGE_SIZE", "100"))
    GHL_CONTACT_TAG: str = os.getenv("GHL_CONTACT_TAG", "mat-prospect")

    # === APPELS EXTERNES ET COMPENSATION ===
    EXTERNAL_CALL_TIMEOUT_SECONDS: float = float(os.getenv("EXTERNAL_CALL_TIMEOUT_SECONDS", "15"))
    COMPENSATION_MAX_ATTEMPTS: int = int(os.getenv("COMPENSATION_MAX_ATTEMPTS", "1"))
    COMPENSATION_BACKOFF_SECONDS: float = float(os.getenv("COMPENSATION_BACKOFF_SECONDS", "0.5"))

    # === REGLES DE PROVISIONING ===
    MIN_PASSWORD_LENGTH: int = int(os.getenv("MIN_PASSWORD_LENGTH", "6"))

    # === SERVEUR ===
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")  # liste separee par des virgules

    @classmethod
    def get_postgres_uri(cls) -> str:
        """
        Construit l'URI de connexion PostgreSQL.
        Priorite a DATABASE_URL si definie.
        """
        return os.getenv(
            "DATABASE_URL",
            f"postgresql://{cls.POSTGRES_USER}:{cls.POSTGRES_PASSWORD}@"
            f"{cls.POSTGRES_HOST}:{cls.POSTGRES_PORT}/{cls.POSTGRES_DB}"
        )

    @classmethod
    def get_masked_postgres_uri(cls) -> str:
        """Retourne l'URI avec le mot de passe masque pour l'affichage."""
        uri = cls.get_postgres_uri()
        return uri.replace(cls.POSTGRES_PASSWORD, "***") if cls.POSTGRES_PASSWORD else uri


# Instance globale pour import facile
settings = Settings()
