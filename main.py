#!/usr/bin/env python3
"""
Massive Action Tracker backend - Point d'entree principal

Ce script fournit une interface CLI unifiee pour lancer l'API et les
operations d'administration.

Usage:
    python main.py serve [--host HOST] [--port PORT]        Lance l'API HTTP
    python main.py setup-db                                 Cree le schema PostgreSQL
    python main.py import-contacts --company-id ID [--user-id ID]
                                                            Importe les contacts GoHighLevel
    python main.py sync-pending --company-id ID             Synchronise les clients en attente
"""

import argparse
import asyncio
import logging
import sys

from mat_backend.config import settings

# Configuration du logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
# Reduire le bruit des logs HTTP
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)


def print_error(message: str):
    """Affiche un message d'erreur formate."""
    print(f"\n[ERREUR] {message}", file=sys.stderr)


def print_success(message: str):
    """Affiche un message de succes formate."""
    print(f"\n[OK] {message}")


def run_serve(host: str, port: int):
    """Lance l'API FastAPI avec uvicorn."""
    try:
        import uvicorn

        print(f"Demarrage de l'API sur http://{host}:{port}")
        print(f"PostgreSQL: {settings.get_masked_postgres_uri()}")
        uvicorn.run("mat_backend.app:create_app", factory=True, host=host, port=port)
    except ImportError as e:
        print_error(f"Erreur d'import: {e}\nVerifiez que toutes les dependances sont installees: pip install -e .")
        sys.exit(1)


def run_setup_db():
    """Cree les tables PostgreSQL avec gestion des erreurs."""
    try:
        from mat_backend.infrastructure.schema import TABLES, check_connection, create_tables

        print(f"Connexion a {settings.get_masked_postgres_uri()}")
        if not check_connection():
            print_error("Connexion PostgreSQL impossible. Verifiez POSTGRES_* ou DATABASE_URL.")
            sys.exit(1)

        create_tables()
        print_success(f"Schema pret: {', '.join(TABLES)}")
    except KeyboardInterrupt:
        print("\nArret demande par l'utilisateur.")
        sys.exit(1)
    except Exception as e:
        print_error(f"Erreur inattendue: {e}")
        sys.exit(1)


def run_import_contacts(company_id: str, user_id: str = None):
    """
    Importe les contacts GoHighLevel d'une entreprise (insert-only).

    Args:
        company_id: ID de l'entreprise dont l'integration est active
        user_id: proprietaire des clients importes (optionnel)
    """
    try:
        from mat_backend.infrastructure.container import Container

        facade = Container().ghl_sync_facade()
        summary = asyncio.run(facade.import_all_contacts(company_id, user_id))

        print_success(
            f"Import termine: {summary.imported} importes, "
            f"{summary.skipped} ignores, {summary.total_found} trouves"
        )
    except KeyboardInterrupt:
        print("\nArret demande par l'utilisateur.")
        sys.exit(1)
    except Exception as e:
        print_error(f"Erreur lors de l'import: {e}")
        sys.exit(1)


def run_sync_pending(company_id: str):
    """Pousse vers GoHighLevel les clients en attente ou en erreur."""
    try:
        from mat_backend.infrastructure.container import Container

        facade = Container().ghl_sync_facade()
        synced = asyncio.run(facade.sync_pending_clients(company_id))

        print_success(f"{synced} client(s) synchronise(s)")
    except KeyboardInterrupt:
        print("\nArret demande par l'utilisateur.")
        sys.exit(1)
    except Exception as e:
        print_error(f"Erreur lors de la synchronisation: {e}")
        sys.exit(1)


def main():
    parser = argparse.ArgumentParser(
        description="Massive Action Tracker backend - CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemples:
  python main.py serve --port 8080                     # Lancer l'API
  python main.py setup-db                              # Initialiser PostgreSQL
  python main.py import-contacts --company-id acme_42  # Importer les contacts GHL
  python main.py sync-pending --company-id acme_42     # Rejouer les syncs en erreur
        """
    )

    parser.add_argument(
        "command",
        choices=["serve", "setup-db", "import-contacts", "sync-pending"],
        help="Commande a executer"
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Interface d'ecoute pour serve (defaut: API_HOST)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port pour serve (defaut: API_PORT)"
    )
    parser.add_argument(
        "--company-id",
        default=None,
        help="ID de l'entreprise (pour import-contacts et sync-pending)"
    )
    parser.add_argument(
        "--user-id",
        default=None,
        help="Proprietaire des clients importes (pour import-contacts)"
    )

    # Gerer le cas ou aucun argument n'est fourni
    if len(sys.argv) == 1:
        parser.print_help()
        sys.exit(0)

    args = parser.parse_args()

    if args.command == "serve":
        run_serve(args.host or settings.API_HOST, args.port or settings.API_PORT)

    elif args.command == "setup-db":
        run_setup_db()

    elif args.command in ("import-contacts", "sync-pending"):
        if not args.company_id:
            print_error(f"--company-id est requis pour {args.command}")
            sys.exit(1)
        if args.command == "import-contacts":
            run_import_contacts(args.company_id, args.user_id)
        else:
            run_sync_pending(args.company_id)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nArret demande par l'utilisateur.")
        sys.exit(0)
    except Exception as e:
        print_error(f"Erreur fatale: {e}")
        sys.exit(1)
