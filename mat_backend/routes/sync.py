"""
Routes de synchronisation GoHighLevel.

Elles exposent les points d'entree de GhlSyncFacade: une integration
inactive n'est pas une erreur HTTP, le resultat vaut simplement False / 0.
"""

import logging
from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query

from mat_backend.application.use_cases.ghl_sync_facade import GhlSyncFacade
from mat_backend.domain.exceptions import SyncError
from mat_backend.infrastructure.container import Container
from mat_backend.routes.errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sync", tags=["sync"])


@router.post("/clients/{client_id}")
@inject
async def sync_client(
    client_id: str,
    facade: GhlSyncFacade = Depends(Provide[Container.ghl_sync_facade]),
):
    synced = await facade.sync_client(client_id)
    return {"success": True, "synced": synced}


@router.post("/activities/{activity_id}")
@inject
async def log_activity(
    activity_id: str,
    facade: GhlSyncFacade = Depends(Provide[Container.ghl_sync_facade]),
):
    logged = await facade.log_activity(activity_id)
    return {"success": True, "synced": logged}


@router.post("/appointments/{appointment_id}")
@inject
async def create_appointment(
    appointment_id: str,
    facade: GhlSyncFacade = Depends(Provide[Container.ghl_sync_facade]),
):
    created = await facade.create_appointment(appointment_id)
    return {"success": True, "synced": created}


@router.post("/companies/{company_id}/pending")
@inject
async def sync_pending_clients(
    company_id: str,
    facade: GhlSyncFacade = Depends(Provide[Container.ghl_sync_facade]),
):
    """Synchronise tous les clients en attente ou en erreur de l'entreprise."""
    synced = await facade.sync_pending_clients(company_id)
    return {"success": True, "synced": synced}


@router.post("/companies/{company_id}/import")
@inject
async def import_contacts(
    company_id: str,
    user_id: Optional[str] = Query(None, alias="userId", description="Proprietaire des clients importes"),
    facade: GhlSyncFacade = Depends(Provide[Container.ghl_sync_facade]),
):
    """Importe les contacts GoHighLevel (insert-only) avec leurs indicateurs de revenu."""
    try:
        summary = await facade.import_all_contacts(company_id, user_id)
    except SyncError as e:
        raise to_http_exception(e)

    return {
        "success": True,
        "imported": summary.imported,
        "skipped": summary.skipped,
        "totalFound": summary.total_found,
    }
