"""Routes de gestion de l'integration GoHighLevel d'une entreprise."""

import logging

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from mat_backend.application.use_cases.manage_integration import (
    ConnectIntegrationUseCase,
    DisconnectIntegrationUseCase,
    CheckIntegrationUseCase,
)
from mat_backend.domain.exceptions import ProvisioningError, SyncError
from mat_backend.domain.models.integration import (
    IntegrationCompanyRequest,
    IntegrationConnect,
    IntegrationResponse,
)
from mat_backend.infrastructure.container import Container
from mat_backend.routes.errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/integrations/ghl", tags=["integrations"])


@router.post("/connect", response_model=IntegrationResponse)
@inject
async def connect_integration(
    request: IntegrationConnect,
    use_case: ConnectIntegrationUseCase = Depends(Provide[Container.connect_integration]),
):
    """Enregistre (ou remplace) la cle API de l'entreprise et active l'integration."""
    try:
        credential = await use_case.execute(request.company_id, request.api_key, request.location_id)
    except ProvisioningError as e:
        raise to_http_exception(e)

    return IntegrationResponse(
        message="Integration saved successfully",
        company_id=credential.company_id,
        is_active=credential.is_active,
    )


@router.post("/disconnect", response_model=IntegrationResponse)
@inject
async def disconnect_integration(
    request: IntegrationCompanyRequest,
    use_case: DisconnectIntegrationUseCase = Depends(Provide[Container.disconnect_integration]),
):
    try:
        await use_case.execute(request.company_id)
    except (ProvisioningError, SyncError) as e:
        raise to_http_exception(e)

    return IntegrationResponse(
        message="Integration disconnected",
        company_id=request.company_id,
        is_active=False,
    )


@router.post("/test", response_model=IntegrationResponse)
@inject
async def check_integration(
    request: IntegrationConnect,
    use_case: CheckIntegrationUseCase = Depends(Provide[Container.check_integration]),
):
    """Teste la cle fournie (ou enregistree) en recuperant la location GoHighLevel."""
    try:
        location_name = await use_case.execute(request.company_id, request.api_key, request.location_id)
    except (ProvisioningError, SyncError) as e:
        raise to_http_exception(e)

    return IntegrationResponse(
        message=f"Connection successful! Connected to location: {location_name}",
        company_id=request.company_id,
        is_active=True,
        location_name=location_name,
    )
