"""Routes de creation et suppression de comptes (initiees par un administrateur)."""

import logging

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from mat_backend.application.use_cases.create_sponsored_account import CreateSponsoredAccountUseCase
from mat_backend.application.use_cases.create_team_member import CreateTeamMemberUseCase
from mat_backend.application.use_cases.delete_user import DeleteUserUseCase
from mat_backend.domain.exceptions import ProvisioningError
from mat_backend.domain.models.provisioning import (
    DeleteUserRequest,
    ProvisioningResponse,
    SponsoredAccountCreate,
    TeamMemberCreate,
)
from mat_backend.infrastructure.container import Container
from mat_backend.routes.errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.post("/team-member", response_model=ProvisioningResponse)
@inject
async def create_team_member(
    request: TeamMemberCreate,
    use_case: CreateTeamMemberUseCase = Depends(Provide[Container.create_team_member]),
):
    """Ajoute un membre "Sales Rep" a une entreprise existante (identite confirmee)."""
    try:
        result = await use_case.execute(request)
    except ProvisioningError as e:
        raise to_http_exception(e)

    return ProvisioningResponse(
        message="Team member created successfully",
        user_id=result.user_id,
        company_id=result.company_id,
        email=request.email,
        name=request.name,
    )


@router.post("/standalone", response_model=ProvisioningResponse)
@inject
async def create_standalone_account(
    request: SponsoredAccountCreate,
    use_case: CreateSponsoredAccountUseCase = Depends(Provide[Container.create_sponsored_account]),
):
    """Cree un compte autonome sponsorise: offert (billingType=ghl) ou facture Stripe."""
    try:
        result = await use_case.execute(request)
    except ProvisioningError as e:
        raise to_http_exception(e)

    return ProvisioningResponse(
        message="Account created successfully",
        user_id=result.user_id,
        company_id=result.company_id,
        email=request.email,
        name=request.name,
    )


@router.post("/delete")
@inject
async def delete_user(
    request: DeleteUserRequest,
    use_case: DeleteUserUseCase = Depends(Provide[Container.delete_user]),
):
    try:
        await use_case.execute(request.user_id)
    except ProvisioningError as e:
        raise to_http_exception(e)

    return {"success": True, "message": "User deleted successfully"}
