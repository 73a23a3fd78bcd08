"""Use case: Ajout d'un membre d'equipe dans une entreprise existante."""

import logging
from typing import Optional

from mat_backend.application.saga import NO_RETRY, RetryPolicy, Saga
from mat_backend.application.validation import require_fields, validate_credentials
from mat_backend.domain.exceptions import (
    CompanyNotFound,
    DuplicateAccount,
    IdentityCreationFailed,
    SeatLimitReached,
    UserRecordCreationFailed,
)
from mat_backend.domain.models.company import ACCOUNT_ACTIVE
from mat_backend.domain.models.provisioning import ProvisioningResult, TeamMemberCreate
from mat_backend.domain.models.user import UserRecord, UserRole
from mat_backend.domain.ports.company_repository_port import CompanyRepositoryPort
from mat_backend.domain.ports.identity_provider_port import IdentityProviderPort
from mat_backend.domain.ports.user_repository_port import UserRepositoryPort

logger = logging.getLogger(__name__)


class CreateTeamMemberUseCase:
    """
    Cree une identite confirmee puis son profil "Sales Rep" dans l'entreprise.

    Pas d'etape entreprise: si le profil echoue, seule l'identite est supprimee.
    """

    def __init__(
        self,
        identity_provider: IdentityProviderPort,
        company_repo: CompanyRepositoryPort,
        user_repo: UserRepositoryPort,
        min_password_length: int = 6,
        timeout: Optional[float] = None,
        retry_policy: RetryPolicy = NO_RETRY,
    ):
        self._identity_provider = identity_provider
        self._company_repo = company_repo
        self._user_repo = user_repo
        self._min_password_length = min_password_length
        self._timeout = timeout
        self._retry_policy = retry_policy

    async def execute(self, request: TeamMemberCreate) -> ProvisioningResult:
        require_fields({
            "companyId": request.company_id,
            "email": request.email,
            "name": request.name,
            "password": request.password,
        })
        email = validate_credentials(request.email, request.password, self._min_password_length)

        if await self._user_repo.email_exists(email):
            raise DuplicateAccount(email)

        company = await self._company_repo.get_by_id(request.company_id)
        if company is None:
            raise CompanyNotFound(request.company_id)

        user_count = await self._user_repo.count_by_company(company.company_id)
        if user_count >= company.max_users:
            raise SeatLimitReached(company.max_users)

        logger.info(f"Creating team member {email} for company {company.company_id}")
        saga = Saga("team-member", timeout=self._timeout, retry_policy=self._retry_policy)

        identity = await saga.step(
            "identity",
            lambda: self._identity_provider.create_identity(
                email=email,
                password=request.password,
                email_confirm=True,
                metadata={"name": request.name},
            ),
            compensation=lambda created: self._identity_provider.delete_identity(created.identity_id),
            error=IdentityCreationFailed,
        )

        user = UserRecord.for_identity(
            identity,
            name=request.name,
            company_id=company.company_id,
            role=UserRole.SALES_REP,
            status=ACCOUNT_ACTIVE,
        )
        await saga.step("user_record", lambda: self._user_repo.create(user), error=UserRecordCreationFailed)

        logger.info(f"Team member created: {user.user_id} ({email})")
        return ProvisioningResult(user_id=user.user_id, company_id=company.company_id)
