"""Use case: Creation d'un compte autonome sponsorise (offert via GHL ou facture Stripe)."""

import logging
from typing import Optional

from mat_backend.application.saga import NO_RETRY, RetryPolicy, Saga
from mat_backend.application.validation import require_fields, validate_credentials
from mat_backend.domain.exceptions import (
    CompanyCreationFailed,
    DuplicateAccount,
    IdentityCreationFailed,
    UserRecordCreationFailed,
)
from mat_backend.domain.models.company import ACCOUNT_ACTIVE, Company
from mat_backend.domain.models.provisioning import ProvisioningResult, SponsoredAccountCreate
from mat_backend.domain.models.user import UserRecord, UserRole
from mat_backend.domain.ports.company_repository_port import CompanyRepositoryPort
from mat_backend.domain.ports.identity_provider_port import IdentityProviderPort
from mat_backend.domain.ports.user_repository_port import UserRepositoryPort

logger = logging.getLogger(__name__)


class CreateSponsoredAccountUseCase:
    """
    Identite confirmee -> entreprise sponsorisee -> profil "Sales Rep".

    La configuration de l'entreprise (sieges, tier, offert ou non) est
    derivee par Company.create_sponsored().
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

    async def execute(self, request: SponsoredAccountCreate) -> ProvisioningResult:
        require_fields({
            "sponsorUserId": request.sponsor_user_id,
            "email": request.email,
            "name": request.name,
            "companyName": request.company_name,
            "password": request.password,
        })
        email = validate_credentials(request.email, request.password, self._min_password_length)

        if await self._user_repo.email_exists(email):
            raise DuplicateAccount(email)

        logger.info(
            f"Creating sponsored account {email} "
            f"(billing={request.billing_type}, plan={request.plan}, sponsor={request.sponsor_user_id})"
        )
        saga = Saga("sponsored-account", timeout=self._timeout, retry_policy=self._retry_policy)

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

        company = Company.create_sponsored(
            name=request.company_name,
            sponsor_user_id=request.sponsor_user_id,
            billing_type=request.billing_type,
            plan=request.plan,
        )
        company.owner_id = identity.identity_id
        await saga.step(
            "company",
            lambda: self._company_repo.create(company),
            compensation=lambda _: self._company_repo.delete(company.company_id),
            error=CompanyCreationFailed,
        )

        user = UserRecord.for_identity(
            identity,
            name=request.name,
            company_id=company.company_id,
            role=UserRole.SALES_REP,
            status=ACCOUNT_ACTIVE,
        )
        await saga.step("user_record", lambda: self._user_repo.create(user), error=UserRecordCreationFailed)

        logger.info(
            f"Sponsored account created: user={user.user_id}, company={company.company_id}, "
            f"gifted={company.is_gifted_account}"
        )
        return ProvisioningResult(user_id=user.user_id, company_id=company.company_id)
