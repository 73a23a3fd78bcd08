"""Use case: Provisioning d'un compte apres un paiement Stripe reussi."""

import asyncio
import logging
from typing import Optional

from mat_backend.application.saga import NO_RETRY, RetryPolicy, Saga
from mat_backend.domain.exceptions import (
    CompanyCreationFailed,
    DuplicateAccount,
    IdentityCreationFailed,
    InvalidTriggerPayload,
    UserRecordCreationFailed,
)
from mat_backend.domain.models.company import Company
from mat_backend.domain.models.provisioning import ProvisioningResult, ValidatedSignupPayload
from mat_backend.domain.models.user import UserRecord, UserRole
from mat_backend.domain.ports.company_repository_port import CompanyRepositoryPort
from mat_backend.domain.ports.identity_provider_port import IdentityProviderPort
from mat_backend.domain.ports.notifier_port import NotifierPort
from mat_backend.domain.ports.user_repository_port import UserRepositoryPort

logger = logging.getLogger(__name__)

SIGNUP_USER_STATUS = "Active"


class ProvisionPaidSignupUseCase:
    """
    Cree le triplet {Identity, Company, UserRecord} pour une inscription payee.

    Ordre: identite (non confirmee) -> entreprise -> profil utilisateur.
    Toute erreur compense les etapes deja realisees en ordre inverse.

    Idempotence: le webhook peut etre livre plusieurs fois. Si une identite
    existe deja pour l'email et que son profil existe, le provisioning est
    considere comme deja fait et les IDs existants sont retournes.
    """

    def __init__(
        self,
        identity_provider: IdentityProviderPort,
        company_repo: CompanyRepositoryPort,
        user_repo: UserRepositoryPort,
        notifier: NotifierPort,
        timeout: Optional[float] = None,
        retry_policy: RetryPolicy = NO_RETRY,
    ):
        self._identity_provider = identity_provider
        self._company_repo = company_repo
        self._user_repo = user_repo
        self._notifier = notifier
        self._timeout = timeout
        self._retry_policy = retry_policy

    async def execute(self, payload: ValidatedSignupPayload) -> ProvisioningResult:
        if not isinstance(payload, ValidatedSignupPayload):
            raise InvalidTriggerPayload("signup payload has not been validated")

        existing = await self._find_existing(payload.email)
        if existing is not None:
            logger.info(
                f"Signup for {payload.email} already provisioned "
                f"(user={existing.user_id}, company={existing.company_id}), skipping"
            )
            return existing

        saga = Saga("paid-signup", timeout=self._timeout, retry_policy=self._retry_policy)

        # 1. Identite, verification email requise sur ce parcours
        identity = await saga.step(
            "identity",
            lambda: self._identity_provider.create_identity(
                email=payload.email,
                password=payload.password,
                email_confirm=False,
                metadata={"full_name": payload.full_name},
            ),
            compensation=lambda created: self._identity_provider.delete_identity(created.identity_id),
            error=IdentityCreationFailed,
        )

        # 2. Entreprise
        company = Company.create_paid(
            name=payload.display_company_name,
            owner_id=identity.identity_id,
            plan=payload.plan_name,
            stripe_customer_id=payload.customer_id,
            stripe_subscription_id=payload.subscription_id,
        )
        await saga.step(
            "company",
            lambda: self._company_repo.create(company),
            compensation=lambda _: self._company_repo.delete(company.company_id),
            error=CompanyCreationFailed,
        )

        # 3. Profil utilisateur
        user = UserRecord.for_identity(
            identity,
            name=payload.full_name,
            company_id=company.company_id,
            role=UserRole.MANAGER,
            status=SIGNUP_USER_STATUS,
        )
        await saga.step("user_record", lambda: self._user_repo.create(user), error=UserRecordCreationFailed)

        logger.info(f"Provisioned {payload.email}: user={user.user_id}, company={company.company_id}")

        await self._notifier.notify_new_subscription(
            email=payload.email,
            name=payload.full_name,
            plan=payload.plan_name,
            company=payload.display_company_name,
        )
        await self._notifier.push_lead(
            email=payload.email,
            full_name=payload.full_name,
            company=payload.display_company_name,
            phone=payload.phone,
            plan=payload.plan_name,
        )

        return ProvisioningResult(user_id=user.user_id, company_id=company.company_id)

    async def _find_existing(self, email: str) -> Optional[ProvisioningResult]:
        try:
            identity = await asyncio.wait_for(
                self._identity_provider.find_by_email(email), timeout=self._timeout
            )
        except Exception as e:
            raise IdentityCreationFailed(f"identity lookup failed: {e}") from e

        if identity is None:
            return None

        user = await self._user_repo.get_by_id(identity.identity_id)
        if user is None:
            # Identite orpheline: on ne devine pas a quelle entreprise la rattacher
            raise DuplicateAccount(email)
        return ProvisioningResult(
            user_id=user.user_id,
            company_id=user.company_id,
            already_provisioned=True,
        )
