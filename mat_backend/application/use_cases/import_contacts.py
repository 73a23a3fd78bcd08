"""Use case: Import des contacts GoHighLevel en clients MAT (insert-only)."""

import logging
from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from mat_backend.application.use_cases.integration_gate import IntegrationGate
from mat_backend.domain.exceptions import CrmApiError
from mat_backend.domain.models.client import Client, SyncStatus
from mat_backend.domain.models.sync import CrmContact, CrmTransaction, ImportSummary, derive_financials
from mat_backend.domain.ports.client_repository_port import ClientRepositoryPort
from mat_backend.domain.ports.crm_client_port import CrmClientFactory, CrmClientPort
from mat_backend.domain.ports.integration_repository_port import IntegrationRepositoryPort

logger = logging.getLogger(__name__)


class ImportContactsUseCase:
    """
    Importe tous les contacts d'une location GoHighLevel.

    Etapes:
    1. Recupere toutes les pages de contacts et de transactions
    2. Regroupe les transactions reussies par contact
    3. Insere un client par contact inconnu (jamais de mise a jour d'un lien existant)
    4. Met a jour last_sync_at de l'integration

    Un contact en echec est compte comme ignore: le lot n'est jamais interrompu.
    """

    def __init__(
        self,
        gate: IntegrationGate,
        client_repo: ClientRepositoryPort,
        integration_repo: IntegrationRepositoryPort,
        crm_client_factory: CrmClientFactory,
        page_size: int = 100,
    ):
        self._gate = gate
        self._client_repo = client_repo
        self._integration_repo = integration_repo
        self._crm_client_factory = crm_client_factory
        self._page_size = page_size

    async def execute(self, company_id: str, user_id: Optional[str] = None) -> ImportSummary:
        credential = await self._gate.require_active(company_id)

        crm = self._crm_client_factory(credential)
        try:
            contacts = await self._fetch_contacts(crm)
            transactions = await self._fetch_transactions(crm)
        finally:
            await crm.close()

        by_contact = self._group_by_contact(transactions)
        summary = ImportSummary(total_found=len(contacts))
        today = date.today()

        for contact in contacts:
            if not contact.contact_id:
                summary.skipped += 1
                continue
            try:
                existing = await self._client_repo.get_by_ghl_contact_id(contact.contact_id, company_id)
                if existing is not None:
                    summary.skipped += 1
                    continue
                client = self._to_client(
                    contact,
                    by_contact.get(contact.contact_id, []),
                    company_id,
                    user_id,
                    today,
                )
                await self._client_repo.create(client)
                summary.imported += 1
            except Exception as e:
                logger.warning(f"Failed to import GHL contact {contact.contact_id}: {e}")
                summary.skipped += 1

        await self._integration_repo.touch_last_sync(company_id, datetime.now(timezone.utc))

        if summary.imported == 0:
            logger.info(f"No new contacts imported for company {company_id} ({summary.total_found} found)")
        else:
            logger.info(
                f"Imported {summary.imported} contacts for company {company_id} "
                f"(skipped={summary.skipped}, found={summary.total_found})"
            )
        return summary

    async def _fetch_contacts(self, crm: CrmClientPort) -> List[CrmContact]:
        contacts: List[CrmContact] = []
        cursor: Optional[str] = None
        while True:
            page = await crm.list_contacts(limit=self._page_size, start_after_id=cursor)
            contacts.extend(page)
            if len(page) < self._page_size:
                break
            cursor = page[-1].contact_id
            if not cursor:
                break
        logger.info(f"Fetched {len(contacts)} GHL contacts")
        return contacts

    async def _fetch_transactions(self, crm: CrmClientPort) -> List[CrmTransaction]:
        transactions: List[CrmTransaction] = []
        offset = 0
        while True:
            try:
                page = await crm.list_transactions(limit=self._page_size, offset=offset)
            except CrmApiError as e:
                # Les contacts restent importables sans donnees financieres completes
                logger.warning(f"Error fetching GHL transactions at offset {offset}, stopping: {e}")
                break
            transactions.extend(t for t in page if t.is_successful)
            if len(page) < self._page_size:
                break
            offset += self._page_size
        logger.info(f"Fetched {len(transactions)} successful GHL transactions")
        return transactions

    def _group_by_contact(self, transactions: List[CrmTransaction]) -> Dict[str, List[CrmTransaction]]:
        grouped: Dict[str, List[CrmTransaction]] = defaultdict(list)
        for transaction in transactions:
            if transaction.contact_id:
                grouped[transaction.contact_id].append(transaction)
        return grouped

    def _to_client(
        self,
        contact: CrmContact,
        transactions: List[CrmTransaction],
        company_id: str,
        user_id: Optional[str],
        today: date,
    ) -> Client:
        financials = derive_financials(transactions, today=today)
        return Client.create(
            company_id=company_id,
            user_id=user_id,
            name=contact.display_name,
            email=contact.email,
            phone=contact.phone,
            company_name=contact.company_name,
            address=contact.address,
            city=contact.city,
            state=contact.state,
            zip=contact.postal_code,
            stage=financials.stage,
            monthly_contract_value=financials.monthly_contract_value,
            initial_amount_collected=financials.one_time_revenue,
            close_date=financials.close_date,
            ghl_contact_id=contact.contact_id,
            sync_status=SyncStatus.SYNCED.value,
            last_synced_to_ghl=datetime.now(timezone.utc),
        )
