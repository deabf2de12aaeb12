"""
Company registry service.

Coordinates the operations of the network registry:
1. Onboarding a company once per tax id
2. Recording transfers against an existing company
3. Reporting on the rolling "last month" window
4. Administrative deletion

This is the primary interface used by the API routes. It only talks to
the store ports, never to the ORM.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable

from empresas.domain.errors import DuplicateKeyError, NotFoundError, ReferenceNotFoundError
from empresas.domain.models import Category, Company, DeletionResult, Transfer, utcnow
from empresas.domain.ports import CompanyStore, TransferStore
from empresas.domain.window import last_month_cutoff

logger = logging.getLogger(__name__)


class RegistryService:
    """
    Business operations over companies and their transfers.

    Example:
        service = RegistryService(
            companies=SqlAlchemyCompanyStore(session),
            transfers=SqlAlchemyTransferStore(session),
        )

        company = await service.onboard("30123456700", "Test Pyme SRL", Category.SMALL_BUSINESS)
        await service.record_transfer(company.tax_id, amount=Decimal("1500.00"))
    """

    def __init__(
        self,
        companies: CompanyStore,
        transfers: TransferStore,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """
        Initialize registry service.

        Args:
            companies: Company store port
            transfers: Transfer store port
            clock: Source of "now" for defaults and the reporting window
        """
        self.companies = companies
        self.transfers = transfers
        self.clock = clock

    async def onboard(
        self,
        tax_id: str,
        name: str,
        category: Category,
        joined_at: datetime | None = None,
    ) -> Company:
        """
        Register a company for the first time.

        The lookup is a fast path for a clean error; the store's primary
        key still rejects a concurrent insert of the same tax id.

        Args:
            tax_id: CUIT of the company
            name: Company name
            category: Small business or corporate
            joined_at: Backfilled join date (defaults to now)

        Returns:
            The persisted company

        Raises:
            DuplicateKeyError: If a company with this tax id already exists
        """
        if await self.companies.find_by_tax_id(tax_id) is not None:
            logger.warning(f"Rejected duplicate onboarding for tax id {tax_id}")
            raise DuplicateKeyError(tax_id)

        company = Company(
            tax_id=tax_id,
            name=name,
            category=category,
            joined_at=joined_at or self.clock(),
        )
        saved = await self.companies.save(company)
        logger.info(f"Onboarded company {saved.tax_id} ({saved.category.value})")
        return saved

    async def record_transfer(
        self,
        company_tax_id: str,
        amount: Decimal | None = None,
        occurred_at: datetime | None = None,
    ) -> Transfer:
        """
        Record a transfer for an existing company.

        Raises:
            ReferenceNotFoundError: If no company exists with this tax id
        """
        if await self.companies.find_by_tax_id(company_tax_id) is None:
            logger.warning(f"Rejected transfer for unknown tax id {company_tax_id}")
            raise ReferenceNotFoundError(company_tax_id)

        transfer = Transfer(
            company_tax_id=company_tax_id,
            occurred_at=occurred_at or self.clock(),
            amount=amount,
        )
        saved = await self.transfers.save(transfer)
        logger.info(f"Recorded transfer {saved.id} for company {company_tax_id}")
        return saved

    def window_cutoff(self) -> datetime:
        """Inclusive start of the current "last month" window."""
        return last_month_cutoff(self.clock())

    async def companies_joined_last_month(self) -> list[Company]:
        """Companies whose join date falls inside the window."""
        return await self.companies.find_joined_since(self.window_cutoff())

    async def companies_with_transfers_last_month(self) -> list[Company]:
        """Companies with at least one transfer inside the window, each once."""
        return await self.companies.find_with_transfers_since(self.window_cutoff())

    async def transfers_last_month(self) -> list[Transfer]:
        return await self.transfers.find_since(self.window_cutoff())

    async def companies_by_category(self, category: Category) -> list[Company]:
        return await self.companies.find_by_category(category)

    async def transfers_for_company(self, tax_id: str) -> list[Transfer]:
        """
        Transfers of a company, oldest first.

        Raises:
            NotFoundError: If no company exists with this tax id
        """
        if await self.companies.find_by_tax_id(tax_id) is None:
            raise NotFoundError(tax_id)
        return await self.transfers.find_by_company(tax_id)

    async def delete_company(self, tax_id: str) -> DeletionResult:
        """
        Remove a company and its transfers (test-support only).

        Raises:
            NotFoundError: If nothing was deleted
        """
        deleted = await self.companies.delete(tax_id)
        if deleted == 0:
            logger.warning(f"Delete requested for unknown tax id {tax_id}")
            raise NotFoundError(tax_id)

        logger.info(f"Deleted company {tax_id}")
        return DeletionResult(
            tax_id=tax_id,
            message=f"Company with tax id {tax_id} deleted",
        )
