"""
SQLAlchemy adapters for the persistence ports.

Each write commits its own unit of work on the request session. Integrity
violations are classified by re-checking the row that caused them, so the
database constraint stays the source of truth for uniqueness and
references. Anything else from SQLAlchemy becomes StoreFailureError.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from empresas.domain.errors import (
    DuplicateKeyError,
    ReferenceNotFoundError,
    StoreFailureError,
)
from empresas.domain.models import Category, Company, Transfer
from empresas.domain.ports import CompanyStore, TransferStore

from .database import CompanyRecord, TransferRecord

logger = logging.getLogger(__name__)


@asynccontextmanager
async def store_errors(session: AsyncSession, action: str) -> AsyncGenerator[None, None]:
    """Roll back and wrap unclassified SQLAlchemy errors."""
    try:
        yield
    except SQLAlchemyError as e:
        await session.rollback()
        logger.exception(f"Store failure while trying to {action}")
        raise StoreFailureError(f"Failed to {action}") from e


def _to_company(record: CompanyRecord) -> Company:
    return Company(
        tax_id=record.tax_id,
        name=record.name,
        category=Category(record.category),
        joined_at=record.joined_at,
    )


def _to_transfer(record: TransferRecord) -> Transfer:
    return Transfer(
        id=record.id,
        company_tax_id=record.company_tax_id,
        occurred_at=record.occurred_at,
        amount=record.amount,
    )


class SqlAlchemyCompanyStore(CompanyStore):
    """Company persistence backed by the `empresas` table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _exists(self, tax_id: str) -> bool:
        result = await self.session.execute(
            select(CompanyRecord.tax_id).where(CompanyRecord.tax_id == tax_id)
        )
        return result.first() is not None

    async def find_by_tax_id(self, tax_id: str) -> Company | None:
        async with store_errors(self.session, "look up company"):
            record = await self.session.get(CompanyRecord, tax_id)
            return _to_company(record) if record else None

    async def save(self, company: Company) -> Company:
        """
        Insert a company.

        Company rows are insert-only so that the primary key rejects a
        concurrent onboarding of the same tax id atomically.
        """
        record = CompanyRecord(
            tax_id=company.tax_id,
            name=company.name,
            category=company.category.value,
            joined_at=company.joined_at,
        )
        async with store_errors(self.session, "save company"):
            self.session.add(record)
            try:
                await self.session.commit()
            except IntegrityError as e:
                await self.session.rollback()
                if await self._exists(company.tax_id):
                    raise DuplicateKeyError(company.tax_id) from e
                raise
            await self.session.refresh(record)
            return _to_company(record)

    async def delete(self, tax_id: str) -> int:
        """Delete a company and cascade to its transfers in one commit."""
        async with store_errors(self.session, "delete company"):
            await self.session.execute(
                delete(TransferRecord).where(TransferRecord.company_tax_id == tax_id)
            )
            result = await self.session.execute(
                delete(CompanyRecord).where(CompanyRecord.tax_id == tax_id)
            )
            await self.session.commit()
            return result.rowcount

    async def find_joined_since(self, cutoff: datetime) -> list[Company]:
        stmt = (
            select(CompanyRecord)
            .where(CompanyRecord.joined_at >= cutoff)
            .order_by(CompanyRecord.joined_at, CompanyRecord.tax_id)
        )
        async with store_errors(self.session, "query recently joined companies"):
            records = (await self.session.scalars(stmt)).all()
            return [_to_company(r) for r in records]

    async def find_with_transfers_since(self, cutoff: datetime) -> list[Company]:
        # A company with several qualifying transfers would repeat without DISTINCT
        stmt = (
            select(CompanyRecord)
            .join(TransferRecord, TransferRecord.company_tax_id == CompanyRecord.tax_id)
            .where(TransferRecord.occurred_at >= cutoff)
            .distinct()
            .order_by(CompanyRecord.joined_at, CompanyRecord.tax_id)
        )
        async with store_errors(self.session, "query companies with recent transfers"):
            records = (await self.session.scalars(stmt)).all()
            return [_to_company(r) for r in records]

    async def find_by_category(self, category: Category) -> list[Company]:
        stmt = (
            select(CompanyRecord)
            .where(CompanyRecord.category == category.value)
            .order_by(CompanyRecord.joined_at, CompanyRecord.tax_id)
        )
        async with store_errors(self.session, "query companies by category"):
            records = (await self.session.scalars(stmt)).all()
            return [_to_company(r) for r in records]


class SqlAlchemyTransferStore(TransferStore):
    """Transfer persistence backed by the `transferencias` table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, transfer: Transfer) -> Transfer:
        record = TransferRecord(
            id=transfer.id,
            company_tax_id=transfer.company_tax_id,
            occurred_at=transfer.occurred_at,
            amount=transfer.amount,
        )
        async with store_errors(self.session, "save transfer"):
            self.session.add(record)
            try:
                await self.session.commit()
            except IntegrityError as e:
                await self.session.rollback()
                company = await self.session.get(CompanyRecord, transfer.company_tax_id)
                if company is None:
                    raise ReferenceNotFoundError(transfer.company_tax_id) from e
                raise
            # Return what was stored; amounts are quantized on the way in
            await self.session.refresh(record)
            return _to_transfer(record)

    async def find_by_company(self, tax_id: str) -> list[Transfer]:
        stmt = (
            select(TransferRecord)
            .where(TransferRecord.company_tax_id == tax_id)
            .order_by(TransferRecord.occurred_at)
        )
        async with store_errors(self.session, "query transfers of company"):
            records = (await self.session.scalars(stmt)).all()
            return [_to_transfer(r) for r in records]

    async def find_since(self, cutoff: datetime) -> list[Transfer]:
        stmt = (
            select(TransferRecord)
            .where(TransferRecord.occurred_at >= cutoff)
            .order_by(TransferRecord.occurred_at)
        )
        async with store_errors(self.session, "query recent transfers"):
            records = (await self.session.scalars(stmt)).all()
            return [_to_transfer(r) for r in records]
