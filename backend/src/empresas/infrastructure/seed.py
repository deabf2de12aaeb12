"""
Demo dataset for local development.

Loads a corporate company that joined two months ago (with a transfer
from that time) and a small business that joined 15 days ago, so both
reporting queries have something to include and something to exclude.
Only runs against an empty `empresas` table.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import func, select

from empresas.domain.models import Category, Company, Transfer, as_utc, utcnow
from empresas.domain.window import one_month_before

from .database import CompanyRecord, Database
from .repositories import SqlAlchemyCompanyStore, SqlAlchemyTransferStore

logger = logging.getLogger(__name__)


async def seed_demo_data(database: Database, now: datetime | None = None) -> bool:
    """
    Insert the demo companies and transfers.

    Returns:
        True if data was inserted, False if the database already had companies
    """
    now = as_utc(now) if now is not None else utcnow()
    two_months_ago = one_month_before(one_month_before(now))

    async with database.session() as session:
        existing = await session.scalar(select(func.count()).select_from(CompanyRecord))
        if existing:
            logger.info(f"Database already has {existing} companies, skipping demo seed")
            return False

        logger.info("Seeding demo data...")
        companies = SqlAlchemyCompanyStore(session)
        transfers = SqlAlchemyTransferStore(session)

        await companies.save(Company(
            tax_id="30112224440",
            name="Empresa Antigua SA",
            category=Category.CORPORATE,
            joined_at=two_months_ago,
        ))
        await companies.save(Company(
            tax_id="20123456789",
            name="TechStart Pyme SRL",
            category=Category.SMALL_BUSINESS,
            joined_at=now - timedelta(days=15),
        ))

        # Outside the window, so the old company shows up in neither report
        await transfers.save(Transfer(
            company_tax_id="30112224440",
            occurred_at=two_months_ago,
            amount=Decimal("500.00"),
        ))

    logger.info("Demo data seeded")
    return True
