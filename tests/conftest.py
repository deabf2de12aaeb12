"""Shared fixtures: a throwaway SQLite database per test and a fixed clock."""

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from empresas.config import Settings
from empresas.infrastructure.database import CompanyRecord, Database, TransferRecord
from empresas.infrastructure.repositories import SqlAlchemyCompanyStore, SqlAlchemyTransferStore
from empresas.services import RegistryService

# July has 31 days, so the window ending here starts 2026-07-15 12:00 UTC
NOW = datetime(2026, 8, 15, 12, 0, tzinfo=timezone.utc)
CUTOFF = datetime(2026, 7, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def cutoff() -> datetime:
    return CUTOFF


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")


@pytest_asyncio.fixture
async def database(settings):
    db = Database(settings)
    await db.init()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def session(database):
    async with database.session() as s:
        yield s


@pytest.fixture
def company_store(session) -> SqlAlchemyCompanyStore:
    return SqlAlchemyCompanyStore(session)


@pytest.fixture
def transfer_store(session) -> SqlAlchemyTransferStore:
    return SqlAlchemyTransferStore(session)


@pytest.fixture
def service(company_store, transfer_store) -> RegistryService:
    """Service whose "now" is pinned to NOW."""
    return RegistryService(company_store, transfer_store, clock=lambda: NOW)


@pytest.fixture
def live_service(company_store, transfer_store) -> RegistryService:
    """Service on the wall clock."""
    return RegistryService(company_store, transfer_store)


@pytest.fixture
def row_counts(database):
    """Async callable returning (companies, transfers) row counts."""

    async def counts() -> tuple[int, int]:
        async with database.session() as s:
            companies = await s.scalar(select(func.count()).select_from(CompanyRecord))
            transfers = await s.scalar(select(func.count()).select_from(TransferRecord))
        return companies, transfers

    return counts
