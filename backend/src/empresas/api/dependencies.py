"""
FastAPI dependencies.

The Database handle lives on `app.state`; each request gets its own
session and a service bound to it.
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from empresas.infrastructure.database import Database
from empresas.infrastructure.repositories import SqlAlchemyCompanyStore, SqlAlchemyTransferStore
from empresas.services import RegistryService


def get_database(request: Request) -> Database:
    """Return the application's database handle."""
    return request.app.state.database


async def get_session(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


def get_registry_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> RegistryService:
    return RegistryService(
        companies=SqlAlchemyCompanyStore(session),
        transfers=SqlAlchemyTransferStore(session),
    )


RegistryServiceDep = Annotated[RegistryService, Depends(get_registry_service)]
