"""
Company and transfer endpoints.

Handles onboarding, transfer recording, the "last month" reports and
administrative deletion. Registry errors are translated to HTTP responses
by the handlers registered in `empresas.main`.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from empresas.api.dependencies import RegistryServiceDep
from empresas.api.schemas import (
    CategoryEnum,
    CompanyResponse,
    CreateCompanyRequest,
    CreateTransferRequest,
    DeletionResponse,
    ErrorResponse,
    TransferResponse,
)
from empresas.domain.models import Category


router = APIRouter(prefix="/empresas", tags=["empresas"])


@router.post(
    "",
    response_model=CompanyResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "A company with this CUIT already exists"},
        422: {"description": "Validation error"},
    },
)
async def create_company(
    payload: CreateCompanyRequest,
    service: RegistryServiceDep,
) -> CompanyResponse:
    """
    Onboard a new company.

    The join date defaults to now unless `fecha_adhesion` is supplied.
    """
    company = await service.onboard(
        tax_id=payload.cuit,
        name=payload.nombre,
        category=Category(payload.tipo.value),
        joined_at=payload.fecha_adhesion,
    )
    return CompanyResponse.from_domain(company)


@router.get("", response_model=list[CompanyResponse])
async def list_companies_by_category(
    service: RegistryServiceDep,
    tipo: Annotated[CategoryEnum, Query(description="Company category")],
) -> list[CompanyResponse]:
    """List companies of one category."""
    companies = await service.companies_by_category(Category(tipo.value))
    return [CompanyResponse.from_domain(c) for c in companies]


@router.get("/adheridas-ultimo-mes", response_model=list[CompanyResponse])
async def companies_joined_last_month(service: RegistryServiceDep) -> list[CompanyResponse]:
    """Companies that joined within the last calendar month."""
    companies = await service.companies_joined_last_month()
    return [CompanyResponse.from_domain(c) for c in companies]


@router.get("/con-transferencias-ultimo-mes", response_model=list[CompanyResponse])
async def companies_with_transfers_last_month(service: RegistryServiceDep) -> list[CompanyResponse]:
    """Companies with at least one transfer within the last calendar month."""
    companies = await service.companies_with_transfers_last_month()
    return [CompanyResponse.from_domain(c) for c in companies]


@router.post(
    "/transferencias",
    response_model=TransferResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "No company exists with this CUIT"},
        422: {"description": "Validation error"},
    },
)
async def create_transfer(
    payload: CreateTransferRequest,
    service: RegistryServiceDep,
) -> TransferResponse:
    """Record a transfer for an existing company."""
    transfer = await service.record_transfer(
        company_tax_id=payload.cuit_empresa,
        amount=payload.monto,
        occurred_at=payload.fecha_transferencia,
    )
    return TransferResponse.from_domain(transfer)


@router.get("/transferencias/ultimo-mes", response_model=list[TransferResponse])
async def transfers_last_month(service: RegistryServiceDep) -> list[TransferResponse]:
    """Transfers recorded within the last calendar month."""
    transfers = await service.transfers_last_month()
    return [TransferResponse.from_domain(t) for t in transfers]


@router.get(
    "/{cuit}/transferencias",
    response_model=list[TransferResponse],
    responses={404: {"model": ErrorResponse, "description": "Company not found"}},
)
async def transfers_for_company(cuit: str, service: RegistryServiceDep) -> list[TransferResponse]:
    """All transfers of one company, oldest first."""
    transfers = await service.transfers_for_company(cuit)
    return [TransferResponse.from_domain(t) for t in transfers]


@router.delete(
    "/{cuit}",
    response_model=DeletionResponse,
    responses={404: {"model": ErrorResponse, "description": "Company not found"}},
)
async def delete_company(cuit: str, service: RegistryServiceDep) -> DeletionResponse:
    """
    Delete a company and its transfers.

    Test-support endpoint; not meant for production clients.
    """
    result = await service.delete_company(cuit)
    return DeletionResponse(message=result.message)
