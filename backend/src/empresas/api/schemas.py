"""
Pydantic schemas for API request/response validation.

These schemas define the contract with API clients. Request fields accept
both snake_case and the camelCase names used by earlier clients.
All monetary values are returned as strings to avoid floating point issues.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import AliasChoices, BaseModel, Field

from empresas.domain.models import (
    AMOUNT_DECIMAL_PLACES,
    AMOUNT_MAX_DIGITS,
    NAME_MAX_LENGTH,
    TAX_ID_LENGTH,
    Company,
    Transfer,
)


Amount = Annotated[
    Decimal,
    Field(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES),
]


class CategoryEnum(str, Enum):
    """Company category for API requests and responses."""
    PYME = "PYME"
    CORPORATIVA = "CORPORATIVA"


# =============================================================================
# Request Schemas
# =============================================================================

class CreateCompanyRequest(BaseModel):
    """Request to onboard a company."""
    cuit: str = Field(
        ...,
        min_length=TAX_ID_LENGTH,
        max_length=TAX_ID_LENGTH,
        description="CUIT of the company (exactly 11 characters)",
    )
    nombre: str = Field(
        ...,
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Company name",
    )
    tipo: CategoryEnum = Field(
        ...,
        description="Company category",
    )
    fecha_adhesion: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("fecha_adhesion", "fechaAdhesion"),
        description="Join date in ISO format (defaults to now)",
    )


class CreateTransferRequest(BaseModel):
    """Request to record a transfer."""
    cuit_empresa: str = Field(
        ...,
        min_length=TAX_ID_LENGTH,
        max_length=TAX_ID_LENGTH,
        validation_alias=AliasChoices("cuit_empresa", "cuitEmpresa"),
        description="CUIT of the company the transfer belongs to",
    )
    monto: Amount | None = Field(
        default=None,
        description="Transfer amount (up to 18 digits, 2 decimals)",
    )
    fecha_transferencia: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("fecha_transferencia", "fechaTransferencia"),
        description="Transfer date in ISO format (defaults to now)",
    )


# =============================================================================
# Response Schemas
# =============================================================================

class CompanyResponse(BaseModel):
    """An onboarded company."""
    cuit: str
    nombre: str
    tipo: CategoryEnum
    fecha_adhesion: datetime

    @classmethod
    def from_domain(cls, company: Company) -> "CompanyResponse":
        return cls(
            cuit=company.tax_id,
            nombre=company.name,
            tipo=CategoryEnum(company.category.value),
            fecha_adhesion=company.joined_at,
        )


class TransferResponse(BaseModel):
    """A recorded transfer."""
    id_transferencia: str
    cuit_empresa: str
    fecha_transferencia: datetime
    monto: str | None = None

    @classmethod
    def from_domain(cls, transfer: Transfer) -> "TransferResponse":
        return cls(
            id_transferencia=transfer.id,
            cuit_empresa=transfer.company_tax_id,
            fecha_transferencia=transfer.occurred_at,
            monto=str(transfer.amount) if transfer.amount is not None else None,
        )


class DeletionResponse(BaseModel):
    """Confirmation of an administrative deletion."""
    message: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    database: str = "connected"


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: str | None = None
    code: str | None = None
