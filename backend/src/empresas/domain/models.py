"""
Domain models for company onboarding and transfer tracking.

These models represent the core business entities of the payments network:
companies that join the network (adhesión) and the transfers attributed
to them.

Design Decisions:
- Dataclasses keep the domain free of ORM and HTTP concerns
- Transfer references its company by tax id only; there is no back-collection
- All timestamps are timezone-aware UTC
- Decimal for monetary values to avoid floating-point errors
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import uuid4


# Fixed logical length of a CUIT
TAX_ID_LENGTH = 11

NAME_MAX_LENGTH = 100

# Transfer amounts: NUMERIC(18, 2)
AMOUNT_MAX_DIGITS = 18
AMOUNT_DECIMAL_PLACES = 2


class Category(Enum):
    """Kind of company joining the network."""
    SMALL_BUSINESS = "PYME"
    CORPORATE = "CORPORATIVA"


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """
    Normalize a timestamp to timezone-aware UTC.

    Naive values are interpreted as UTC (SQLite drops the offset on
    storage, and API clients may omit it).
    """
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass
class Company:
    """
    A company onboarded to the network, keyed by its CUIT.

    The tax id is immutable once the record exists. The join date is set
    at creation (defaulting to now) and may be backfilled for migrated
    records.
    """
    tax_id: str
    name: str
    category: Category
    joined_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        self.joined_at = as_utc(self.joined_at)

    @property
    def is_small_business(self) -> bool:
        return self.category is Category.SMALL_BUSINESS

    @property
    def is_corporate(self) -> bool:
        return self.category is Category.CORPORATE


@dataclass
class Transfer:
    """
    A money-movement event attributed to a company.

    The id is generated on construction and never changes.
    """
    company_tax_id: str
    occurred_at: datetime = field(default_factory=utcnow)
    amount: Decimal | None = None
    id: str = field(default_factory=lambda: str(uuid4()))

    def __post_init__(self) -> None:
        self.occurred_at = as_utc(self.occurred_at)


@dataclass(frozen=True)
class DeletionResult:
    """Confirmation returned by administrative deletion."""
    tax_id: str
    message: str
