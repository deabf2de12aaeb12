"""
Persistence ports consumed by the services.

Abstract interfaces so the services never touch the ORM directly. The
SQLAlchemy adapters live in `empresas.infrastructure.repositories`.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from .models import Category, Company, Transfer


class CompanyStore(ABC):
    """Abstract interface for company persistence."""

    @abstractmethod
    async def find_by_tax_id(self, tax_id: str) -> Company | None:
        """Return the company with this tax id, or None."""
        pass

    @abstractmethod
    async def save(self, company: Company) -> Company:
        """
        Insert a company and return the persisted record.

        Raises:
            DuplicateKeyError: If the tax id is already taken
        """
        pass

    @abstractmethod
    async def delete(self, tax_id: str) -> int:
        """Delete a company (and its transfers). Returns rows affected."""
        pass

    @abstractmethod
    async def find_joined_since(self, cutoff: datetime) -> list[Company]:
        """Companies with joined_at >= cutoff."""
        pass

    @abstractmethod
    async def find_with_transfers_since(self, cutoff: datetime) -> list[Company]:
        """Distinct companies with at least one transfer at or after cutoff."""
        pass

    @abstractmethod
    async def find_by_category(self, category: Category) -> list[Company]:
        """Companies of the given category."""
        pass


class TransferStore(ABC):
    """Abstract interface for transfer persistence."""

    @abstractmethod
    async def save(self, transfer: Transfer) -> Transfer:
        """
        Insert a transfer and return the persisted record.

        Raises:
            ReferenceNotFoundError: If the referenced company no longer exists
        """
        pass

    @abstractmethod
    async def find_by_company(self, tax_id: str) -> list[Transfer]:
        """All transfers of a company, oldest first."""
        pass

    @abstractmethod
    async def find_since(self, cutoff: datetime) -> list[Transfer]:
        """Transfers with occurred_at >= cutoff."""
        pass
