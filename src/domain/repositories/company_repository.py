"""Company repository protocol."""

from typing import Protocol

from domain.entities.profile import Company


class ICompanyRepository(Protocol):
    """Repository interface for Company records."""

    async def save(self, company: Company) -> Company:
        """Insert or replace a company."""
        ...
