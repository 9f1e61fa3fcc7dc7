"""Transaction boundary for the profile store."""

from types import TracebackType
from typing import Optional, Protocol

from domain.repositories.company_repository import ICompanyRepository
from domain.repositories.profile_repository import IProfileRepository


class IUnitOfWork(Protocol):
    """Async context manager grouping repository writes into one commit."""

    @property
    def profiles(self) -> IProfileRepository: ...

    @property
    def companies(self) -> ICompanyRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def __aenter__(self) -> "IUnitOfWork": ...

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None: ...
