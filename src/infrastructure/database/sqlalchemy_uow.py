"""Unit of Work over one SQLAlchemy session of the key-value store."""

from types import TracebackType
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.kv_company_repo import KVCompanyRepository
from infrastructure.database.repositories.kv_profile_repo import KVProfileRepository


class SQLAlchemyUnitOfWork:
    """Profile and company repositories sharing a session and transaction.

    Writes become visible only on ``commit``; leaving the block with an
    exception rolls back.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._profiles: Optional[KVProfileRepository] = None
        self._companies: Optional[KVCompanyRepository] = None

    @property
    def profiles(self) -> KVProfileRepository:
        if self._profiles is None:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._profiles

    @property
    def companies(self) -> KVCompanyRepository:
        if self._companies is None:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._companies

    async def commit(self) -> None:
        if self._session is not None:
            await self._session.commit()

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._session = self._session_factory()
        self._profiles = KVProfileRepository(self._session)
        self._companies = KVCompanyRepository(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        if self._session is None:
            return
        try:
            if exc_type is not None:
                await self.rollback()
        finally:
            await self._session.close()
            self._session = None
            self._profiles = None
            self._companies = None
