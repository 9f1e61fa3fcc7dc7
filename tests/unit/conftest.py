"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from domain.entities.profile import Profile, UserRole
from infrastructure.auth.provider import IdentityUser


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.companies = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def identity() -> AsyncMock:
    """Identity provider mock."""
    return AsyncMock()


@pytest.fixture
def admin_user() -> IdentityUser:
    """The calling admin as seen by the identity provider."""
    return IdentityUser(id=str(uuid4()), email="a@x.com", name="Admin")


@pytest.fixture
def admin_profile(admin_user: IdentityUser) -> Profile:
    """The calling admin's stored profile."""
    return Profile(
        id=admin_user.id,
        name="Admin",
        email=admin_user.email,
        role=UserRole.ADMIN.value,
        company_name="Acme Co",
    )
