"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any, Callable
from uuid import uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import IdentityProviderError, IdentityUser
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

DUPLICATE_EMAIL_MESSAGE = "A user with this email address has already been registered"


class FakeIdentityProvider:
    """In-memory stand-in for Supabase Auth that issues real HS256 tokens."""

    def __init__(self, tokens: JWTAuthProvider) -> None:
        self.tokens = tokens
        self.accounts: dict[str, dict[str, Any]] = {}

    async def get_user(self, token: str) -> IdentityUser | None:
        user = await self.tokens.validate_token(token)
        if user is None or user.id not in self.accounts:
            return None
        return user

    async def create_user(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any] | None = None,
    ) -> IdentityUser:
        if any(a["email"] == email.lower() for a in self.accounts.values()):
            raise IdentityProviderError(DUPLICATE_EMAIL_MESSAGE, status_code=422)
        user_id = str(uuid4())
        self.accounts[user_id] = {
            "email": email.lower(),
            "password": password,
            "metadata": dict(metadata or {}),
        }
        return IdentityUser(
            id=user_id,
            email=email.lower(),
            name=(metadata or {}).get("name"),
            metadata=dict(metadata or {}),
        )

    async def update_password(self, user_id: str, password: str) -> None:
        if user_id not in self.accounts:
            raise IdentityProviderError("User not found", status_code=404)
        if len(password) < 6:
            raise IdentityProviderError(
                "Password should be at least 6 characters.", status_code=422
            )
        self.accounts[user_id]["password"] = password

    def token_for(self, user_id: str) -> str:
        account = self.accounts[user_id]
        return self.tokens.create_token(
            IdentityUser(
                id=user_id,
                email=account["email"],
                name=account["metadata"].get("name"),
            )
        )

    def sign_in(self, email: str, password: str) -> str:
        """Exchange credentials for an access token."""
        for user_id, account in self.accounts.items():
            if account["email"] == email.lower() and account["password"] == password:
                return self.token_for(user_id)
        raise IdentityProviderError("Invalid login credentials", status_code=400)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for direct store access."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create token validator for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def identity_provider(auth_provider: JWTAuthProvider) -> FakeIdentityProvider:
    """Create an empty in-memory identity provider."""
    return FakeIdentityProvider(auth_provider)


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    identity_provider: FakeIdentityProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the in-memory database and identity provider.

    Requests go to the real routers; only the store and the identity
    provider are swapped out.
    """
    from api.dependencies.auth import get_identity_provider, get_uow_factory
    from infrastructure.database.session import get_async_session
    from main import create_app

    app = create_app()

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_uow_factory] = lambda: uow_factory
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    app.dependency_overrides[get_async_session] = override_get_async_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


API = "/api/v1"


def bearer(token: str) -> dict[str, str]:
    """Authorization header for a token."""
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin_token(client: AsyncClient, identity_provider: FakeIdentityProvider) -> str:
    """Sign up the Acme Co admin and return its access token."""
    response = await client.post(
        f"{API}/admin-signup",
        json={"email": "a@x.com", "password": "pw-secret", "companyName": "Acme Co"},
    )
    assert response.status_code == 200, response.text
    return identity_provider.sign_in("a@x.com", "pw-secret")
