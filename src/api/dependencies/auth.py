"""Authentication dependencies for FastAPI."""

from typing import Annotated, Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AdminRequiredError, AuthenticationError
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access_service import AuthorizationService
from infrastructure.auth.provider import IdentityUser, IIdentityProvider
from infrastructure.auth.supabase_provider import SupabaseIdentityProvider
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Security scheme for OpenAPI docs; malformed or missing headers yield None
security = HTTPBearer(auto_error=False)

# Singleton identity provider
_identity_provider: SupabaseIdentityProvider | None = None


def get_identity_provider() -> IIdentityProvider:
    """Get or create the identity provider singleton."""
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = SupabaseIdentityProvider()
    return _identity_provider


def get_uow_factory() -> Callable[[], IUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


def get_authorization_service(
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
) -> AuthorizationService:
    """Get the authorization predicate service."""
    return AuthorizationService(uow_factory, identity_provider)


def _bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str | None:
    return credentials.credentials if credentials else None


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    access: AuthorizationService = Depends(get_authorization_service),
) -> IdentityUser:
    """
    Dependency resolving any authenticated caller.

    Raises:
        AuthenticationError: If no token provided or token is rejected
    """
    result = await access.resolve_user(_bearer_token(credentials))
    if not result.is_authorized or result.user is None:
        raise AuthenticationError()
    return result.user


async def get_current_admin(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    access: AuthorizationService = Depends(get_authorization_service),
) -> IdentityUser:
    """
    Dependency resolving the caller only if their profile role is admin.

    Raises:
        AdminRequiredError: If unauthenticated or not an admin
    """
    result = await access.resolve_admin(_bearer_token(credentials))
    if not result.is_authorized or result.user is None:
        raise AdminRequiredError()
    return result.user


# Type aliases for convenience in route handlers
CurrentUser = Annotated[IdentityUser, Depends(get_current_user)]
CurrentAdmin = Annotated[IdentityUser, Depends(get_current_admin)]
