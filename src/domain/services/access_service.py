"""Authorization predicate shared by every protected endpoint."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Optional

from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.auth.provider import IdentityUser, IIdentityProvider


class AccessStatus(StrEnum):
    """Outcome of resolving a bearer token."""

    UNAUTHENTICATED = "unauthenticated"
    UNAUTHORIZED = "unauthorized"
    AUTHORIZED = "authorized"


@dataclass(frozen=True, slots=True)
class AccessResult:
    """Typed result of an access check; ``user`` is set only when authorized."""

    status: AccessStatus
    user: Optional[IdentityUser] = None

    @property
    def is_authorized(self) -> bool:
        return self.status is AccessStatus.AUTHORIZED

    @classmethod
    def unauthenticated(cls) -> "AccessResult":
        return cls(AccessStatus.UNAUTHENTICATED)

    @classmethod
    def unauthorized(cls) -> "AccessResult":
        return cls(AccessStatus.UNAUTHORIZED)

    @classmethod
    def authorized(cls, user: IdentityUser) -> "AccessResult":
        return cls(AccessStatus.AUTHORIZED, user)


class AuthorizationService:
    """Resolves callers against the identity provider and their profile role."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        identity_provider: IIdentityProvider,
    ) -> None:
        self._uow_factory = uow_factory
        self._identity = identity_provider

    async def resolve_user(self, token: str | None) -> AccessResult:
        """Resolve any authenticated caller. No side effects."""
        if not token:
            return AccessResult.unauthenticated()

        user = await self._identity.get_user(token)
        if user is None:
            return AccessResult.unauthenticated()

        return AccessResult.authorized(user)

    async def resolve_admin(self, token: str | None) -> AccessResult:
        """Resolve the caller only if their profile role is admin."""
        result = await self.resolve_user(token)
        if not result.is_authorized or result.user is None:
            return result

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(result.user.id)

        if profile is None or not profile.is_admin:
            return AccessResult.unauthorized()

        return result
