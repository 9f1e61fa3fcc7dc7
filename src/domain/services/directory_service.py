"""Profile reads and password changes."""

from typing import Callable

import structlog

from core.exceptions import ProfileNotFoundError, UpstreamFailureError
from domain.entities.profile import Profile
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.auth.provider import (
    IdentityProviderError,
    IdentityUser,
    IIdentityProvider,
)

logger = structlog.get_logger()


class DirectoryService:
    """Service layer for the profile and user directory endpoints."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        identity_provider: IIdentityProvider,
    ) -> None:
        self._uow_factory = uow_factory
        self._identity = identity_provider

    async def get_profile(self, user: IdentityUser) -> Profile:
        """Get the caller's own profile."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user.id)
            if profile is None:
                raise ProfileNotFoundError(user.id)
            return profile

    async def list_users(self) -> list[Profile]:
        """Get every profile in the store, unscoped by company."""
        async with self._uow_factory() as uow:
            return await uow.profiles.list_all()  # type: ignore[no-any-return]

    async def update_password(self, user: IdentityUser, new_password: str) -> None:
        """Set a new password and clear the temporary password flag.

        If the profile write fails after the provider accepted the new
        password, the stale ``temp_password`` stays on the profile.
        """
        try:
            await self._identity.update_password(user.id, new_password)
        except IdentityProviderError as exc:
            logger.warning(
                "identity_provider_error",
                operation="update_password",
                error=exc.message,
            )
            raise UpstreamFailureError(exc.message) from exc

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user.id)
            if profile is not None and profile.has_temp_password:
                profile.temp_password = None
                await uow.profiles.save(profile)
                await uow.commit()

        logger.info("password_updated", user_id=user.id)
