"""Profile repository protocol."""

from typing import Protocol

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile records."""

    async def get(self, user_id: str) -> Profile | None:
        """Get a profile by identity id."""
        ...

    async def list_all(self) -> list[Profile]:
        """Get every profile in the store, across all companies."""
        ...

    async def save(self, profile: Profile) -> Profile:
        """Insert or replace a profile."""
        ...
