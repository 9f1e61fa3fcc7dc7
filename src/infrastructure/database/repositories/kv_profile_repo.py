"""Key-value implementation of the Profile repository."""

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Profile
from infrastructure.database.kv_store import SQLAlchemyKVStore

PROFILE_PREFIX = "user_profile:"


def profile_key(user_id: str) -> str:
    return f"{PROFILE_PREFIX}{user_id}"


class KVProfileRepository:
    """Stores profiles as camelCase JSON under ``user_profile:<id>``."""

    def __init__(self, session: AsyncSession) -> None:
        self._store = SQLAlchemyKVStore(session)

    async def get(self, user_id: str) -> Profile | None:
        """Get a profile by identity id."""
        value = await self._store.get(profile_key(user_id))
        return self._to_entity(value) if value else None

    async def list_all(self) -> list[Profile]:
        """Get every profile in the store."""
        values = await self._store.get_by_prefix(PROFILE_PREFIX)
        return [self._to_entity(value) for value in values]

    async def save(self, profile: Profile) -> Profile:
        """Insert or replace a profile."""
        await self._store.set(profile_key(profile.id), self._to_value(profile))
        return profile

    @staticmethod
    def _to_value(profile: Profile) -> dict[str, Any]:
        value: dict[str, Any] = {
            "id": profile.id,
            "name": profile.name,
            "email": profile.email,
            "role": profile.role,
            "companyName": profile.company_name,
            "createdAt": profile.created_at.isoformat(),
        }
        # Absent optional fields are omitted, not stored as null
        if profile.manager_id is not None:
            value["managerId"] = profile.manager_id
        if profile.temp_password is not None:
            value["tempPassword"] = profile.temp_password
        return value

    @staticmethod
    def _to_entity(value: dict[str, Any]) -> Profile:
        return Profile(
            id=value["id"],
            name=value.get("name", ""),
            email=value.get("email", ""),
            role=value.get("role", ""),
            company_name=value.get("companyName", ""),
            manager_id=value.get("managerId"),
            temp_password=value.get("tempPassword"),
            created_at=datetime.fromisoformat(value["createdAt"]),
        )
