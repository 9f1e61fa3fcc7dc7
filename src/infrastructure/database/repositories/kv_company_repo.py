"""Key-value implementation of the Company repository."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Company
from infrastructure.database.kv_store import SQLAlchemyKVStore

COMPANY_PREFIX = "company:"


class KVCompanyRepository:
    """Stores companies under ``company:<name>``."""

    def __init__(self, session: AsyncSession) -> None:
        self._store = SQLAlchemyKVStore(session)

    async def save(self, company: Company) -> Company:
        value: dict[str, Any] = {
            "name": company.name,
            "adminId": company.admin_id,
            "createdAt": company.created_at.isoformat(),
        }
        await self._store.set(f"{COMPANY_PREFIX}{company.name}", value)
        return company
