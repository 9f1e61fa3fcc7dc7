"""Key-value store over the ``kv_store`` table."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models import KVStoreModel


class SQLAlchemyKVStore:
    """get/set/prefix-scan semantics on top of an async session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, key: str) -> dict[str, Any] | None:
        """Get the value stored under a key."""
        model = await self._session.get(KVStoreModel, key)
        return dict(model.value) if model else None

    async def set(self, key: str, value: dict[str, Any]) -> None:
        """Insert or replace the value under a key."""
        model = await self._session.get(KVStoreModel, key)
        if model is None:
            self._session.add(KVStoreModel(key=key, value=value))
        else:
            model.value = value
        await self._session.flush()

    async def get_by_prefix(self, prefix: str) -> list[dict[str, Any]]:
        """Get all values whose key starts with the prefix."""
        stmt = (
            select(KVStoreModel)
            .where(KVStoreModel.key.startswith(prefix, autoescape=True))
            .order_by(KVStoreModel.key)
        )
        result = await self._session.execute(stmt)
        return [dict(model.value) for model in result.scalars()]
