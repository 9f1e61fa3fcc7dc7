"""SQLAlchemy ORM models."""

from typing import Any

from sqlalchemy import Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class KVStoreModel(Base):
    """Flat key-value table holding profile and company records.

    Keys are namespaced (``user_profile:<id>``, ``company:<name>``) and
    values are JSON objects.
    """

    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    value: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)
