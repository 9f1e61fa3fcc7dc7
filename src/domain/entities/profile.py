"""Profile and company domain entities."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(StrEnum):
    """Roles a company profile can hold."""

    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"

    @classmethod
    def parse(cls, value: str) -> "UserRole":
        """Match a stored or submitted role regardless of case."""
        return cls(value.strip().lower())


def role_matches(value: str | None, role: UserRole) -> bool:
    """Case-insensitive role comparison against a stored value."""
    if not value:
        return False
    return value.strip().lower() == role.value


@dataclass
class Profile:
    """A user's role, company and provisioning metadata.

    ``id`` is issued by the identity provider and never changes.
    ``temp_password`` is only present until the first password change.
    """

    id: str
    name: str
    email: str
    role: str
    company_name: str
    manager_id: Optional[str] = None
    temp_password: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def is_admin(self) -> bool:
        return role_matches(self.role, UserRole.ADMIN)

    @property
    def has_temp_password(self) -> bool:
        return self.temp_password is not None


@dataclass
class Company:
    """Company record keyed by name, pointing at its single admin."""

    name: str
    admin_id: str
    created_at: datetime = field(default_factory=_utcnow)
