"""Identity provider protocol."""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol


@dataclass
class IdentityUser:
    """Represents an account held by the identity provider."""

    id: str
    email: str
    name: Optional[str] = None
    role: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)


class IdentityProviderError(Exception):
    """The identity provider rejected an operation."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class IIdentityProvider(Protocol):
    """Protocol for the external identity provider."""

    async def get_user(self, token: str) -> Optional[IdentityUser]:
        """
        Validate an access token.

        Args:
            token: The bearer token presented by the caller

        Returns:
            IdentityUser if valid, None if rejected
        """
        ...

    async def create_user(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any] | None = None,
    ) -> IdentityUser:
        """
        Create a confirmed account (no email verification step).

        Raises:
            IdentityProviderError: If the provider refuses, e.g. duplicate email
        """
        ...

    async def update_password(self, user_id: str, password: str) -> None:
        """
        Set a new password on an existing account.

        Raises:
            IdentityProviderError: If the provider refuses the update
        """
        ...
