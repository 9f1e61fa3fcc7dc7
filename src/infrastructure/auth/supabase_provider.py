"""Supabase Auth identity provider.

Account management goes through the GoTrue admin REST API using the
service-role key. Access tokens are checked locally by ``JWTAuthProvider``
to drop malformed ones early, then confirmed with ``GET /user`` so that
revoked sessions and deleted or banned accounts are refused.
"""

import logging
from typing import Any, Optional

import httpx

from core.config import settings
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import IdentityProviderError, IdentityUser

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Pull the human-readable message out of a GoTrue error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Identity provider returned {response.status_code}"

    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Identity provider returned {response.status_code}"


def _to_identity(data: dict[str, Any], email: str = "") -> IdentityUser:
    user_metadata = data.get("user_metadata") or {}
    return IdentityUser(
        id=str(data["id"]),
        email=data.get("email") or email,
        name=user_metadata.get("name"),
        role=data.get("role"),
        metadata=user_metadata,
    )


class SupabaseIdentityProvider:
    """Identity provider backed by Supabase Auth."""

    def __init__(
        self,
        auth_url: str = settings.supabase_auth_url,
        service_role_key: str = settings.supabase_service_role_key,
        token_validator: JWTAuthProvider | None = None,
        timeout: float = settings.identity_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._auth_url = auth_url.rstrip("/")
        self._service_role_key = service_role_key
        self._token_validator = token_validator or JWTAuthProvider()
        self._timeout = timeout
        self._transport = transport

    def _headers(self, bearer: str | None = None) -> dict[str, str]:
        return {
            "apikey": self._service_role_key,
            "Authorization": f"Bearer {bearer or self._service_role_key}",
            "Content-Type": "application/json",
        }

    async def get_user(self, token: str) -> Optional[IdentityUser]:
        """Resolve an access token to its account, or None if Auth refuses it."""
        if await self._token_validator.validate_token(token) is None:
            return None

        try:
            data = await self._request("GET", "/user", bearer=token)
        except IdentityProviderError as exc:
            if exc.status_code not in (401, 403, 404):
                logger.warning("Token check failed: %s", exc.message)
            return None

        if not data.get("id"):
            return None
        return _to_identity(data)

    async def create_user(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any] | None = None,
    ) -> IdentityUser:
        """Create a confirmed account via the admin API."""
        payload = {
            "email": email,
            "password": password,
            "email_confirm": True,
            "user_metadata": metadata or {},
        }
        data = await self._request("POST", "/admin/users", json=payload)
        return _to_identity(data, email)

    async def update_password(self, user_id: str, password: str) -> None:
        """Set a new password on an existing account via the admin API."""
        await self._request(
            "PUT",
            f"/admin/users/{user_id}",
            json={"password": password},
        )

    async def _request(
        self,
        method: str,
        path: str,
        bearer: str | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Send an Auth API request, converting refusals to IdentityProviderError.

        Admin calls authorize with the service-role key; ``bearer`` sends a
        caller's access token instead.
        """
        if not self._auth_url:
            raise IdentityProviderError("Identity provider is not configured")

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method,
                    f"{self._auth_url}{path}",
                    headers=self._headers(bearer),
                    **kwargs,
                )
        except httpx.HTTPError as exc:
            logger.warning("Identity provider request failed: %s %s", method, path)
            raise IdentityProviderError(str(exc) or "Identity provider unreachable") from exc

        if response.is_error:
            raise IdentityProviderError(
                _error_message(response),
                status_code=response.status_code,
            )

        data = response.json()
        # Some GoTrue versions wrap the user object
        if isinstance(data, dict) and isinstance(data.get("user"), dict):
            return data["user"]  # type: ignore[no-any-return]
        return data if isinstance(data, dict) else {}
