"""Local verification of Supabase access tokens.

Supabase signs access tokens with ES256 (public keys published as JWKS);
tests and local development sign them with HS256 and a shared secret.
A token passing here is still confirmed with the Auth API before use.
The claims we rely on:

    sub            identity account id
    email          login address
    user_metadata  {"name": ..., "company_name": ..., "temp_password": ...}
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import DEFAULT_JWT_SECRET, settings
from infrastructure.auth.provider import IdentityUser

logger = logging.getLogger(__name__)

SUPABASE_ALGORITHM = "ES256"
TOKEN_AUDIENCE = "authenticated"

# Metadata keys a display name may live under, in priority order
_NAME_CLAIMS = ("name", "display_name", "full_name")

# kid -> JWK, filled on first ES256 token and dropped on key rotation
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys() -> dict[str, Any]:
    """Return the project's signing keys by kid, fetching them once."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    jwks_url = settings.supabase_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=settings.identity_timeout_seconds)
            response.raise_for_status()
            keys = response.json().get("keys", [])
    except Exception:
        logger.exception("Could not load signing keys from %s", jwks_url)
        return {}

    _jwks_cache = {key["kid"]: key for key in keys if key.get("kid")}
    logger.info("Loaded %d signing keys", len(_jwks_cache))
    return _jwks_cache


def _identity_from_claims(claims: dict[str, Any]) -> Optional[IdentityUser]:
    user_id = claims.get("sub")
    email = claims.get("email")
    if not user_id or not email:
        return None

    metadata = dict(claims.get("user_metadata") or {})
    name = next((metadata[k] for k in _NAME_CLAIMS if metadata.get(k)), claims.get("name"))
    return IdentityUser(
        id=str(user_id),
        email=email,
        name=name,
        role=claims.get("role"),
        metadata=metadata,
    )


class JWTAuthProvider:
    """Verifies access tokens and mints HS256 ones for local use."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[IdentityUser]:
        """
        Resolve a bearer token to the identity it was issued for.

        Returns None for anything that does not verify: bad signature,
        expiry, unknown signing key, missing ``sub``/``email`` claims, or an
        HS256 token while the shared secret is still the placeholder.
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg", self._algorithm) == SUPABASE_ALGORITHM:
                claims = await self._validate_es256(token, header)
            elif self._secret_key == DEFAULT_JWT_SECRET:
                logger.warning("Refusing HS256 token: JWT_SECRET_KEY is unset")
                return None
            else:
                claims = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if claims is None:
            return None
        return _identity_from_claims(claims)

    async def _validate_es256(
        self, token: str, header: dict[str, Any]
    ) -> Optional[dict[str, Any]]:
        kid = header.get("kid")
        if not kid:
            return None

        key_data = (await _get_jwks_keys()).get(kid)
        if not key_data:
            global _jwks_cache
            _jwks_cache = None
            key_data = (await _get_jwks_keys()).get(kid)
        if not key_data:
            logger.warning("No signing key for kid=%s", kid)
            return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm=SUPABASE_ALGORITHM),
            algorithms=[SUPABASE_ALGORITHM],
            options={"verify_aud": False},
        )

    def create_token(self, user: IdentityUser) -> str:
        """Mint an HS256 access token carrying the user's metadata."""
        claims: dict[str, Any] = {
            "sub": user.id,
            "email": user.email,
            "aud": TOKEN_AUDIENCE,
            "role": TOKEN_AUDIENCE,
            "exp": datetime.now(timezone.utc) + timedelta(minutes=self._expire_minutes),
            "user_metadata": {"name": user.name, **user.metadata},
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)
