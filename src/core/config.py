"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

# HS256 tokens signed with this placeholder are never accepted
DEFAULT_JWT_SECRET = "CHANGE-ME-IN-PRODUCTION"


class Settings(BaseSettings):
    """Settings read from the environment or a local ``.env`` file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Service
    app_name: str = Field(default="Expense Desk API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    api_prefix: str = Field(
        default="/api/v1",
        description="Path prefix every endpoint is mounted under",
    )

    # Profile store
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/expense_desk",
        description="PostgreSQL URL of the database holding the kv_store table",
    )

    # Supabase Auth
    supabase_url: str = Field(
        default="",
        description="Supabase project URL, e.g. https://xyzabc.supabase.co",
    )
    supabase_service_role_key: str = Field(
        default="",
        description="Service role key for the Auth admin API (server-side only)",
    )
    identity_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for Auth admin API and JWKS requests",
    )

    # Locally signed tokens
    jwt_secret_key: str = Field(
        default=DEFAULT_JWT_SECRET,
        description="Shared secret for HS256 tokens (local development and tests)",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=60)

    # HTTP
    rate_limit_enabled: bool = Field(
        default=True,
        description="Turn request throttling off, e.g. under test",
    )
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated origins of the expense dashboards",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def supabase_auth_url(self) -> str:
        """Base URL of the Supabase Auth (GoTrue) REST API, empty if unset."""
        if not self.supabase_url:
            return ""
        return f"{self.supabase_url.rstrip('/')}/auth/v1"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def supabase_jwks_url(self) -> str:
        """Public signing keys for ES256 access tokens."""
        if not self.supabase_auth_url:
            return ""
        return f"{self.supabase_auth_url}/.well-known/jwks.json"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Database URL with the asyncpg driver.

        Hosting providers hand out plain ``postgresql://`` URLs, which the
        async engine cannot use.
        """
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return self.database_url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
