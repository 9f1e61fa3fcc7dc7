"""Expense Desk API entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import API_VERSION
from api.v1 import router as v1_router
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.database.session import engine

setup_logging()

logger = structlog.get_logger()

DESCRIPTION = """\
## Expense Desk

User provisioning and directory API behind the expense reporting dashboards.

- **Admin signup**: the first admin creates the company
- **Provisioning**: the admin creates managers and employees, each with a
  one-time temporary password
- **Directory**: own profile lookup and the admin's user list

Everything except `/health` and `/admin-signup` needs a Supabase access token:

```
Authorization: Bearer <access_token>
```
"""

OPENAPI_TAGS = [
    {"name": "health", "description": "Liveness and store connectivity"},
    {"name": "accounts", "description": "Admin signup, provisioning and password changes"},
    {"name": "directory", "description": "Own profile and the user directory"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Report identity configuration on startup and release the pool on shutdown."""
    if not settings.supabase_auth_url:
        logger.warning("identity_provider_unconfigured", hint="set SUPABASE_URL")
    logger.info("startup", environment=settings.app_env, api_prefix=settings.api_prefix)
    yield
    await engine.dispose()
    logger.info("shutdown")


def create_app() -> FastAPI:
    """Build the application with middleware, error handlers and routes."""
    app = FastAPI(
        title=settings.app_name,
        description=DESCRIPTION,
        version=API_VERSION,
        debug=settings.debug,
        default_response_class=ORJSONResponse,
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Last added runs outermost: request id, then security headers, then logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        max_age=600,
    )

    setup_exception_handlers(app)
    app.include_router(v1_router, prefix=settings.api_prefix)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
