"""API v1 router configuration."""

from fastapi import APIRouter

from api.routes.health import router as health_router
from api.v1.routes.accounts import router as accounts_router
from api.v1.routes.directory import router as directory_router

router = APIRouter()
router.include_router(health_router)
router.include_router(accounts_router)
router.include_router(directory_router)
