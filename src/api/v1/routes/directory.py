"""Profile and user directory API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentAdmin, CurrentUser
from api.v1.dependencies import get_directory_service
from api.v1.schemas.account import (
    ProfileDetailResponse,
    ProfileResponse,
    UserListResponse,
)
from core.rate_limit import READ_LIMIT, limiter
from domain.services.directory_service import DirectoryService

router = APIRouter(tags=["directory"])


@router.get(
    "/profile",
    response_model=ProfileDetailResponse,
    response_model_exclude_none=True,
    summary="Get own profile",
    responses={
        401: {"description": "Authentication required"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    user: CurrentUser,
    service: DirectoryService = Depends(get_directory_service),
) -> ProfileDetailResponse:
    """Get the authenticated caller's profile."""
    profile = await service.get_profile(user)
    return ProfileDetailResponse(profile=ProfileResponse.from_entity(profile))


@router.get(
    "/users",
    response_model=UserListResponse,
    response_model_exclude_none=True,
    summary="List all users",
    responses={
        401: {"description": "Admin access required"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_users(
    request: Request,
    admin: CurrentAdmin,
    service: DirectoryService = Depends(get_directory_service),
) -> UserListResponse:
    """Get every profile in the store (admin only)."""
    profiles = await service.list_users()
    return UserListResponse(
        users=[ProfileResponse.from_entity(profile) for profile in profiles]
    )
