"""Account provisioning API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentAdmin, CurrentUser
from api.v1.dependencies import get_directory_service, get_provisioning_service
from api.v1.schemas.account import (
    AdminSignupRequest,
    AdminSignupResponse,
    AdminUserResponse,
    CreateEmployeeRequest,
    CreateEmployeeResponse,
    EmployeeUserResponse,
    UpdatePasswordRequest,
)
from api.v1.schemas.common import MessageResponse
from core.rate_limit import SIGNUP_LIMIT, WRITE_LIMIT, limiter
from domain.services.directory_service import DirectoryService
from domain.services.provisioning_service import ProvisioningService

router = APIRouter(tags=["accounts"])


@router.post(
    "/admin-signup",
    response_model=AdminSignupResponse,
    summary="Create the company admin",
    responses={
        200: {"description": "Admin created successfully"},
        400: {"description": "An admin already exists, or the identity provider refused"},
    },
)
@limiter.limit(SIGNUP_LIMIT)  # type: ignore[untyped-decorator]
async def admin_signup(
    request: Request,
    body: AdminSignupRequest,
    service: ProvisioningService = Depends(get_provisioning_service),
) -> AdminSignupResponse:
    """Create the first admin account together with its company record."""
    profile = await service.admin_signup(
        email=body.email,
        password=body.password,
        company_name=body.company_name,
    )
    return AdminSignupResponse(
        message="Admin created successfully",
        user=AdminUserResponse(
            id=profile.id,
            email=profile.email,
            role=profile.role,
            name=profile.name,
            company_name=profile.company_name,
        ),
    )


@router.post(
    "/create-employee",
    response_model=CreateEmployeeResponse,
    summary="Provision a manager or employee",
    responses={
        200: {"description": "Employee created; temporary password returned once"},
        400: {"description": "Identity provider refused, e.g. duplicate email"},
        401: {"description": "Admin access required"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_employee(
    request: Request,
    body: CreateEmployeeRequest,
    admin: CurrentAdmin,
    service: ProvisioningService = Depends(get_provisioning_service),
) -> CreateEmployeeResponse:
    """Create an account under the admin's company and return its temporary password."""
    profile = await service.create_employee(
        admin=admin,
        name=body.name,
        role=body.role,
        manager_id=body.manager_id,
    )
    return CreateEmployeeResponse(
        message="Employee created successfully",
        user=EmployeeUserResponse(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            role=profile.role,
            manager_id=profile.manager_id,
            temp_password=profile.temp_password or "",
        ),
    )


@router.post(
    "/update-password",
    response_model=MessageResponse,
    summary="Change the caller's password",
    responses={
        200: {"description": "Password updated"},
        400: {"description": "Identity provider refused the new password"},
        401: {"description": "Authentication required"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_password(
    request: Request,
    body: UpdatePasswordRequest,
    user: CurrentUser,
    service: DirectoryService = Depends(get_directory_service),
) -> MessageResponse:
    """Replace the caller's password and clear any temporary password."""
    await service.update_password(user, body.new_password)
    return MessageResponse(message="Password updated successfully")
