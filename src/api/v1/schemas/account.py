"""Pydantic schemas for account provisioning and profile APIs."""

from datetime import datetime

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from api.v1.schemas.common import CamelModel
from domain.entities.profile import Profile, UserRole

PROVISIONABLE_ROLES = (UserRole.MANAGER, UserRole.EMPLOYEE)


class AdminSignupRequest(CamelModel):
    """Schema for the first admin signing up with a company."""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)
    company_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("email", "company_name")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class CreateEmployeeRequest(CamelModel):
    """Schema for an admin provisioning a manager or employee."""

    name: str = Field(..., min_length=1, max_length=100)
    role: str
    manager_id: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: str) -> str:
        try:
            role = UserRole.parse(v)
        except ValueError:
            raise ValueError("role must be 'manager' or 'employee'") from None
        if role not in PROVISIONABLE_ROLES:
            raise ValueError("role must be 'manager' or 'employee'")
        return v.strip()

    @field_validator("manager_id")
    @classmethod
    def empty_manager_is_none(cls, v: str | None) -> str | None:
        return v or None


class UpdatePasswordRequest(CamelModel):
    """Schema for replacing the caller's password."""

    new_password: str = Field(..., min_length=1)


class ProfileResponse(CamelModel):
    """Schema for a stored profile."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "7c1e2d7e-7a4b-4d0e-9a51-2f4f1f3c2a10",
                "name": "Jane Doe",
                "email": "jane.doe@acmeco.com",
                "role": "employee",
                "managerId": "0b7c4b8e-1d2f-4c7a-a1f0-5e9e1c2d3b4a",
                "companyName": "Acme Co",
                "tempPassword": "tempa1b2c3",
                "createdAt": "2026-01-28T10:00:00+00:00",
            }
        },
    )

    id: str
    name: str
    email: str
    role: str
    manager_id: str | None = None
    company_name: str
    temp_password: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            role=profile.role,
            manager_id=profile.manager_id,
            company_name=profile.company_name,
            temp_password=profile.temp_password,
            created_at=profile.created_at,
        )


class AdminUserResponse(CamelModel):
    """Public fields of a newly created admin."""

    id: str
    email: str
    role: str
    name: str
    company_name: str


class AdminSignupResponse(CamelModel):
    """Schema for admin signup result."""

    message: str
    user: AdminUserResponse


class EmployeeUserResponse(CamelModel):
    """Public fields of a newly provisioned user, including the temporary password."""

    id: str
    name: str
    email: str
    role: str
    manager_id: str | None = None
    temp_password: str


class CreateEmployeeResponse(CamelModel):
    """Schema for create-employee result."""

    message: str
    user: EmployeeUserResponse


class ProfileDetailResponse(CamelModel):
    """Schema for the caller's own profile."""

    profile: ProfileResponse


class UserListResponse(CamelModel):
    """Schema for the full user directory."""

    users: list[ProfileResponse]
