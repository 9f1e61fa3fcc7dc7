"""Admin signup and employee provisioning."""

import re
import secrets
import string
from typing import Callable, Optional

import structlog

from core.exceptions import (
    AdminAlreadyExistsError,
    ProfileNotFoundError,
    UpstreamFailureError,
)
from domain.entities.profile import Company, Profile, UserRole
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.auth.provider import (
    IdentityProviderError,
    IdentityUser,
    IIdentityProvider,
)

logger = structlog.get_logger()

ADMIN_DISPLAY_NAME = "Admin"
TEMP_PASSWORD_PREFIX = "temp"
TEMP_PASSWORD_LENGTH = 6
_TEMP_PASSWORD_ALPHABET = string.ascii_lowercase + string.digits
_WHITESPACE = re.compile(r"\s+")


def derive_employee_email(name: str, company_name: str) -> str:
    """Build ``first.last@companynospaces.com`` from a name and company.

    No collision check is made; two employees with the same name in one
    company derive the same address.
    """
    local_part = _WHITESPACE.sub(".", name.lower())
    domain = _WHITESPACE.sub("", company_name.lower())
    return f"{local_part}@{domain}.com"


def generate_temp_password() -> str:
    """One-time initial password, ``temp`` followed by six [a-z0-9] chars."""
    suffix = "".join(
        secrets.choice(_TEMP_PASSWORD_ALPHABET) for _ in range(TEMP_PASSWORD_LENGTH)
    )
    return f"{TEMP_PASSWORD_PREFIX}{suffix}"


class ProvisioningService:
    """Creates identity accounts together with their profile records.

    The identity account and the profile write are not transactional. If the
    profile write fails after the account was created, the account is left
    orphaned and a retried signup fails on the provider's duplicate-email check.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        identity_provider: IIdentityProvider,
    ) -> None:
        self._uow_factory = uow_factory
        self._identity = identity_provider

    async def admin_signup(self, email: str, password: str, company_name: str) -> Profile:
        """Create the first admin and its company record.

        The admin check scans every profile in the store, not only the
        given company.
        """
        async with self._uow_factory() as uow:
            profiles = await uow.profiles.list_all()
            if any(profile.is_admin for profile in profiles):
                raise AdminAlreadyExistsError()

            account = await self._create_account(
                email,
                password,
                {"name": ADMIN_DISPLAY_NAME, "company_name": company_name},
            )

            profile = Profile(
                id=account.id,
                name=ADMIN_DISPLAY_NAME,
                email=email,
                role=UserRole.ADMIN.value,
                company_name=company_name,
            )
            try:
                await uow.profiles.save(profile)
                await uow.companies.save(
                    Company(name=company_name, admin_id=account.id)
                )
                await uow.commit()
            except Exception:
                logger.error("orphaned_identity_account", user_id=account.id, email=email)
                raise

        logger.info("admin_created", user_id=profile.id, company_name=company_name)
        return profile

    async def create_employee(
        self,
        admin: IdentityUser,
        name: str,
        role: str,
        manager_id: Optional[str] = None,
    ) -> Profile:
        """Provision a manager or employee under the calling admin's company.

        ``manager_id`` is stored verbatim without checking it refers to a
        manager. The returned profile carries the temporary password, which is
        never retrievable again from this call path.
        """
        async with self._uow_factory() as uow:
            admin_profile = await uow.profiles.get(admin.id)
            if admin_profile is None:
                raise ProfileNotFoundError(admin.id)

            company_name = admin_profile.company_name
            employee_email = derive_employee_email(name, company_name)
            temp_password = generate_temp_password()

            account = await self._create_account(
                employee_email,
                temp_password,
                {
                    "name": name,
                    "company_name": company_name,
                    "temp_password": temp_password,
                },
            )

            profile = Profile(
                id=account.id,
                name=name,
                email=employee_email,
                role=role,
                company_name=company_name,
                manager_id=manager_id,
                temp_password=temp_password,
            )
            try:
                await uow.profiles.save(profile)
                await uow.commit()
            except Exception:
                logger.error(
                    "orphaned_identity_account",
                    user_id=account.id,
                    email=employee_email,
                )
                raise

        logger.info(
            "employee_created",
            user_id=profile.id,
            role=profile.role,
            admin_id=admin.id,
        )
        return profile

    async def _create_account(
        self, email: str, password: str, metadata: dict[str, str]
    ) -> IdentityUser:
        try:
            return await self._identity.create_user(email, password, metadata)
        except IdentityProviderError as exc:
            logger.warning("identity_provider_error", operation="create_user", error=exc.message)
            raise UpstreamFailureError(exc.message) from exc
