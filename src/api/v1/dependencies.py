"""Dependency injection factories for API v1."""

from typing import Callable

from fastapi import Depends

from api.dependencies.auth import get_identity_provider, get_uow_factory
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.directory_service import DirectoryService
from domain.services.provisioning_service import ProvisioningService
from infrastructure.auth.provider import IIdentityProvider


def get_provisioning_service(
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
) -> ProvisioningService:
    """Get Provisioning service instance."""
    return ProvisioningService(uow_factory, identity_provider)


def get_directory_service(
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
) -> DirectoryService:
    """Get Directory service instance."""
    return DirectoryService(uow_factory, identity_provider)
