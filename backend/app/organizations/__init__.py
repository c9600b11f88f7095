"""Organization mutations and their validation."""

from .exceptions import DuplicateBusinessIdError, OrganizationValidationError
from .service import OrganizationService, create_organization_service

__all__ = [
    "DuplicateBusinessIdError",
    "OrganizationValidationError",
    "OrganizationService",
    "create_organization_service",
]
