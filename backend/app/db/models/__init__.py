"""ORM models for database tables."""

from .organization import (
    Organization,
    OrganizationAddress,
    OrganizationText,
    OrganizationWebPage,
)

__all__ = [
    "Organization",
    "OrganizationAddress",
    "OrganizationText",
    "OrganizationWebPage",
]
