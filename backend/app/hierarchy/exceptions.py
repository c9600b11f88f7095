"""Organization hierarchy exceptions."""

from uuid import UUID


class OrganizationRegisterError(Exception):
    """Base exception for organization register errors."""
    pass


class InvalidHierarchyError(OrganizationRegisterError):
    """Raised when stored parent links do not form a forest.

    This points at corrupted data, never at bad user input.
    """
    pass


class OrganizationNotFoundError(OrganizationRegisterError):
    """Raised when an organization referenced by id does not exist."""

    def __init__(self, organization_id: UUID):
        super().__init__(f"Organization '{organization_id}' not found.")
        self.organization_id = organization_id
