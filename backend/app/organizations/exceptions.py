"""Organization write exceptions."""

from backend.app.hierarchy.exceptions import OrganizationRegisterError


class OrganizationValidationError(OrganizationRegisterError):
    """Raised when submitted organization data is invalid."""
    pass


class DuplicateBusinessIdError(OrganizationValidationError):
    """Raised when an active root organization already uses the business id."""

    def __init__(self, business_id: str):
        super().__init__(f"Organization with business id '{business_id}' already added.")
        self.business_id = business_id
