"""Authorization of organization mutations relative to the caller's home organization."""

import logging
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

from backend.app.hierarchy.exceptions import OrganizationRegisterError
from backend.app.hierarchy.flatten import iter_nodes
from backend.app.hierarchy.queries import OrganizationQueries

logger = logging.getLogger(__name__)


class Privilege(str, Enum):
    """Privileges a caller may be granted."""

    manage_own_organization_data = "manage_own_organization_data"
    manage_all_organization_data = "manage_all_organization_data"


class ManagementScope(str, Enum):
    """How far a target organization is from the caller's own subtree."""

    own_subtree = "own_subtree"
    global_only = "global_only"


# Privileges that satisfy each scope
ACCEPTED_PRIVILEGES: dict[ManagementScope, frozenset[Privilege]] = {
    ManagementScope.own_subtree: frozenset(
        {Privilege.manage_own_organization_data, Privilege.manage_all_organization_data}
    ),
    ManagementScope.global_only: frozenset({Privilege.manage_all_organization_data}),
}


class Caller(BaseModel):
    """Identity and grants of whoever is performing an operation."""

    user_id: UUID
    home_organization_id: UUID | None = None
    privileges: frozenset[Privilege] = Field(default_factory=frozenset)

    def has_any(self, privileges: frozenset[Privilege]) -> bool:
        return not self.privileges.isdisjoint(privileges)


class PermissionDeniedError(OrganizationRegisterError):
    """Raised when the caller lacks the privilege an operation requires."""

    def __init__(self, caller: Caller, scope: ManagementScope, target_id: UUID | None = None):
        target = f"organization '{target_id}'" if target_id is not None else "a new organization"
        super().__init__(
            f"User '{caller.user_id}' is not allowed to manage {target} ({scope.value})."
        )
        self.scope = scope
        self.target_id = target_id


class PermissionGate:
    """Decides whether a caller may mutate a given organization."""

    def __init__(self, queries: OrganizationQueries):
        self.queries = queries

    def can_manage(
        self, home_organization_id: UUID | None, target_organization_id: UUID
    ) -> ManagementScope:
        """
        Classify a target organization relative to the caller's home organization.

        Args:
            home_organization_id: Caller's home organization, if any
            target_organization_id: Organization to be mutated

        Returns:
            own_subtree if the target is the home organization or any of its
            descendants (validity windows ignored), global_only otherwise
        """
        if home_organization_id is None:
            return ManagementScope.global_only

        forest = self.queries.get_complete_hierarchy_for_organization(home_organization_id)
        if any(node.id == target_organization_id for node in iter_nodes(forest)):
            return ManagementScope.own_subtree
        return ManagementScope.global_only

    def _require(self, caller: Caller, scope: ManagementScope, target_id: UUID | None) -> None:
        if not caller.has_any(ACCEPTED_PRIVILEGES[scope]):
            logger.info(
                f"Denied user {caller.user_id} ({scope.value}) on "
                f"{target_id if target_id is not None else 'new organization'}"
            )
            raise PermissionDeniedError(caller, scope, target_id)

    def authorize(self, caller: Caller, target_organization_id: UUID) -> ManagementScope:
        """
        Check that the caller may mutate an existing organization.

        Raises:
            PermissionDeniedError: If the caller lacks the required privilege
        """
        scope = self.can_manage(caller.home_organization_id, target_organization_id)
        self._require(caller, scope, target_organization_id)
        return scope

    def authorize_add_organization(self, caller: Caller) -> None:
        """Adding a root organization needs the global privilege."""
        self._require(caller, ManagementScope.global_only, None)

    def authorize_add_sub_organization(self, caller: Caller, parent_id: UUID) -> ManagementScope:
        """Adding under a parent is scoped like mutating that parent."""
        return self.authorize(caller, parent_id)
