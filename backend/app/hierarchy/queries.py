"""Hierarchy queries composed from filtering, subtree extraction and building."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from backend.app.models.organization import (
    HierarchyNode,
    OrganizationListItem,
    OrganizationName,
    OrganizationRecord,
)

from .builder import build_hierarchy
from .flatten import iter_nodes, search_by_name
from .store import OrganizationStore
from .subtree import extract_subtree
from .temporal import ValidityFilter, filter_by_validity

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current instant in UTC."""
    return datetime.now(UTC)


def _validity_for(include_future: bool) -> ValidityFilter:
    if include_future:
        return ValidityFilter.active_and_future
    return ValidityFilter.active_only


class OrganizationQueries:
    """
    Read side of the organization register.

    Every call reads the full record set from the store and rebuilds the
    requested trees, so nothing is shared between calls.
    """

    def __init__(
        self,
        store: OrganizationStore,
        now: Clock = utc_now,
        municipality_organization_type: str = "Kunta",
    ):
        """
        Initialize queries over a record store.

        Args:
            store: Record store to read from
            now: Clock providing the reference instant for validity checks
            municipality_organization_type: Type value marking municipalities
        """
        self.store = store
        self.now = now
        self.municipality_organization_type = municipality_organization_type

    def _records(self, validity: ValidityFilter) -> list[OrganizationRecord]:
        records = filter_by_validity(self.store.list_all(), validity, self.now())
        logger.debug(f"{len(records)} organizations match validity '{validity.value}'")
        return records

    def get_full_hierarchy(self, include_future: bool = False) -> list[HierarchyNode]:
        """
        Build the whole active organization forest.

        Sub-organizations whose parent is filtered out by time are promoted to
        roots rather than dropped.
        """
        return build_hierarchy(self._records(_validity_for(include_future)))

    def get_hierarchy_for_organization(
        self, organization_id: UUID, include_future: bool = False
    ) -> list[HierarchyNode]:
        """
        Build the forest rooted at one organization.

        Descendants whose parent is filtered out by time are left out. Returns
        an empty list if the organization is not among the filtered records.
        """
        records = self._records(_validity_for(include_future))
        return build_hierarchy(extract_subtree(records, organization_id))

    def get_complete_hierarchy_for_organization(
        self, organization_id: UUID
    ) -> list[HierarchyNode]:
        """Build the forest rooted at one organization regardless of validity windows."""
        records = self._records(ValidityFilter.all)
        return build_hierarchy(extract_subtree(records, organization_id))

    def get_flat_organizations(
        self, search_term: str | None = None, scope_root_id: UUID | None = None
    ) -> list[HierarchyNode]:
        """
        Search currently valid organizations by name at any depth.

        Args:
            search_term: Case-insensitive fragment of any name variant;
                everything matches when empty
            scope_root_id: Restrict the search to this organization's subtree

        Returns:
            Matching nodes in pre-order
        """
        if scope_root_id is not None:
            forest = self.get_hierarchy_for_organization(scope_root_id)
        else:
            forest = self.get_full_hierarchy()
        return search_by_name(forest, search_term)

    def get_organization(self, organization_id: UUID) -> OrganizationRecord:
        """Load one organization, raising OrganizationNotFoundError if unknown."""
        return self.store.get(organization_id)

    def get_organization_name(self, organization_id: UUID) -> OrganizationName:
        record = self.store.get(organization_id)
        return OrganizationName(id=record.id, names=record.names)

    def get_organization_names(self) -> list[OrganizationName]:
        """Names of every active organization, whatever its validity window."""
        return [
            OrganizationName(id=record.id, names=record.names)
            for record in self._records(ValidityFilter.all)
        ]

    def get_main_organizations(self) -> list[OrganizationName]:
        """Names of active root organizations."""
        return [
            OrganizationName(id=record.id, names=record.names)
            for record in self._records(ValidityFilter.all)
            if record.parent_id is None
        ]

    def get_municipal_main_organizations(
        self, municipality_code: str
    ) -> list[OrganizationName]:
        """Names of the currently valid root organizations of a municipality."""
        return [
            OrganizationName(id=record.id, names=record.names)
            for record in self._records(ValidityFilter.active_only)
            if record.parent_id is None
            and record.type == self.municipality_organization_type
            and record.municipality_code == municipality_code
        ]

    def get_organization_list_for_organization(
        self, organization_id: UUID
    ) -> list[OrganizationListItem]:
        """List an organization and its currently valid descendants."""
        return [
            OrganizationListItem(
                id=node.record.id,
                names=node.record.names,
                type=node.record.type,
                can_be_transferred_to_fsc=node.record.can_be_transferred_to_fsc,
                can_be_responsible_dept_for_service=node.record.can_be_responsible_dept_for_service,
            )
            for node in iter_nodes(self.get_hierarchy_for_organization(organization_id))
        ]
