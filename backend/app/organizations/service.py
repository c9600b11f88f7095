"""Organization mutations: add, update, deactivate and remove.

Every operation authorizes the caller before touching the store, and writes
are committed as one unit or rolled back together.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any
from uuid import UUID, uuid4

from backend.app.config import Settings, get_settings
from backend.app.hierarchy.builder import ensure_acyclic, index_records
from backend.app.hierarchy.exceptions import OrganizationNotFoundError
from backend.app.hierarchy.queries import Clock, OrganizationQueries, utc_now
from backend.app.hierarchy.store import OrganizationStore
from backend.app.hierarchy.subtree import descendant_ids
from backend.app.models.organization import (
    BasicInformation,
    ContactInformation,
    OrganizationKind,
    OrganizationRecord,
    PostalAddresses,
    VisitingAddress,
)
from backend.app.security.permissions import Caller, PermissionGate

from .exceptions import DuplicateBusinessIdError
from .validation import (
    validate_basic_information,
    validate_contact_information,
    validate_postal_addresses,
    validate_visiting_address,
)

logger = logging.getLogger(__name__)

BASIC_INFORMATION_FIELDS = tuple(BasicInformation.model_fields)


def _basic_fields(info: BasicInformation) -> dict[str, Any]:
    return {name: getattr(info, name) for name in BASIC_INFORMATION_FIELDS}


class OrganizationService:
    """Mutation coordinator for the organization register."""

    def __init__(
        self,
        store: OrganizationStore,
        queries: OrganizationQueries,
        gate: PermissionGate,
        settings: Settings,
        new_id: Callable[[], UUID] = uuid4,
    ):
        """
        Initialize the service.

        Args:
            store: Record store all reads and writes go through
            queries: Read side over the same store
            gate: Permission gate over the same queries
            settings: Data language and organization type settings
            new_id: Id generator for new organizations
        """
        self.store = store
        self.queries = queries
        self.gate = gate
        self.settings = settings
        self.new_id = new_id

    # Validation helpers

    def _validate_basic(self, info: BasicInformation) -> None:
        validate_basic_information(
            info,
            self.settings.data_language_codes,
            self.settings.primary_data_language,
            self.settings.municipality_organization_type,
        )

    def _ensure_unique_business_id(
        self, kind: OrganizationKind, business_id: str, exclude_id: UUID | None
    ) -> None:
        """Root organizations must not share a business id with another active root."""
        if kind is not OrganizationKind.root:
            return
        business_id = business_id.strip()
        for record in self.store.list_all():
            if (
                record.active
                and record.parent_id is None
                and record.id != exclude_id
                and record.business_id.strip() == business_id
            ):
                raise DuplicateBusinessIdError(business_id)

    def _commit(self, operation: str, writes: Callable[[], None]) -> None:
        """Run writes and commit them, rolling everything back on failure."""
        try:
            writes()
            self.store.commit()
        except Exception:
            logger.warning(f"{operation} failed, rolling back")
            self.store.rollback()
            raise

    def _replace(
        self, operation: str, organization_id: UUID, fields: Mapping[str, Any]
    ) -> None:
        self._commit(operation, lambda: self.store.replace(organization_id, fields))
        logger.info(f"{operation}: organization {organization_id}")

    # Adding

    def add_organization(self, caller: Caller, info: BasicInformation) -> UUID:
        """
        Add a root organization.

        Returns:
            Id of the new organization

        Raises:
            PermissionDeniedError: Without the global management privilege
            OrganizationValidationError: If the data is invalid
            DuplicateBusinessIdError: If an active root already has the business id
        """
        self.gate.authorize_add_organization(caller)
        self._validate_basic(info)
        self._ensure_unique_business_id(OrganizationKind.root, info.business_id, None)

        record = OrganizationRecord(id=self.new_id(), parent_id=None, **_basic_fields(info))
        self._commit("Add organization", lambda: self.store.insert(record))
        logger.info(f"Added organization {record.id} ({info.business_id})")
        return record.id

    def add_sub_organization(
        self, caller: Caller, parent_id: UUID, info: BasicInformation
    ) -> UUID:
        """
        Add an organization under an existing parent.

        Sub-organizations may reuse business ids, including the parent's.

        Raises:
            PermissionDeniedError: If the caller may not manage the parent
            OrganizationNotFoundError: If the parent does not exist
            OrganizationValidationError: If the data is invalid
        """
        self.gate.authorize_add_sub_organization(caller, parent_id)
        parent = self.store.get(parent_id)
        self._validate_basic(info)

        record = OrganizationRecord(id=self.new_id(), parent_id=parent.id, **_basic_fields(info))
        self._commit("Add sub-organization", lambda: self.store.insert(record))
        logger.info(f"Added sub-organization {record.id} under {parent.id}")
        return record.id

    # Updating

    def update_basic_information(
        self, caller: Caller, organization_id: UUID, info: BasicInformation
    ) -> None:
        """Replace identity, names, type and validity of an organization."""
        self.gate.authorize(caller, organization_id)
        current = self.store.get(organization_id)
        self._validate_basic(info)
        self._ensure_unique_business_id(current.kind, info.business_id, current.id)
        self._replace("Update basic information", organization_id, _basic_fields(info))

    def update_contact_information(
        self, caller: Caller, organization_id: UUID, contact: ContactInformation
    ) -> None:
        self.gate.authorize(caller, organization_id)
        self.store.get(organization_id)
        validate_contact_information(contact, self.settings.data_language_codes)
        self._replace("Update contact information", organization_id, {"contact": contact})

    def update_visiting_address(
        self, caller: Caller, organization_id: UUID, address: VisitingAddress
    ) -> None:
        self.gate.authorize(caller, organization_id)
        self.store.get(organization_id)
        validate_visiting_address(address, self.settings.data_language_codes)
        self._replace(
            "Update visiting address", organization_id, {"visiting_address": address}
        )

    def update_postal_addresses(
        self, caller: Caller, organization_id: UUID, addresses: PostalAddresses
    ) -> None:
        self.gate.authorize(caller, organization_id)
        self.store.get(organization_id)
        validate_postal_addresses(addresses, self.settings.data_language_codes)
        self._replace(
            "Update postal addresses", organization_id, {"postal_addresses": addresses}
        )

    # Cascades

    def _cascade_targets(self, organization_id: UUID) -> list[UUID]:
        """Descendants deepest first, followed by the organization itself."""
        records = self.store.list_all()
        by_id = index_records(records)
        ensure_acyclic(by_id)
        if organization_id not in by_id:
            raise OrganizationNotFoundError(organization_id)
        return [*descendant_ids(by_id.values(), organization_id), organization_id]

    def deactivate_organization(self, caller: Caller, organization_id: UUID) -> None:
        """
        Deactivate an organization and every organization below it.

        Descendants are deactivated before their parents. Nothing is deleted.
        """
        self.gate.authorize(caller, organization_id)
        targets = self._cascade_targets(organization_id)

        def writes() -> None:
            for target_id in targets:
                logger.debug(f"Deactivating organization {target_id}")
                self.store.replace(target_id, {"active": False})

        self._commit("Deactivate organization", writes)
        logger.info(f"Deactivated organization {organization_id} and {len(targets) - 1} descendants")

    def remove_organization(self, caller: Caller, organization_id: UUID) -> None:
        """
        Permanently delete an organization and every organization below it.

        Descendants are deleted before their parents, each together with its
        localized texts, web pages and addresses.
        """
        self.gate.authorize(caller, organization_id)
        targets = self._cascade_targets(organization_id)

        def writes() -> None:
            for target_id in targets:
                logger.debug(f"Removing organization {target_id}")
                self.store.delete(target_id)

        self._commit("Remove organization", writes)
        logger.info(f"Removed organization {organization_id} and {len(targets) - 1} descendants")


def create_organization_service(
    store: OrganizationStore,
    settings: Settings | None = None,
    now: Clock = utc_now,
) -> OrganizationService:
    """Wire queries, permission gate and service over one store."""
    settings = settings or get_settings()
    queries = OrganizationQueries(
        store,
        now=now,
        municipality_organization_type=settings.municipality_organization_type,
    )
    return OrganizationService(store, queries, PermissionGate(queries), settings)
