"""Organization register API endpoints."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from backend.app.api.auth import get_caller
from backend.app.db.organization_store import SqlOrganizationStore
from backend.app.db.session import get_session
from backend.app.models.organization import (
    BasicInformation,
    ContactInformation,
    HierarchyNode,
    LocalizedText,
    OrganizationListItem,
    OrganizationName,
    OrganizationRecord,
    PostalAddresses,
    VisitingAddress,
)
from backend.app.organizations import OrganizationService, create_organization_service
from backend.app.security import Caller

router = APIRouter(prefix="/organizations", tags=["organizations"])


class HierarchyNodeResponse(BaseModel):
    """One organization in a hierarchy response, with its sub-organizations."""

    id: UUID
    parent_id: UUID | None = None
    business_id: str
    type: str
    names: list[LocalizedText]
    valid_from: datetime | None = None
    valid_to: datetime | None = None
    sub_organizations: list["HierarchyNodeResponse"] = Field(default_factory=list)


HierarchyNodeResponse.model_rebuild()


class CreatedOrganization(BaseModel):
    """Id of a newly added organization."""

    id: UUID


def to_response(node: HierarchyNode) -> HierarchyNodeResponse:
    record = node.record
    return HierarchyNodeResponse(
        id=record.id,
        parent_id=record.parent_id,
        business_id=record.business_id,
        type=record.type,
        names=record.names,
        valid_from=record.valid_from,
        valid_to=record.valid_to,
        sub_organizations=[to_response(child) for child in node.children],
    )


def get_organization_service(
    session: Session = Depends(get_session),
) -> OrganizationService:
    """Dependency wiring the organization service to a database session."""
    return create_organization_service(SqlOrganizationStore(session))


# Queries. Fixed paths are declared before /{organization_id}.


@router.get("/hierarchy", response_model=list[HierarchyNodeResponse])
def get_full_hierarchy(
    include_future: bool = Query(False, description="Include organizations not yet valid"),
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> list[HierarchyNodeResponse]:
    """Whole organization forest."""
    return [to_response(node) for node in service.queries.get_full_hierarchy(include_future)]


@router.get("/main", response_model=list[OrganizationName])
def get_main_organizations(
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> list[OrganizationName]:
    return service.queries.get_main_organizations()


@router.get("/names", response_model=list[OrganizationName])
def get_organization_names(
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> list[OrganizationName]:
    return service.queries.get_organization_names()


@router.get("/municipal/{municipality_code}", response_model=list[OrganizationName])
def get_municipal_main_organizations(
    municipality_code: str,
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> list[OrganizationName]:
    """Currently valid main organizations of one municipality."""
    return service.queries.get_municipal_main_organizations(municipality_code)


@router.get("", response_model=list[HierarchyNodeResponse])
def search_organizations(
    search: str | None = Query(None, description="Search by any name variant"),
    own: bool = Query(False, description="Only search the caller's own organization tree"),
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> list[HierarchyNodeResponse]:
    """
    Flat name search over currently valid organizations.

    Matches are returned without their sub-organizations.
    """
    if own and caller.home_organization_id is None:
        return []
    scope_root_id = caller.home_organization_id if own else None
    return [
        to_response(HierarchyNode(record=node.record))
        for node in service.queries.get_flat_organizations(search, scope_root_id)
    ]


@router.get("/{organization_id}", response_model=OrganizationRecord)
def get_organization(
    organization_id: UUID,
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> OrganizationRecord:
    return service.queries.get_organization(organization_id)


@router.get("/{organization_id}/name", response_model=OrganizationName)
def get_organization_name(
    organization_id: UUID,
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> OrganizationName:
    return service.queries.get_organization_name(organization_id)


@router.get("/{organization_id}/hierarchy", response_model=list[HierarchyNodeResponse])
def get_hierarchy_for_organization(
    organization_id: UUID,
    include_future: bool = Query(False, description="Include organizations not yet valid"),
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> list[HierarchyNodeResponse]:
    """Forest rooted at one organization; empty if it is not currently valid."""
    forest = service.queries.get_hierarchy_for_organization(organization_id, include_future)
    return [to_response(node) for node in forest]


@router.get(
    "/{organization_id}/completehierarchy", response_model=list[HierarchyNodeResponse]
)
def get_complete_hierarchy_for_organization(
    organization_id: UUID,
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> list[HierarchyNodeResponse]:
    forest = service.queries.get_complete_hierarchy_for_organization(organization_id)
    return [to_response(node) for node in forest]


@router.get("/{organization_id}/list", response_model=list[OrganizationListItem])
def get_organization_list(
    organization_id: UUID,
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> list[OrganizationListItem]:
    """Organization and its currently valid descendants as a flat list."""
    return service.queries.get_organization_list_for_organization(organization_id)


# Mutations


@router.post("", response_model=CreatedOrganization, status_code=status.HTTP_201_CREATED)
def add_organization(
    info: BasicInformation,
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> CreatedOrganization:
    """Add a main organization. Requires the global management privilege."""
    return CreatedOrganization(id=service.add_organization(caller, info))


@router.post(
    "/{parent_id}/suborganizations",
    response_model=CreatedOrganization,
    status_code=status.HTTP_201_CREATED,
)
def add_sub_organization(
    parent_id: UUID,
    info: BasicInformation,
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> CreatedOrganization:
    return CreatedOrganization(id=service.add_sub_organization(caller, parent_id, info))


@router.put("/{organization_id}/basicinformation", status_code=status.HTTP_204_NO_CONTENT)
def update_basic_information(
    organization_id: UUID,
    info: BasicInformation,
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> None:
    service.update_basic_information(caller, organization_id, info)


@router.put("/{organization_id}/contactinformation", status_code=status.HTTP_204_NO_CONTENT)
def update_contact_information(
    organization_id: UUID,
    contact: ContactInformation,
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> None:
    service.update_contact_information(caller, organization_id, contact)


@router.put("/{organization_id}/visitingaddress", status_code=status.HTTP_204_NO_CONTENT)
def update_visiting_address(
    organization_id: UUID,
    address: VisitingAddress,
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> None:
    service.update_visiting_address(caller, organization_id, address)


@router.put("/{organization_id}/postaladdresses", status_code=status.HTTP_204_NO_CONTENT)
def update_postal_addresses(
    organization_id: UUID,
    addresses: PostalAddresses,
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> None:
    service.update_postal_addresses(caller, organization_id, addresses)


@router.post("/{organization_id}/deactivate", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_organization(
    organization_id: UUID,
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> None:
    """Deactivate an organization together with all of its sub-organizations."""
    service.deactivate_organization(caller, organization_id)


@router.delete("/{organization_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_organization(
    organization_id: UUID,
    caller: Caller = Depends(get_caller),
    service: OrganizationService = Depends(get_organization_service),
) -> None:
    """Permanently remove an organization together with all of its sub-organizations."""
    service.remove_organization(caller, organization_id)
