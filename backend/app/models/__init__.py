"""Convenient imports for all model types."""

from .organization import (
    BasicInformation,
    ContactInformation,
    HierarchyNode,
    LocalizedText,
    OrganizationKind,
    OrganizationListItem,
    OrganizationName,
    OrganizationRecord,
    PostalAddresses,
    PostOfficeBoxAddress,
    StreetAddress,
    VisitingAddress,
    WebPage,
)

__all__ = [
    "BasicInformation",
    "ContactInformation",
    "HierarchyNode",
    "LocalizedText",
    "OrganizationKind",
    "OrganizationListItem",
    "OrganizationName",
    "OrganizationRecord",
    "PostalAddresses",
    "PostOfficeBoxAddress",
    "StreetAddress",
    "VisitingAddress",
    "WebPage",
]
