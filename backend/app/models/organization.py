"""Organization records, write payloads and hierarchy view models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class OrganizationKind(str, Enum):
    """Position of an organization in the forest."""

    root = "root"
    sub = "sub"


class LocalizedText(BaseModel):
    """A text value tagged with the language it is written in."""

    language_code: str = Field(description="ISO 639-1 language code, e.g. 'fi'")
    value: str = Field(description="Text in the given language")

    @field_validator("language_code", mode="after")
    @classmethod
    def _lowercase_language(cls, value: str) -> str:
        return value.strip().lower()


class WebPage(BaseModel):
    """Web page published by an organization."""

    name: str
    url: str
    type: str = Field(default="Kotisivu", description="Web page type label")


class ContactInformation(BaseModel):
    """Phone, e-mail and web presence of an organization."""

    phone_number: str | None = None
    call_charge_type: str | None = None
    call_charge_infos: list[LocalizedText] = Field(default_factory=list)
    email_address: EmailStr | None = None
    web_pages: list[WebPage] = Field(default_factory=list)
    homepage_urls: list[LocalizedText] = Field(default_factory=list)


class StreetAddress(BaseModel):
    """Street address with localized street names and postal districts."""

    street_addresses: list[LocalizedText] = Field(default_factory=list)
    postal_code: str | None = None
    postal_districts: list[LocalizedText] = Field(default_factory=list)


class VisitingAddress(StreetAddress):
    """Street address where the organization receives visitors."""

    qualifiers: list[LocalizedText] = Field(
        default_factory=list, description="Extra directions, e.g. floor or door"
    )


class PostOfficeBoxAddress(BaseModel):
    """Post office box address."""

    post_office_box: str
    postal_code: str | None = None
    postal_districts: list[LocalizedText] = Field(default_factory=list)


class PostalAddresses(BaseModel):
    """Postal delivery addresses of an organization."""

    use_visiting_address: bool = Field(
        default=False, description="Deliver post to the visiting address"
    )
    street_address: StreetAddress | None = None
    post_office_box_address: PostOfficeBoxAddress | None = None


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize to UTC, reading naive datetimes as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class BasicInformation(BaseModel):
    """Identity, naming and validity of an organization."""

    business_id: str = Field(description="Business identity code, e.g. '1234567-1'")
    oid: str | None = Field(default=None, description="Object identifier")
    type: str = Field(description="Organization type, e.g. 'Kunta' or 'Yritys'")
    municipality_code: str | None = None
    names: list[LocalizedText] = Field(default_factory=list)
    descriptions: list[LocalizedText] = Field(default_factory=list)
    name_abbreviations: list[LocalizedText] = Field(default_factory=list)
    valid_from: datetime | None = None
    valid_to: datetime | None = Field(
        default=None, description="Open ended when not set"
    )
    can_be_transferred_to_fsc: bool = False
    can_be_responsible_dept_for_service: bool = False

    @field_validator("valid_from", "valid_to", mode="after")
    @classmethod
    def _validity_in_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    def name_in(self, language_code: str) -> str | None:
        """Return the name in the given language, if any."""
        for name in self.names:
            if name.language_code == language_code:
                return name.value
        return None


class OrganizationRecord(BasicInformation):
    """A single organization row as held by the record store."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    parent_id: UUID | None = None
    active: bool = True
    contact: ContactInformation = Field(default_factory=ContactInformation)
    visiting_address: VisitingAddress | None = None
    postal_addresses: PostalAddresses = Field(default_factory=PostalAddresses)

    @property
    def kind(self) -> OrganizationKind:
        """Root organizations have no parent; everything else is a sub-organization."""
        if self.parent_id is None:
            return OrganizationKind.root
        return OrganizationKind.sub


class OrganizationName(BaseModel):
    """Id and localized names of an organization."""

    id: UUID
    names: list[LocalizedText]


class OrganizationListItem(BaseModel):
    """Flat listing entry for an organization."""

    id: UUID
    names: list[LocalizedText]
    type: str
    can_be_transferred_to_fsc: bool
    can_be_responsible_dept_for_service: bool


class HierarchyNode(BaseModel):
    """View model of one organization and its sub-organizations.

    Nodes are built per query and own their children. The parent is only
    known through ``record.parent_id``.
    """

    record: OrganizationRecord
    children: list[HierarchyNode] = Field(default_factory=list)

    @property
    def id(self) -> UUID:
        return self.record.id

    @property
    def names(self) -> list[LocalizedText]:
        return self.record.names


HierarchyNode.model_rebuild()
