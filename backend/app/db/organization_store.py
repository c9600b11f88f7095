"""SQLAlchemy-backed organization record store."""

from collections.abc import Iterable, Mapping
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from backend.app.db.models.organization import (
    Organization,
    OrganizationAddress,
    OrganizationText,
    OrganizationWebPage,
)
from backend.app.hierarchy.exceptions import OrganizationNotFoundError
from backend.app.models.organization import (
    ContactInformation,
    LocalizedText,
    OrganizationRecord,
    PostalAddresses,
    PostOfficeBoxAddress,
    StreetAddress,
    VisitingAddress,
    WebPage,
)

# organization_text.kind values per record field
TEXT_FIELDS = ("names", "descriptions", "name_abbreviations")
CONTACT_TEXT_FIELDS = ("call_charge_infos", "homepage_urls")

# Scalar record fields stored as organization columns of the same name
SCALAR_FIELDS = (
    "business_id",
    "oid",
    "type",
    "municipality_code",
    "valid_from",
    "valid_to",
    "active",
    "can_be_transferred_to_fsc",
    "can_be_responsible_dept_for_service",
)

# Every field insert copies from a record
RECORD_FIELDS = (
    *SCALAR_FIELDS,
    *TEXT_FIELDS,
    "contact",
    "visiting_address",
    "postal_addresses",
)

VISITING = "visiting"
POSTAL_STREET = "postal_street"
POSTAL_BOX = "postal_box"


def _localized(texts: Iterable[LocalizedText]) -> list[dict[str, str]]:
    return [text.model_dump() for text in texts]


def _texts_of(row: Organization, kind: str) -> list[LocalizedText]:
    return [
        LocalizedText(language_code=text.language_code, value=text.value)
        for text in row.texts
        if text.kind == kind
    ]


def _address_of(row: Organization, kind: str) -> OrganizationAddress | None:
    return next((address for address in row.addresses if address.kind == kind), None)


def _to_record(row: Organization) -> OrganizationRecord:
    """Map an ORM row and its children to an OrganizationRecord."""
    visiting = _address_of(row, VISITING)
    postal_street = _address_of(row, POSTAL_STREET)
    postal_box = _address_of(row, POSTAL_BOX)

    return OrganizationRecord(
        id=row.organization_id,
        parent_id=row.parent_organization_id,
        **{field: getattr(row, field) for field in SCALAR_FIELDS},
        **{field: _texts_of(row, field) for field in TEXT_FIELDS},
        contact=ContactInformation(
            phone_number=row.phone_number,
            call_charge_type=row.call_charge_type,
            call_charge_infos=_texts_of(row, "call_charge_infos"),
            email_address=row.email_address,
            web_pages=[
                WebPage(name=page.name, url=page.url, type=page.type)
                for page in row.web_pages
            ],
            homepage_urls=_texts_of(row, "homepage_urls"),
        ),
        visiting_address=(
            VisitingAddress(
                street_addresses=visiting.street_addresses,
                postal_code=visiting.postal_code,
                postal_districts=visiting.postal_districts,
                qualifiers=visiting.qualifiers,
            )
            if visiting is not None
            else None
        ),
        postal_addresses=PostalAddresses(
            use_visiting_address=row.use_visiting_address_as_postal_address,
            street_address=(
                StreetAddress(
                    street_addresses=postal_street.street_addresses,
                    postal_code=postal_street.postal_code,
                    postal_districts=postal_street.postal_districts,
                )
                if postal_street is not None
                else None
            ),
            post_office_box_address=(
                PostOfficeBoxAddress(
                    post_office_box=postal_box.post_office_box or "",
                    postal_code=postal_box.postal_code,
                    postal_districts=postal_box.postal_districts,
                )
                if postal_box is not None
                else None
            ),
        ),
    )


class SqlOrganizationStore:
    """
    Organization record store on top of a SQLAlchemy session.

    Writes are flushed immediately so that later reads in the same
    transaction see them; nothing is durable until ``commit``.
    """

    def __init__(self, session: Session):
        """
        Initialize store with a session.

        Args:
            session: SQLAlchemy session owning the transaction
        """
        self.session = session

    def _load(self, organization_id: UUID) -> Organization:
        row = self.session.get(Organization, organization_id)
        if row is None:
            raise OrganizationNotFoundError(organization_id)
        return row

    def list_all(self) -> list[OrganizationRecord]:
        """Every organization row, deactivated ones included, oldest first."""
        stmt = (
            select(Organization)
            .options(
                selectinload(Organization.texts),
                selectinload(Organization.web_pages),
                selectinload(Organization.addresses),
            )
            .order_by(Organization.created_at, Organization.organization_id)
        )
        return [_to_record(row) for row in self.session.execute(stmt).scalars().all()]

    def get(self, organization_id: UUID) -> OrganizationRecord:
        return _to_record(self._load(organization_id))

    def insert(self, record: OrganizationRecord) -> None:
        row = Organization(
            organization_id=record.id,
            parent_organization_id=record.parent_id,
        )
        self.session.add(row)
        self._apply(row, {field: getattr(record, field) for field in RECORD_FIELDS})
        self.session.flush()

    def replace(self, organization_id: UUID, fields: Mapping[str, Any]) -> None:
        """
        Replace the given record fields of one organization.

        Args:
            organization_id: Organization to update
            fields: OrganizationRecord field names mapped to new values

        Raises:
            OrganizationNotFoundError: If the organization does not exist
            KeyError: If a field name is unknown
        """
        row = self._load(organization_id)
        self._apply(row, fields)
        self.session.flush()

    def delete(self, organization_id: UUID) -> None:
        """Delete one organization with its texts, web pages and addresses."""
        row = self._load(organization_id)
        self.session.delete(row)
        # Flush per row so parents are never deleted before their children
        self.session.flush()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    # Field mapping

    def _apply(self, row: Organization, fields: Mapping[str, Any]) -> None:
        for field, value in fields.items():
            if field in SCALAR_FIELDS:
                setattr(row, field, value)
            elif field in TEXT_FIELDS:
                self._set_texts(row, field, value)
            elif field == "contact":
                self._set_contact(row, value)
            elif field == "visiting_address":
                self._set_visiting_address(row, value)
            elif field == "postal_addresses":
                self._set_postal_addresses(row, value)
            else:
                raise KeyError(f"Unknown organization field '{field}'")

    def _set_texts(self, row: Organization, kind: str, texts: Iterable[LocalizedText]) -> None:
        kept = [text for text in row.texts if text.kind != kind]
        new = [
            OrganizationText(
                kind=kind,
                language_code=text.language_code,
                value=text.value,
                position=position,
            )
            for position, text in enumerate(texts)
        ]
        row.texts = kept + new

    def _set_address(self, row: Organization, kind: str, address: OrganizationAddress | None) -> None:
        kept = [existing for existing in row.addresses if existing.kind != kind]
        row.addresses = kept + ([address] if address is not None else [])

    def _set_contact(self, row: Organization, contact: ContactInformation) -> None:
        row.phone_number = contact.phone_number
        row.call_charge_type = contact.call_charge_type
        row.email_address = contact.email_address
        for field in CONTACT_TEXT_FIELDS:
            self._set_texts(row, field, getattr(contact, field))
        row.web_pages = [
            OrganizationWebPage(name=page.name, url=page.url, type=page.type, position=position)
            for position, page in enumerate(contact.web_pages)
        ]

    def _set_visiting_address(self, row: Organization, address: VisitingAddress | None) -> None:
        self._set_address(
            row,
            VISITING,
            OrganizationAddress(
                kind=VISITING,
                postal_code=address.postal_code,
                street_addresses=_localized(address.street_addresses),
                postal_districts=_localized(address.postal_districts),
                qualifiers=_localized(address.qualifiers),
            )
            if address is not None
            else None,
        )

    def _set_postal_addresses(self, row: Organization, addresses: PostalAddresses) -> None:
        row.use_visiting_address_as_postal_address = addresses.use_visiting_address

        street = addresses.street_address
        self._set_address(
            row,
            POSTAL_STREET,
            OrganizationAddress(
                kind=POSTAL_STREET,
                postal_code=street.postal_code,
                street_addresses=_localized(street.street_addresses),
                postal_districts=_localized(street.postal_districts),
                qualifiers=[],
            )
            if street is not None
            else None,
        )

        box = addresses.post_office_box_address
        self._set_address(
            row,
            POSTAL_BOX,
            OrganizationAddress(
                kind=POSTAL_BOX,
                postal_code=box.postal_code,
                post_office_box=box.post_office_box,
                street_addresses=[],
                postal_districts=_localized(box.postal_districts),
                qualifiers=[],
            )
            if box is not None
            else None,
        )
