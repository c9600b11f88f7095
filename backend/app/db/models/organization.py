"""Organization ORM models."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base


class Organization(Base):
    """Organization table - self-referencing forest of organizations."""

    __tablename__ = "organization"

    organization_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    parent_organization_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("organization.organization_id"), nullable=True
    )
    business_id: Mapped[str] = mapped_column(Text, nullable=False)
    oid: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    municipality_code: Mapped[str | None] = mapped_column(Text, nullable=True)
    valid_from: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    valid_to: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    can_be_transferred_to_fsc: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    can_be_responsible_dept_for_service: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    # Contact information
    phone_number: Mapped[str | None] = mapped_column(Text, nullable=True)
    call_charge_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    email_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    use_visiting_address_as_postal_address: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    # Relationships
    texts: Mapped[list["OrganizationText"]] = relationship(
        "OrganizationText",
        back_populates="organization",
        cascade="all, delete-orphan",
        order_by="OrganizationText.position",
    )
    web_pages: Mapped[list["OrganizationWebPage"]] = relationship(
        "OrganizationWebPage",
        back_populates="organization",
        cascade="all, delete-orphan",
        order_by="OrganizationWebPage.position",
    )
    addresses: Mapped[list["OrganizationAddress"]] = relationship(
        "OrganizationAddress",
        back_populates="organization",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_organization_parent", "parent_organization_id"),
        Index("idx_organization_business_id", "business_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Organization(organization_id={self.organization_id}, "
            f"business_id={self.business_id!r}, parent={self.parent_organization_id})>"
        )


class OrganizationText(Base):
    """Language-specific text of an organization (name, description, ...)."""

    __tablename__ = "organization_text"

    text_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    organization_id: Mapped[UUID] = mapped_column(
        ForeignKey("organization.organization_id", ondelete="CASCADE"), nullable=False
    )
    kind: Mapped[str] = mapped_column(Text, nullable=False)
    language_code: Mapped[str] = mapped_column(Text, nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="texts"
    )

    __table_args__ = (Index("idx_organization_text_org", "organization_id", "kind"),)

    def __repr__(self) -> str:
        return f"<OrganizationText(kind={self.kind!r}, language_code={self.language_code!r})>"


class OrganizationWebPage(Base):
    """Web page link of an organization."""

    __tablename__ = "organization_web_page"

    web_page_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    organization_id: Mapped[UUID] = mapped_column(
        ForeignKey("organization.organization_id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="web_pages"
    )


class OrganizationAddress(Base):
    """Visiting or postal address of an organization.

    Localized parts are JSON lists of {"language_code", "value"} objects.
    """

    __tablename__ = "organization_address"

    address_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    organization_id: Mapped[UUID] = mapped_column(
        ForeignKey("organization.organization_id", ondelete="CASCADE"), nullable=False
    )
    kind: Mapped[str] = mapped_column(Text, nullable=False)  # visiting | postal_street | postal_box
    postal_code: Mapped[str | None] = mapped_column(Text, nullable=True)
    post_office_box: Mapped[str | None] = mapped_column(Text, nullable=True)
    street_addresses: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    postal_districts: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    qualifiers: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="addresses"
    )

    __table_args__ = (Index("idx_organization_address_org", "organization_id", "kind"),)
