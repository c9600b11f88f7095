"""Record store interface the hierarchy engine reads from and writes through."""

from collections.abc import Mapping
from typing import Any, Protocol
from uuid import UUID

from backend.app.models.organization import OrganizationRecord


class OrganizationStore(Protocol):
    """Synchronous access to the durable set of organization records.

    ``replace`` takes a mapping of ``OrganizationRecord`` field names to new
    values. Writes become durable on ``commit``; ``rollback`` discards every
    write since the last commit.
    """

    def list_all(self) -> list[OrganizationRecord]: ...

    def get(self, organization_id: UUID) -> OrganizationRecord:
        """Raises OrganizationNotFoundError if the id is unknown."""
        ...

    def insert(self, record: OrganizationRecord) -> None: ...

    def replace(self, organization_id: UUID, fields: Mapping[str, Any]) -> None: ...

    def delete(self, organization_id: UUID) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
