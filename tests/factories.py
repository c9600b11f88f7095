"""Builders for organization test data."""

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from backend.app.hierarchy.exceptions import OrganizationNotFoundError
from backend.app.models.organization import (
    BasicInformation,
    LocalizedText,
    OrganizationRecord,
)

# Fixed reference instant used as "now" throughout the tests
NOW = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


def names(fi: str, **others: str) -> list[LocalizedText]:
    """Finnish name plus optional names keyed by language code."""
    texts = [LocalizedText(language_code="fi", value=fi)]
    texts.extend(LocalizedText(language_code=code, value=value) for code, value in others.items())
    return texts


def make_info(
    name: str,
    business_id: str = "1234567-1",
    type: str = "Yritys",
    **fields: Any,
) -> BasicInformation:
    return BasicInformation(business_id=business_id, type=type, names=names(name), **fields)


def make_record(
    name: str,
    parent: OrganizationRecord | UUID | None = None,
    *,
    id: UUID | None = None,
    business_id: str = "1234567-1",
    type: str = "Yritys",
    **fields: Any,
) -> OrganizationRecord:
    """Build a record, taking the parent either as a record or as an id."""
    parent_id = parent.id if isinstance(parent, OrganizationRecord) else parent
    return OrganizationRecord(
        id=id or uuid4(),
        parent_id=parent_id,
        business_id=business_id,
        type=type,
        names=names(name),
        **fields,
    )


def node_names(forest) -> list[str]:
    """Finnish names of a forest's roots."""
    return [node.record.name_in("fi") for node in forest]


class InMemoryOrganizationStore:
    """Dict-backed record store with commit and rollback snapshots."""

    def __init__(self, records: Iterable[OrganizationRecord] = ()):
        self.records: dict[UUID, OrganizationRecord] = {record.id: record for record in records}
        self._committed = dict(self.records)
        self.commits = 0
        self.rollbacks = 0

    def list_all(self) -> list[OrganizationRecord]:
        return list(self.records.values())

    def get(self, organization_id: UUID) -> OrganizationRecord:
        try:
            return self.records[organization_id]
        except KeyError:
            raise OrganizationNotFoundError(organization_id)

    def insert(self, record: OrganizationRecord) -> None:
        self.records[record.id] = record

    def replace(self, organization_id: UUID, fields: Mapping[str, Any]) -> None:
        self.records[organization_id] = self.get(organization_id).model_copy(update=dict(fields))

    def delete(self, organization_id: UUID) -> None:
        self.get(organization_id)
        del self.records[organization_id]

    def commit(self) -> None:
        self._committed = dict(self.records)
        self.commits += 1

    def rollback(self) -> None:
        self.records = dict(self._committed)
        self.rollbacks += 1
