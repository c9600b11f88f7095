"""Validity-window and deactivation filtering of organization records.

The reference instant is always passed in by the caller so that filtering is
deterministic.
"""

from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from uuid import UUID

from backend.app.models.organization import OrganizationRecord, as_utc

from .builder import ensure_acyclic, index_records


class ValidityFilter(str, Enum):
    """Which validity windows a query accepts."""

    active_only = "active_only"  # valid right now
    active_and_future = "active_and_future"  # not yet expired
    all = "all"  # any validity window


def is_valid_at(record: OrganizationRecord, now: datetime) -> bool:
    """Check that valid_from <= now <= valid_to, open bounds matching."""
    if record.valid_from is not None and record.valid_from > now:
        return False
    if record.valid_to is not None and record.valid_to < now:
        return False
    return True


def is_not_expired(record: OrganizationRecord, now: datetime) -> bool:
    """Check that the record is valid now or becomes valid later."""
    return record.valid_to is None or record.valid_to >= now


def without_deactivated(records: Iterable[OrganizationRecord]) -> list[OrganizationRecord]:
    """
    Drop deactivated records together with everything below them.

    A record survives only if it and every ancestor present in ``records``
    are active.

    Raises:
        InvalidHierarchyError: If parent links contain a cycle
    """
    by_id = index_records(records)
    ensure_acyclic(by_id)

    effective: dict[UUID, bool] = {}
    for record_id in by_id:
        chain: list[UUID] = []
        current: UUID | None = record_id
        while current is not None and current in by_id and current not in effective:
            chain.append(current)
            current = by_id[current].parent_id

        inherited = effective.get(current, True) if current is not None else True
        for chain_id in reversed(chain):
            inherited = inherited and by_id[chain_id].active
            effective[chain_id] = inherited

    return [record for record in by_id.values() if effective[record.id]]


def filter_by_validity(
    records: Iterable[OrganizationRecord],
    mode: ValidityFilter,
    now: datetime,
) -> list[OrganizationRecord]:
    """
    Select the active records matching a validity mode.

    Args:
        records: Complete record set, deactivated records included
        mode: Validity windows to accept
        now: Reference instant; naive values are read as UTC

    Returns:
        Matching records in input order. Parents of the returned records may
        have been filtered out; callers decide whether such orphans become
        roots or are dropped.
    """
    now = as_utc(now)
    active = without_deactivated(records)

    if mode is ValidityFilter.active_only:
        return [record for record in active if is_valid_at(record, now)]
    if mode is ValidityFilter.active_and_future:
        return [record for record in active if is_not_expired(record, now)]
    return active
