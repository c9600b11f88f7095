"""Assemble flat organization records into a forest of hierarchy nodes."""

from collections.abc import Iterable, Mapping
from uuid import UUID

from backend.app.models.organization import HierarchyNode, OrganizationRecord

from .exceptions import InvalidHierarchyError


def index_records(records: Iterable[OrganizationRecord]) -> dict[UUID, OrganizationRecord]:
    """Map records by id, preserving input order.

    Raises:
        InvalidHierarchyError: If two records share an id
    """
    by_id: dict[UUID, OrganizationRecord] = {}
    for record in records:
        if record.id in by_id:
            raise InvalidHierarchyError(f"Duplicate organization id '{record.id}'.")
        by_id[record.id] = record
    return by_id


def ensure_acyclic(by_id: Mapping[UUID, OrganizationRecord]) -> None:
    """
    Verify that every parent chain ends at a root within len(by_id) hops.

    A parent id missing from the mapping ends the chain like a null parent,
    so filtered subsets are accepted.

    Args:
        by_id: Records keyed by id

    Raises:
        InvalidHierarchyError: If a parent chain revisits an organization
    """
    max_hops = len(by_id)
    verified: set[UUID] = set()

    for start_id in by_id:
        chain: list[UUID] = []
        on_chain: set[UUID] = set()
        current: UUID | None = start_id

        while current is not None and current in by_id and current not in verified:
            if current in on_chain or len(chain) > max_hops:
                raise InvalidHierarchyError(
                    f"Organization '{current}' is its own ancestor."
                )
            chain.append(current)
            on_chain.add(current)
            current = by_id[current].parent_id

        verified.update(chain)


def build_hierarchy(records: Iterable[OrganizationRecord]) -> list[HierarchyNode]:
    """
    Build a forest where each node's children are the records pointing at it.

    Records whose parent is not part of the input become roots. Siblings keep
    the input order, so repeated calls on the same input give the same forest.

    Args:
        records: Organization records, possibly an already filtered subset

    Returns:
        Root nodes of the forest

    Raises:
        InvalidHierarchyError: On duplicate ids or a parent cycle
    """
    by_id = index_records(records)
    ensure_acyclic(by_id)

    nodes = {record_id: HierarchyNode(record=record) for record_id, record in by_id.items()}
    roots: list[HierarchyNode] = []

    for record_id, record in by_id.items():
        node = nodes[record_id]
        parent = nodes.get(record.parent_id) if record.parent_id is not None else None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)

    return roots
