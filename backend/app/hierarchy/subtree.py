"""Extract the subtree rooted at one organization from a flat record set."""

from collections import defaultdict
from collections.abc import Iterable
from uuid import UUID

from backend.app.models.organization import OrganizationRecord


def extract_subtree(
    records: Iterable[OrganizationRecord], root_id: UUID
) -> list[OrganizationRecord]:
    """
    Collect an organization and all of its descendants.

    The root comes back with ``parent_id`` cleared so that the result forms an
    independent forest rooted at ``root_id``. Descendants whose parent is not
    part of ``records`` are unreachable and therefore left out.

    Args:
        records: Candidate records, time filtered or not
        root_id: Organization to start from

    Returns:
        Root first, then descendants in depth-first order; empty if the root
        is not among the records
    """
    records = list(records)

    # Only the root itself and records with a parent can be part of the subtree
    candidates = [
        record
        for record in records
        if record.id == root_id or record.parent_id is not None
    ]
    root = next((record for record in candidates if record.id == root_id), None)
    if root is None:
        return []

    children: dict[UUID, list[OrganizationRecord]] = defaultdict(list)
    for record in candidates:
        if record.parent_id is not None and record.id != root_id:
            children[record.parent_id].append(record)

    collected: list[OrganizationRecord] = [root.model_copy(update={"parent_id": None})]
    visited: set[UUID] = {root_id}
    stack = list(reversed(children.get(root_id, [])))

    while stack:
        record = stack.pop()
        if record.id in visited:
            continue
        visited.add(record.id)
        collected.append(record)
        stack.extend(reversed(children.get(record.id, [])))

    return collected


def descendant_ids(records: Iterable[OrganizationRecord], root_id: UUID) -> list[UUID]:
    """
    List the ids below an organization, deepest first.

    Every descendant appears before its own parent, which is the order
    cascading deactivation and removal must follow. The root itself is not
    included.
    """
    subtree = extract_subtree(records, root_id)
    children: dict[UUID, list[UUID]] = defaultdict(list)
    for record in subtree[1:]:
        children[record.parent_id].append(record.id)

    ordered: list[UUID] = []
    stack: list[tuple[UUID, bool]] = [(child_id, False) for child_id in reversed(children.get(root_id, []))]
    while stack:
        organization_id, expanded = stack.pop()
        if expanded:
            ordered.append(organization_id)
            continue
        stack.append((organization_id, True))
        stack.extend((child_id, False) for child_id in reversed(children.get(organization_id, [])))

    return ordered
