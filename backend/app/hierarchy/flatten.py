"""Flatten hierarchy forests and search them by name."""

from collections.abc import Iterable, Iterator

from backend.app.models.organization import HierarchyNode


def iter_nodes(forest: Iterable[HierarchyNode]) -> Iterator[HierarchyNode]:
    """Yield every node in pre-order, each parent before its children."""
    stack = list(reversed(list(forest)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def flatten(forest: Iterable[HierarchyNode]) -> list[HierarchyNode]:
    """Return all nodes of a forest as a pre-order list."""
    return list(iter_nodes(forest))


def matches_name(node: HierarchyNode, search_term: str | None) -> bool:
    """Case-insensitive substring match against every language variant of the name."""
    if not search_term:
        return True
    needle = search_term.casefold()
    return any(needle in name.value.casefold() for name in node.names)


def search_by_name(
    forest: Iterable[HierarchyNode], search_term: str | None
) -> list[HierarchyNode]:
    """Flatten a forest and keep the nodes whose name contains ``search_term``."""
    return [node for node in iter_nodes(forest) if matches_name(node, search_term)]
