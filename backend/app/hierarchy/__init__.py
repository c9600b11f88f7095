"""Organization hierarchy engine: building, filtering and querying trees."""

from .builder import build_hierarchy, ensure_acyclic, index_records
from .exceptions import (
    InvalidHierarchyError,
    OrganizationNotFoundError,
    OrganizationRegisterError,
)
from .flatten import flatten, iter_nodes, search_by_name
from .queries import OrganizationQueries, utc_now
from .store import OrganizationStore
from .subtree import descendant_ids, extract_subtree
from .temporal import ValidityFilter, filter_by_validity

__all__ = [
    "build_hierarchy",
    "ensure_acyclic",
    "index_records",
    "InvalidHierarchyError",
    "OrganizationNotFoundError",
    "OrganizationRegisterError",
    "flatten",
    "iter_nodes",
    "search_by_name",
    "OrganizationQueries",
    "utc_now",
    "OrganizationStore",
    "descendant_ids",
    "extract_subtree",
    "ValidityFilter",
    "filter_by_validity",
]
