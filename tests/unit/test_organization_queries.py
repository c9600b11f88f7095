"""Unit tests for hierarchy queries over an in-memory store."""

from datetime import timedelta
from uuid import uuid4

import pytest

from backend.app.hierarchy import (
    InvalidHierarchyError,
    OrganizationNotFoundError,
    OrganizationQueries,
    flatten,
)
from tests.factories import NOW, InMemoryOrganizationStore, make_record, node_names

DAY = timedelta(days=1)


def _queries(*records):
    return OrganizationQueries(InMemoryOrganizationStore(records), now=lambda: NOW)


class TestFullHierarchy:
    """Tests for get_full_hierarchy."""

    def test_three_level_chain(self):
        """A with child B with child C is returned as one tree."""
        a = make_record("A")
        b = make_record("B", a)
        c = make_record("C", b)

        forest = _queries(a, b, c).get_full_hierarchy()

        assert node_names(forest) == ["A"]
        assert node_names(forest[0].children) == ["B"]
        assert node_names(forest[0].children[0].children) == ["C"]

    def test_future_child_excluded_by_default(self):
        """A sub-organization starting tomorrow is not part of today's hierarchy."""
        a = make_record("A")
        b = make_record("B", a, valid_from=NOW + DAY)

        forest = _queries(a, b).get_full_hierarchy()

        assert [node.id for node in flatten(forest)] == [a.id]

    def test_future_child_included_on_request(self):
        a = make_record("A")
        b = make_record("B", a, valid_from=NOW + DAY)

        forest = _queries(a, b).get_full_hierarchy(include_future=True)

        assert node_names(forest[0].children) == ["B"]

    def test_orphan_promoted_to_root(self):
        """A current child of a future parent becomes a root of the full hierarchy."""
        a = make_record("A")
        b = make_record("B", a, valid_from=NOW + DAY)
        c = make_record("C", b)

        forest = _queries(a, b, c).get_full_hierarchy()

        assert node_names(forest) == ["A", "C"]

    def test_deactivated_subtree_hidden(self):
        a = make_record("A")
        b = make_record("B", a, active=False)
        c = make_record("C", b)

        assert [node.id for node in flatten(_queries(a, b, c).get_full_hierarchy())] == [a.id]

    def test_cycle_surfaces(self):
        """Corrupt parent links fail loudly."""
        a_id, b_id = uuid4(), uuid4()
        queries = _queries(make_record("A", b_id, id=a_id), make_record("B", a_id, id=b_id))

        with pytest.raises(InvalidHierarchyError):
            queries.get_full_hierarchy()


class TestHierarchyForOrganization:
    """Tests for subtree queries."""

    def test_single_root(self):
        """The requested organization is the only root, detached from its parent."""
        a = make_record("A")
        b = make_record("B", a)
        c = make_record("C", b)

        forest = _queries(a, b, c).get_hierarchy_for_organization(b.id)

        assert [node.id for node in forest] == [b.id]
        assert forest[0].record.parent_id is None
        assert node_names(forest[0].children) == ["C"]

    def test_orphan_dropped(self):
        """A current child of a future parent is unreachable from the root."""
        a = make_record("A")
        b = make_record("B", a, valid_from=NOW + DAY)
        c = make_record("C", b)

        forest = _queries(a, b, c).get_hierarchy_for_organization(a.id)

        assert [node.id for node in flatten(forest)] == [a.id]

    def test_unknown_root_is_empty(self):
        assert _queries(make_record("A")).get_hierarchy_for_organization(uuid4()) == []

    def test_future_root_is_empty_unless_requested(self):
        a = make_record("A", valid_from=NOW + DAY)
        queries = _queries(a)

        assert queries.get_hierarchy_for_organization(a.id) == []
        assert node_names(queries.get_hierarchy_for_organization(a.id, include_future=True)) == ["A"]

    def test_complete_hierarchy_ignores_validity(self):
        """Future and expired descendants are part of the complete hierarchy."""
        a = make_record("A")
        b = make_record("B", a, valid_from=NOW + DAY)
        c = make_record("C", b)
        d = make_record("D", a, valid_to=NOW - DAY)

        forest = _queries(a, b, c, d).get_complete_hierarchy_for_organization(a.id)

        assert {node.id for node in flatten(forest)} == {a.id, b.id, c.id, d.id}


class TestFlatOrganizations:
    """Tests for name search."""

    def test_search_everywhere(self):
        a = make_record("Helsingin kaupunki")
        b = make_record("Kallion lukio", a)
        x = make_record("Espoon kaupunki")

        found = _queries(a, b, x).get_flat_organizations("kaupunki")

        assert node_names(found) == ["Helsingin kaupunki", "Espoon kaupunki"]

    def test_search_within_scope(self):
        """A scope root limits the search to its subtree."""
        a = make_record("Helsingin kaupunki")
        b = make_record("Kallion lukio", a)
        x = make_record("Espoon kaupunki")
        y = make_record("Tapiolan lukio", x)

        found = _queries(a, b, x, y).get_flat_organizations("lukio", scope_root_id=x.id)

        assert node_names(found) == ["Tapiolan lukio"]

    def test_no_term_lists_everything_in_pre_order(self):
        a = make_record("A")
        b = make_record("B", a)
        x = make_record("X")

        assert node_names(_queries(x, b, a).get_flat_organizations()) == ["X", "A", "B"]


class TestLookups:
    """Tests for single organizations and name lists."""

    def test_get_organization(self):
        a = make_record("A")

        assert _queries(a).get_organization(a.id) == a

    def test_get_unknown_organization(self):
        with pytest.raises(OrganizationNotFoundError):
            _queries(make_record("A")).get_organization(uuid4())

    def test_get_organization_name(self):
        a = make_record("A")

        name = _queries(a).get_organization_name(a.id)

        assert name.id == a.id
        assert name.names[0].value == "A"

    def test_organization_names_include_future_but_not_deactivated(self):
        a = make_record("A")
        b = make_record("B", a, valid_from=NOW + DAY)
        c = make_record("C", active=False)

        names = _queries(a, b, c).get_organization_names()

        assert {name.id for name in names} == {a.id, b.id}

    def test_main_organizations_are_roots(self):
        a = make_record("A")
        b = make_record("B", a)
        x = make_record("X", valid_to=NOW - DAY)

        main = _queries(a, b, x).get_main_organizations()

        assert [name.id for name in main] == [a.id, x.id]

    def test_municipal_main_organizations(self):
        """Currently valid municipality roots with the given code."""
        helsinki = make_record("Helsingin kaupunki", type="Kunta", municipality_code="091")
        espoo = make_record("Espoon kaupunki", type="Kunta", municipality_code="049")
        district = make_record("Piiri", helsinki, type="Kunta", municipality_code="091")
        company = make_record("Yhtiö", type="Yritys", municipality_code="091")
        future = make_record(
            "Uusi kunta", type="Kunta", municipality_code="091", valid_from=NOW + DAY
        )

        found = _queries(helsinki, espoo, district, company, future).get_municipal_main_organizations("091")

        assert [name.id for name in found] == [helsinki.id]

    def test_organization_list(self):
        """The organization and its current descendants, with service flags."""
        a = make_record("A", can_be_transferred_to_fsc=True)
        b = make_record("B", a, can_be_responsible_dept_for_service=True)
        c = make_record("C", a, valid_from=NOW + DAY)

        items = _queries(a, b, c).get_organization_list_for_organization(a.id)

        assert [item.id for item in items] == [a.id, b.id]
        assert items[0].can_be_transferred_to_fsc is True
        assert items[1].can_be_responsible_dept_for_service is True
        assert items[1].type == "Yritys"
