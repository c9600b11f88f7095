"""Property-based tests for hierarchy building and subtree extraction."""

from hypothesis import given, settings
from hypothesis import strategies as st

from backend.app.hierarchy import (
    build_hierarchy,
    descendant_ids,
    extract_subtree,
    flatten,
)
from tests.factories import make_record


def generate_records(parent_choices: list[int]):
    """Each entry picks an earlier record as parent, or none when divisible by four."""
    records = []
    for index, choice in enumerate(parent_choices):
        if index == 0 or choice % 4 == 0:
            parent = None
        else:
            parent = records[choice % index]
        records.append(make_record(f"Org {index}", parent))
    return records


parent_choices = st.lists(st.integers(min_value=0, max_value=1000), min_size=1, max_size=40)


@given(parent_choices, st.randoms())
@settings(max_examples=50)
def test_flatten_contains_every_record_once(choices, random):
    """Flattening a built forest yields each record exactly once, whatever the input order."""
    records = generate_records(choices)
    random.shuffle(records)

    ids = [node.id for node in flatten(build_hierarchy(records))]

    assert len(ids) == len(records)
    assert set(ids) == {record.id for record in records}


@given(parent_choices, st.data())
@settings(max_examples=50)
def test_subtree_has_requested_root(choices, data):
    """A built subtree always has the requested organization as its only root."""
    records = generate_records(choices)
    root = data.draw(st.sampled_from(records))

    forest = build_hierarchy(extract_subtree(records, root.id))

    assert [node.id for node in forest] == [root.id]


@given(parent_choices, st.data())
@settings(max_examples=50)
def test_descendants_precede_their_parents(choices, data):
    """Cascade order lists every descendant before its own parent."""
    records = generate_records(choices)
    root = data.draw(st.sampled_from(records))
    by_id = {record.id: record for record in records}

    ordered = descendant_ids(records, root.id)
    position = {organization_id: index for index, organization_id in enumerate(ordered)}

    assert len(ordered) == len(position)
    subtree_size = len(extract_subtree(records, root.id))
    assert len(ordered) == subtree_size - 1
    for organization_id in ordered:
        parent_id = by_id[organization_id].parent_id
        if parent_id != root.id:
            assert position[parent_id] > position[organization_id]
