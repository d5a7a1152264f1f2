"""Source Merger — tests for precedence merging and query flattening.

Tests cover:
    - path overrides query overrides body
    - missing / None sources contribute nothing
    - inputs are not mutated
    - flatten_query keeps single values scalar and repeated keys as ordered lists
"""

from paramschema.core.merge import flatten_query, merge_sources


# ─── merge_sources ───────────────────────────────────────────────

def test_path_wins_over_query_and_body():
    merged = merge_sources(body={"id": 3}, query={"id": 2}, path={"id": 1})
    assert merged == {"id": 1}


def test_query_wins_over_body():
    merged = merge_sources(body={"id": 3, "name": "b"}, query={"id": 2})
    assert merged == {"id": 2, "name": "b"}


def test_disjoint_keys_are_all_kept():
    merged = merge_sources(body={"a": {"x": 1}}, query={"b": "2"}, path={"c": "3"})
    assert merged == {"a": {"x": 1}, "b": "2", "c": "3"}


def test_none_sources_are_ignored():
    assert merge_sources(None, None, None) == {}
    assert merge_sources(query={"q": "x"}) == {"q": "x"}


def test_inputs_are_not_mutated():
    body, query = {"id": 3}, {"id": 2}
    merged = merge_sources(body, query)
    merged["extra"] = True
    assert body == {"id": 3}
    assert query == {"id": 2}


# ─── flatten_query ───────────────────────────────────────────────

def test_flatten_query_single_values_stay_scalar():
    assert flatten_query([("a", "1"), ("b", "2")]) == {"a": "1", "b": "2"}


def test_flatten_query_repeated_keys_become_ordered_list():
    flat = flatten_query([("tag", "x"), ("page", "1"), ("tag", "y"), ("tag", "z")])
    assert flat == {"tag": ["x", "y", "z"], "page": "1"}


def test_flatten_query_empty():
    assert flatten_query([]) == {}
