"""Param Set — tests for building and querying ordered schemas.

Tests cover:
    - declared order preserved
    - failing declarations omitted (lenient) or raised (strict)
    - duplicate names dropped with a warning
    - named flag for path-captured params
    - lookup helpers: get, by_location, required, names, membership
"""

import pytest

from paramschema.core.domain_types import DiagnosticCode, ParamLocation
from paramschema.core.errors import SchemaDefinitionError
from paramschema.core.param_set import ParamSet, build_param_set

DECLARATIONS = [
    ("requires", {"name": "id", "type": "Int", "in": "path"}),
    ("optional", {"name": "page", "type": "Int", "in": "query", "default": 1}),
    ("optional", {"name": "tags", "type": "ArrayRef", "in": "query"}),
    ("requires", {"name": "user", "type": "HashRef", "in": "body"}),
]


def test_order_is_preserved():
    params = build_param_set(DECLARATIONS)
    assert params.names == ["id", "page", "tags", "user"]
    assert len(params) == 4


def test_invalid_declaration_is_omitted(sink):
    params = build_param_set(
        DECLARATIONS + [("optional", {"name": "bad", "in": "bogus"})], sink=sink,
    )
    assert "bad" not in params
    assert sink.codes == [DiagnosticCode.INVALID_LOCATION]


def test_strict_raises_on_invalid_declaration(sink):
    with pytest.raises(SchemaDefinitionError) as exc_info:
        build_param_set(
            [("optional", {"name": "bad", "in": "bogus"})], sink=sink, strict=True,
        )
    assert "`bad`" in exc_info.value.message
    assert "should be one of" in exc_info.value.message
    assert sink.codes == [DiagnosticCode.INVALID_LOCATION]


def test_duplicate_top_level_name_dropped(sink):
    params = build_param_set(
        [
            ("requires", {"name": "id", "type": "Int"}),
            ("optional", {"name": "id", "type": "Str"}),
        ],
        sink=sink,
    )
    assert len(params) == 1
    assert params.get("id").required is True
    assert sink.codes == [DiagnosticCode.DUPLICATE_PARAM]


def test_named_flag_set_for_path_params():
    params = build_param_set(DECLARATIONS, named=["id"])
    assert params.get("id").named is True
    assert params.get("page").named is False


def test_by_location_and_required():
    params = build_param_set(DECLARATIONS)
    assert [p.name for p in params.by_location(ParamLocation.QUERY)] == ["page", "tags"]
    assert [p.name for p in params.by_location("body")] == ["user"]
    assert [p.name for p in params.required] == ["id", "user"]


def test_get_unknown_returns_none():
    assert build_param_set(DECLARATIONS).get("nope") is None


def test_reject_required_defaults_applies_to_every_declaration():
    params = build_param_set(
        [("requires", {"name": "x", "type": "Int", "default": 1})],
        reject_required_defaults=True,
    )
    assert len(params) == 0


def test_empty_param_set():
    params = ParamSet()
    assert list(params) == []
    assert repr(params) == "ParamSet()"
