"""Source Merger — flattens body, query and path values into one raw map.

Invariants:
    - Precedence is fixed: body < query < path (last applied wins)
    - A source that is None or lacks a key contributes nothing
    - Inputs are never mutated; the merged map is a fresh dict

Design Decisions:
    - Headers and form data are not merged here: the shell decides what it collects
    - flatten_query keeps single values scalar and repeated keys as ordered lists,
      so a Str spec sees "a" while an ArrayRef spec sees ["a", "b"]
"""

from collections.abc import Iterable, Mapping
from typing import Any

from paramschema.core.domain_types import RawParams


def merge_sources(
    body: Mapping[str, Any] | None = None,
    query: Mapping[str, Any] | None = None,
    path: Mapping[str, Any] | None = None,
) -> RawParams:
    """Merge raw sources with path overriding query overriding body."""
    merged: RawParams = {}
    for source in (body, query, path):
        if source:
            merged.update(source)
    return merged


def flatten_query(pairs: Iterable[tuple[str, Any]]) -> RawParams:
    """Collapse multi-valued (key, value) pairs: once → scalar, repeated → list."""
    grouped: dict[str, list[Any]] = {}
    for key, value in pairs:
        grouped.setdefault(key, []).append(value)
    return {
        key: values[0] if len(values) == 1 else values
        for key, values in grouped.items()
    }
