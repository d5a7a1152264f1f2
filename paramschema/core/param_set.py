"""Param Set — ordered, immutable collection of ParamSpec for one endpoint.

Invariants:
    - Declaration order is preserved: the resolver evaluates specs in this order
    - Names are unique: a later duplicate is dropped with a DUPLICATE_PARAM warning
    - Declarations that fail to compile are omitted unless strict=True

Design Decisions:
    - Tuple-backed: shareable across concurrent requests like ParamSpec itself
    - strict=True turns "no spec produced" into SchemaDefinitionError at build time,
      for callers that treat a broken declaration as a startup bug
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from paramschema.core.diagnostics import (
    NULL_SINK, CollectingSink, DiagnosticSink, TeeSink, warn,
)
from paramschema.core.domain_types import DiagnosticCode, ParamLocation
from paramschema.core.errors import SchemaDefinitionError
from paramschema.core.param_spec import ParamSpec, build_param, iterate_declarations
from paramschema.core.type_descriptors import DEFAULT_REGISTRY, TypeRegistry


class ParamSet:
    """Ordered parameter schema."""

    def __init__(self, params: Iterable[ParamSpec] = ()):
        self._params = tuple(params)

    def __iter__(self) -> Iterator[ParamSpec]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __contains__(self, name: object) -> bool:
        return any(p.name == name for p in self._params)

    def __repr__(self) -> str:
        return f"ParamSet({', '.join(self.names)})"

    @property
    def names(self) -> list[str]:
        return [p.name for p in self._params]

    @property
    def required(self) -> list[ParamSpec]:
        return [p for p in self._params if p.required]

    def get(self, name: str) -> ParamSpec | None:
        for param in self._params:
            if param.name == name:
                return param
        return None

    def by_location(self, location: ParamLocation | str) -> list[ParamSpec]:
        location = ParamLocation(location)
        return [p for p in self._params if p.location == location]


def build_param_set(
    declarations: Iterable[Any],
    *,
    registry: TypeRegistry = DEFAULT_REGISTRY,
    sink: DiagnosticSink = NULL_SINK,
    named: Iterable[str] = (),
    reject_required_defaults: bool = False,
    strict: bool = False,
) -> ParamSet:
    """Compile declarations into a ParamSet.

    named lists the parameters captured from the route path; their specs get named=True.
    """
    named = set(named)
    # strict mode needs to see construction warnings even when the caller passed NullSink
    collector = CollectingSink()
    params: list[ParamSpec] = []
    seen: set[str] = set()

    for keyword, spec in iterate_declarations(declarations):
        collector.clear()
        name = spec.get("name") if isinstance(spec, Mapping) else None
        param = build_param(
            keyword, spec, registry=registry, sink=TeeSink(sink, collector),
            named=isinstance(name, str) and name in named,
            reject_required_defaults=reject_required_defaults,
        )
        if param is None:
            if strict:
                reason = collector.events[-1].message if collector.events else "unknown error"
                raise SchemaDefinitionError(
                    f"Parameter `{name}` could not be compiled: {reason}",
                )
            continue
        if param.name in seen:
            warn(
                sink, DiagnosticCode.DUPLICATE_PARAM,
                f"Duplicate parameter `{param.name}` ignored", param.name,
            )
            continue
        seen.add(param.name)
        params.append(param)

    return ParamSet(params)

