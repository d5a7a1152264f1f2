"""Resolver — drives a ParamSet over a merged raw map to produce DeclaredParams.

Invariants:
    - Specs are evaluated in declared order; the first failing REQUIRED spec aborts resolution
    - An aborted resolution returns no partial DeclaredParams
    - A failing OPTIONAL spec is skipped entirely — its default is NOT applied
    - A present value always wins over a default; a default is recorded only for absent slots
    - Each call owns its output map; nothing is shared between resolutions

Design Decisions:
    - resolve() returns ResolveResult instead of raising: the shell decides how a
      failure becomes a response (ParamValidationError → 400)
    - prepare_params() keeps the merged raw map alongside the declared map, for
      handlers and debugging that need to see what actually arrived
"""

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from paramschema.core.diagnostics import NULL_SINK, DiagnosticSink
from paramschema.core.domain_types import DeclaredParams, RawParams
from paramschema.core.merge import merge_sources
from paramschema.core.param_set import ParamSet
from paramschema.core.validate import RawSlot, ValidationFailure, validate


@dataclass(frozen=True)
class ResolveResult:
    ok: bool
    declared: DeclaredParams = field(default_factory=dict)
    failure: ValidationFailure | None = None


@dataclass(frozen=True)
class PreparedParams:
    """Merged raw input plus the outcome of resolving it."""
    parameters: RawParams
    result: ResolveResult

    @property
    def ok(self) -> bool:
        return self.result.ok

    @property
    def declared(self) -> DeclaredParams:
        return self.result.declared


def resolve(
    param_set: ParamSet,
    merged: Mapping[str, Any],
    sink: DiagnosticSink = NULL_SINK,
    quiet: bool = False,
) -> ResolveResult:
    """Validate every declared parameter against the merged raw map."""
    declared: DeclaredParams = {}

    for spec in param_set:
        slot = RawSlot.lookup(merged, spec.name)
        result = validate(spec, slot, quiet=quiet, sink=sink)

        if not result.ok:
            if spec.required:
                return ResolveResult(False, {}, result.failure)
            continue

        if slot.present:
            declared[spec.name] = result.value
        elif spec.has_default:
            # spec.default is shared by every request
            declared[spec.name] = copy.deepcopy(spec.default)

    return ResolveResult(True, declared)


def prepare_params(
    param_set: ParamSet,
    *,
    body: Mapping[str, Any] | None = None,
    query: Mapping[str, Any] | None = None,
    path: Mapping[str, Any] | None = None,
    sink: DiagnosticSink = NULL_SINK,
    quiet: bool = False,
) -> PreparedParams:
    """Merge the three raw sources, then resolve them against param_set."""
    parameters = merge_sources(body, query, path)
    return PreparedParams(parameters, resolve(param_set, parameters, sink, quiet))
