"""Validator — recursive check/coerce of one raw value against one ParamSpec.

Invariants:
    - Absence (RawSlot.absent) and presence-of-None (RawSlot.of(None)) are different inputs
    - Coercion ALWAYS runs before assertion; a coercion failure is reported as TYPE_MISMATCH
    - Nested validation is fail-fast: the first failing field stops descent, later fields are never evaluated
    - Nested and regex branches are exclusive: regex never applies to a value whose spec encloses fields
    - quiet suppresses diagnostics only — the returned result is identical either way
    - The caller's raw value is never mutated; nested normalization returns a new mapping

Design Decisions:
    - Failure is a value (ValidationResult), not an exception: required/optional handling belongs
      to the resolver, which needs to inspect the failure without try/except control flow
    - Nested failures keep the leaf kind and add the full path ("a.b") for diagnostics
    - List values (multi-valued query params) match a regex only if every element matches
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from paramschema.core.diagnostics import NULL_SINK, DiagnosticSink, info, warn
from paramschema.core.domain_types import DiagnosticCode, FailureKind
from paramschema.core.errors import TypeAssertionError
from paramschema.core.param_spec import ParamSpec


@dataclass(frozen=True)
class RawSlot:
    """Presence wrapper around one incoming value."""

    present: bool
    value: Any = None

    @classmethod
    def absent(cls) -> "RawSlot":
        return _ABSENT

    @classmethod
    def of(cls, value: Any) -> "RawSlot":
        return cls(True, value)

    @classmethod
    def lookup(cls, mapping: Mapping[str, Any], key: str) -> "RawSlot":
        """Present if key is in mapping (even when its value is None), else absent."""
        if key in mapping:
            return cls.of(mapping[key])
        return _ABSENT


_ABSENT = RawSlot(False)


@dataclass(frozen=True)
class ValidationFailure:
    """Why a parameter was rejected."""
    kind: FailureKind
    param_name: str
    path: tuple[str, ...]
    message: str
    reason: str | None = None

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    value: Any = None
    failure: ValidationFailure | None = None

    @classmethod
    def success(cls, value: Any) -> "ValidationResult":
        return cls(True, value)

    @classmethod
    def fail(cls, failure: ValidationFailure) -> "ValidationResult":
        return cls(False, None, failure)


def validate(
    spec: ParamSpec,
    slot: RawSlot,
    quiet: bool = False,
    sink: DiagnosticSink = NULL_SINK,
) -> ValidationResult:
    """Validate one slot against spec, descending into enclosed specs."""
    return _validate(spec, slot, quiet, sink, ())


def _validate(
    spec: ParamSpec,
    slot: RawSlot,
    quiet: bool,
    sink: DiagnosticSink,
    parent: tuple[str, ...],
) -> ValidationResult:
    path = parent + (spec.name,)

    if not slot.present:
        if spec.required:
            if not quiet:
                warn(
                    sink, DiagnosticCode.PARAM_MISSING,
                    f"`{spec.name}` is required", spec.name, path=".".join(path),
                )
            return _failure(
                FailureKind.PARAM_MISSING, spec, path,
                f"`{'.'.join(path)}` is required",
            )
        if not quiet:
            info(
                sink, DiagnosticCode.OPTIONAL_EMPTY,
                f"`{spec.name}` optional and empty", spec.name, path=".".join(path),
            )
        return ValidationResult.success(None)

    value = slot.value
    try:
        if spec.coerce and spec.type.supports_coercion:
            value = spec.type.coerce(value)
        value = spec.type.assert_or_cast(value)
    except TypeAssertionError as exc:
        if not quiet:
            warn(
                sink, DiagnosticCode.TYPE_MISMATCH,
                f"Param `{spec.name}` didn't pass constraint "
                f"`{spec.type.name}` with value \"{slot.value}\"",
                spec.name, path=".".join(path), type=spec.type.name,
            )
        return _failure(
            FailureKind.TYPE_MISMATCH, spec, path,
            f"`{'.'.join(path)}` must be of type `{spec.type.name}`", exc.reason,
        )

    if spec.type.structured and spec.enclosed:
        return _validate_enclosed(spec, value, quiet, sink, path)

    if spec.regex is not None and not _matches(spec, value):
        if not quiet:
            warn(
                sink, DiagnosticCode.PATTERN_MISMATCH,
                f"Param `{spec.name}` didn't match regex "
                f"`{spec.regex.pattern}` with value \"{value}\"",
                spec.name, path=".".join(path), pattern=spec.regex.pattern,
            )
        return _failure(
            FailureKind.PATTERN_MISMATCH, spec, path,
            f"`{'.'.join(path)}` does not match `{spec.regex.pattern}`",
        )

    return ValidationResult.success(value)


def _validate_enclosed(
    spec: ParamSpec,
    value: Any,
    quiet: bool,
    sink: DiagnosticSink,
    path: tuple[str, ...],
) -> ValidationResult:
    if not isinstance(value, Mapping):
        if not quiet:
            warn(
                sink, DiagnosticCode.TYPE_MISMATCH,
                f"Param `{spec.name}` encloses fields but got a non-mapping value \"{value}\"",
                spec.name, path=".".join(path), type=spec.type.name,
            )
        return _failure(
            FailureKind.TYPE_MISMATCH, spec, path,
            f"`{'.'.join(path)}` must be an object",
        )

    normalized = dict(value)
    for field_spec in spec.enclosed:
        nested_slot = RawSlot.lookup(value, field_spec.name)
        result = _validate(field_spec, nested_slot, quiet, sink, path)
        if not result.ok:
            return result
        if nested_slot.present:
            normalized[field_spec.name] = result.value
    return ValidationResult.success(normalized)


def _matches(spec: ParamSpec, value: Any) -> bool:
    if isinstance(value, (list, tuple)):
        return all(spec.regex.search(str(item)) for item in value)
    return spec.regex.search(str(value)) is not None


def _failure(
    kind: FailureKind,
    spec: ParamSpec,
    path: tuple[str, ...],
    message: str,
    reason: str | None = None,
) -> ValidationResult:
    return ValidationResult.fail(
        ValidationFailure(kind, spec.name, path, message, reason),
    )
