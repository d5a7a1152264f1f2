"""Type Descriptors — the single contract the validator uses to coerce and check values.

Invariants:
    - Validator depends ONLY on the TypeDescriptor Protocol, never on a concrete variant
    - coerce() and assert_or_cast() raise TypeAssertionError on bad input — nothing else escapes,
      whatever a user-supplied function raises (InvalidOperation, KeyError, AssertionError ...)
    - Descriptors and TypeRegistry are immutable after construction (safe to share across requests)
    - structured=True marks the object kind (HashRef) — the only kind that may enclose nested specs

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy (ADR: ExMA anti-pattern)
    - Two concrete variants: ConstraintType (declarative: name + coercion + assertion)
      and CallableType (one function that both casts and asserts)
    - Built-in constraints backed by pydantic TypeAdapter: lax mode is the coercion,
      strict mode is the assertion — one library, two well-defined behaviours
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Protocol, Union, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from paramschema.core.errors import TypeAssertionError, UnknownTypeError


@runtime_checkable
class TypeDescriptor(Protocol):
    """Structural contract for a parameter type."""
    name: str
    structured: bool

    @property
    def supports_coercion(self) -> bool: ...
    def coerce(self, value: Any) -> Any: ...
    def assert_or_cast(self, value: Any) -> Any: ...


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    return errors[0]["msg"] if errors else str(exc)


@dataclass(frozen=True)
class ConstraintType:
    """Declarative type: a pydantic annotation checked strictly, optionally coerced first.

    coercion=None with coercible=True uses pydantic lax mode as the coercion.
    assert_or_cast() returns the value unchanged once it passes the strict check.
    """

    name: str
    annotation: Any
    coercible: bool = False
    coercion: Callable[[Any], Any] | None = None
    structured: bool = False
    _adapter: TypeAdapter = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_adapter", TypeAdapter(self.annotation))

    @property
    def supports_coercion(self) -> bool:
        return self.coercible or self.coercion is not None

    @property
    def has_coercion(self) -> bool:
        return self.supports_coercion

    def coerce(self, value: Any) -> Any:
        if self.coercion is not None:
            try:
                return self.coercion(value)
            except TypeAssertionError:
                raise
            except Exception as exc:
                raise TypeAssertionError(self.name, value, str(exc) or type(exc).__name__) from exc
        try:
            return self._adapter.validate_python(value, strict=False)
        except ValidationError as exc:
            raise TypeAssertionError(self.name, value, _first_error(exc)) from exc

    def assert_valid(self, value: Any) -> None:
        try:
            self._adapter.validate_python(value, strict=True)
        except ValidationError as exc:
            raise TypeAssertionError(self.name, value, _first_error(exc)) from exc

    def assert_or_cast(self, value: Any) -> Any:
        self.assert_valid(value)
        return value


@dataclass(frozen=True)
class CallableType:
    """Function-based type: fn(value) returns the cast value or raises."""

    name: str
    fn: Callable[[Any], Any]
    structured: bool = False

    @property
    def supports_coercion(self) -> bool:
        return False

    def coerce(self, value: Any) -> Any:
        return value

    def assert_or_cast(self, value: Any) -> Any:
        try:
            return self.fn(value)
        except TypeAssertionError:
            raise
        except Exception as exc:
            raise TypeAssertionError(self.name, value, str(exc) or type(exc).__name__) from exc


def _to_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


# ─── Built-in Types ──────────────────────────────────────────────

ANY = ConstraintType("Any", Any)
STR = ConstraintType("Str", str)
INT = ConstraintType("Int", int, coercible=True)
NUM = ConstraintType("Num", Union[int, float], coercible=True)
BOOL = ConstraintType("Bool", bool, coercible=True)
HASH_REF = ConstraintType("HashRef", dict[str, Any], structured=True)
ARRAY_REF = ConstraintType("ArrayRef", list[Any], coercion=_to_list)

_BUILTINS: dict[str, TypeDescriptor] = {
    t.name: t for t in (ANY, STR, INT, NUM, BOOL, HASH_REF, ARRAY_REF)
}
_BUILTINS["Object"] = HASH_REF


def as_descriptor(type_ref: Any, name: str | None = None) -> TypeDescriptor | None:
    """Wrap a plain callable as CallableType; pass descriptors through; else None."""
    if isinstance(type_ref, TypeDescriptor):
        return type_ref
    if callable(type_ref):
        return CallableType(name or getattr(type_ref, "__name__", "callable"), type_ref)
    return None


class TypeRegistry:
    """Read-only mapping of type names to descriptors."""

    def __init__(self, descriptors: Mapping[str, TypeDescriptor]):
        self._types = MappingProxyType(dict(descriptors))

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    @property
    def names(self) -> list[str]:
        return sorted(self._types)

    def get(self, name: str) -> TypeDescriptor:
        try:
            return self._types[name]
        except KeyError:
            raise UnknownTypeError(name) from None

    def resolve(self, type_ref: Any) -> TypeDescriptor:
        """Accept a registered name, a descriptor, or a plain callable."""
        if isinstance(type_ref, str):
            return self.get(type_ref)
        descriptor = as_descriptor(type_ref)
        if descriptor is None:
            raise UnknownTypeError(repr(type_ref))
        return descriptor

    def with_types(self, **descriptors: Any) -> "TypeRegistry":
        """Return a new registry extended with extra descriptors or callables."""
        merged = dict(self._types)
        for name, type_ref in descriptors.items():
            descriptor = as_descriptor(type_ref, name)
            if descriptor is None:
                raise UnknownTypeError(name)
            merged[name] = descriptor
        return TypeRegistry(merged)


DEFAULT_REGISTRY = TypeRegistry(_BUILTINS)
