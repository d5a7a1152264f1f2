"""Diagnostics — structured side channel for construction and validation notes.

Invariants:
    - Emitting a diagnostic never changes a validation outcome
    - Every warning site produces a Diagnostic even when nothing is listening (NullSink)
    - Core modules depend only on the DiagnosticSink Protocol, never on logging

Design Decisions:
    - Injected sink over global logger: core stays pure and testable without caplog
    - CollectingSink keeps events in order so tests can assert on exact codes
    - LoggingSink lives in infrastructure/ (it does IO), not here
"""

from dataclasses import dataclass, field
from typing import Any, Protocol

from paramschema.core.domain_types import DiagnosticCode, DiagnosticLevel


@dataclass(frozen=True)
class Diagnostic:
    """One human-readable note about a parameter."""
    level: DiagnosticLevel
    code: DiagnosticCode
    message: str
    param_name: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


class DiagnosticSink(Protocol):
    """Contract for anything that receives diagnostics — implemented by shell or tests."""
    def emit(self, diagnostic: Diagnostic) -> None: ...


class NullSink:
    """Discards everything."""

    def emit(self, diagnostic: Diagnostic) -> None:
        return None


@dataclass
class CollectingSink:
    """Keeps every diagnostic in emission order."""

    events: list[Diagnostic] = field(default_factory=list)

    def emit(self, diagnostic: Diagnostic) -> None:
        self.events.append(diagnostic)

    @property
    def codes(self) -> list[DiagnosticCode]:
        return [d.code for d in self.events]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.events if d.level == DiagnosticLevel.WARNING]

    def clear(self) -> None:
        self.events.clear()


NULL_SINK = NullSink()


def warn(
    sink: DiagnosticSink, code: DiagnosticCode, message: str,
    param_name: str | None = None, **details: Any,
) -> None:
    sink.emit(Diagnostic(DiagnosticLevel.WARNING, code, message, param_name, details))


def info(
    sink: DiagnosticSink, code: DiagnosticCode, message: str,
    param_name: str | None = None, **details: Any,
) -> None:
    sink.emit(Diagnostic(DiagnosticLevel.INFO, code, message, param_name, details))


class TeeSink:
    """Forwards every diagnostic to several sinks."""

    def __init__(self, *sinks: DiagnosticSink):
        self._sinks = sinks

    def emit(self, diagnostic: Diagnostic) -> None:
        for sink in self._sinks:
            sink.emit(diagnostic)
