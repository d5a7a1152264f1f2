"""Core Layer — pure schema logic, no IO, no async, no logging.

Invariants:
    - No module in core/ imports from api/ or infrastructure/
    - Diagnostics leave core only through an injected DiagnosticSink

Design Decisions:
    - Functional core separated from imperative shell (ADR: ExMA impureim sandwich)
"""
