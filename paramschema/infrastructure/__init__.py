"""Infrastructure Layer — cross-cutting concerns that do IO (logging).

Invariants:
    - Infrastructure implements core Protocols; core never imports infrastructure

Design Decisions:
    - Adapters over globals: the LoggingSink is handed to core, never looked up (ADR: ExMA single responsibility)
"""
