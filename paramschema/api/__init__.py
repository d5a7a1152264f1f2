"""API Layer — FastAPI dependency and error handlers around the schema core.

Invariants:
    - Request parsing stays in starlette; api/ only collects already-decoded values
    - All failures leave as structured JSON responses

Design Decisions:
    - Thin shell delegates to core.resolve (ADR: ExMA impureim sandwich)
"""
