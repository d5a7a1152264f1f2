"""Domain Types — enums and aliases shared by every layer of the schema engine.

Invariants:
    - ParamLocation has exactly 5 members — the only legal request sources
    - FailureKind covers runtime validation outcomes only (construction problems are diagnostics)
    - Requiredness is decided by keyword family: requires/required → required, anything else → optional

Design Decisions:
    - str Enums: serialize to JSON without custom encoders (error envelopes, log records)
    - ParamLocation values keep the declaration spelling ("formData") so schemas round-trip verbatim
"""

import re
from enum import Enum
from typing import Any


# ─── Value Types ─────────────────────────────────────────────────

DeclaredParams = dict[str, Any]     # name → normalized value
RawParams = dict[str, Any]          # name → merged raw value


# ─── Enums ───────────────────────────────────────────────────────

class ParamLocation(str, Enum):
    """Request source a top-level parameter is declared to come from."""
    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    FORM_DATA = "formData"
    BODY = "body"


class FailureKind(str, Enum):
    """Why a single value was rejected by the validator."""
    PARAM_MISSING = "PARAM_MISSING"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    PATTERN_MISMATCH = "PATTERN_MISMATCH"


class DiagnosticLevel(str, Enum):
    """Severity of a diagnostic event — mirrors the two levels the engine emits."""
    INFO = "info"
    WARNING = "warning"


class DiagnosticCode(str, Enum):
    """Stable identifiers for every diagnostic site."""
    # Construction time
    INVALID_LOCATION = "INVALID_LOCATION"
    ENCLOSED_IGNORED = "ENCLOSED_IGNORED"
    UNKNOWN_TYPE = "UNKNOWN_TYPE"
    INVALID_PATTERN = "INVALID_PATTERN"
    MISSING_NAME = "MISSING_NAME"
    DUPLICATE_PARAM = "DUPLICATE_PARAM"
    MALFORMED_DECLARATION = "MALFORMED_DECLARATION"
    UNREACHABLE_DEFAULT = "UNREACHABLE_DEFAULT"
    # Validation time
    PARAM_MISSING = "PARAM_MISSING"
    OPTIONAL_EMPTY = "OPTIONAL_EMPTY"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    PATTERN_MISMATCH = "PATTERN_MISMATCH"


# ─── Requiredness ────────────────────────────────────────────────

_REQUIRED_KEYWORD = re.compile(r"^require(s|d)$")


def is_required_keyword(keyword: Any) -> bool:
    """True for "requires"/"required"; every other keyword (or non-string) means optional."""
    if not isinstance(keyword, str):
        return False
    return bool(_REQUIRED_KEYWORD.match(keyword))


def parse_location(value: str) -> ParamLocation | None:
    """Map a declared location string to ParamLocation, or None if not allowed."""
    try:
        return ParamLocation(value)
    except ValueError:
        return None


ALLOWED_LOCATIONS: tuple[str, ...] = tuple(loc.value for loc in ParamLocation)
