"""Error Hierarchy — typed, categorized exceptions for every paramschema failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation errors (400-level) are client errors; schema/registry errors (500-level) are server bugs
    - to_response() produces the REST envelope consumed by api/error_handlers.py
    - No raw values or tracebacks leaked in user-facing messages beyond the parameter path

Design Decisions:
    - Core validation returns failure VALUES (ValidationResult), never raises —
      exceptions here are for the shell and for registry misuse (ADR: functional core)
    - TypeAssertionError sits outside the ParamSchemaError tree: it is an internal
      signal from a TypeDescriptor to the validator, never surfaced to a client
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any
from datetime import datetime, timezone

if TYPE_CHECKING:
    from paramschema.core.validate import ValidationFailure


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    SCHEMA = "schema"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    param_name: str | None = None
    param_path: str | None = None
    location: str | None = None
    debug_info: dict[str, Any] | None = None


class TypeAssertionError(Exception):
    """Raised by a TypeDescriptor when a value cannot be coerced or cast."""

    def __init__(self, type_name: str, value: Any, reason: str | None = None):
        super().__init__(reason or f"value is not a valid {type_name}")
        self.type_name = type_name
        self.value = value
        self.reason = reason


class ParamSchemaError(Exception):
    """Base exception for all paramschema errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "param_name": self.context.param_name,
                    "param_path": self.context.param_path,
                    "location": self.context.location,
                },
            }
        }


# ─── Client Errors (400-level) ───────────────────────────────────

class ParamValidationError(ParamSchemaError):
    """A required parameter was missing or invalid — the request is rejected."""
    def __init__(self, failure: "ValidationFailure", context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.param_name = failure.param_name
        ctx.param_path = failure.dotted_path
        super().__init__(
            failure.message, failure.kind.value, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.failure = failure


class MalformedBodyError(ParamSchemaError):
    """Request body could not be decoded into a JSON object."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.location = "body"
        super().__init__(
            f"Request body is not a valid JSON object: {reason}",
            "MALFORMED_BODY", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )


# ─── Schema Errors (500-level) ───────────────────────────────────

class UnknownTypeError(ParamSchemaError):
    """A type name was looked up that the registry does not know."""
    def __init__(self, type_name: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unknown parameter type '{type_name}'",
            "UNKNOWN_TYPE", ErrorCategory.SCHEMA,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.type_name = type_name


class SchemaDefinitionError(ParamSchemaError):
    """A declaration could not be compiled into a usable schema."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "SCHEMA_DEFINITION_ERROR", ErrorCategory.SCHEMA,
            ErrorSeverity.CRITICAL, context, 500,
        )
