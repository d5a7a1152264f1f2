"""Structured Logging — JSON formatter, setup, and the logging-backed DiagnosticSink.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (param_name, diagnostic_code, param_path, error_code) surfaced when present
    - JSON format in production, human-readable in development
    - LoggingSink never raises and never alters the diagnostic it forwards

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called once by the embedding application
    - DiagnosticLevel maps 1:1 to logging levels (INFO → info, WARNING → warning)
"""

import logging
import json
from datetime import datetime, timezone

from paramschema.core.diagnostics import Diagnostic
from paramschema.core.domain_types import DiagnosticLevel

_EXTRA_FIELDS = (
    "param_name", "param_path", "diagnostic_code", "error_code", "location",
)

_LEVELS = {
    DiagnosticLevel.INFO: logging.INFO,
    DiagnosticLevel.WARNING: logging.WARNING,
}


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


class LoggingSink:
    """DiagnosticSink that forwards to a stdlib logger."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("paramschema")

    def emit(self, diagnostic: Diagnostic) -> None:
        self.logger.log(
            _LEVELS[diagnostic.level],
            diagnostic.message,
            extra={
                "param_name": diagnostic.param_name,
                "param_path": diagnostic.details.get("path"),
                "diagnostic_code": diagnostic.code.value,
            },
        )
