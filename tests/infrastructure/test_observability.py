"""Observability — JSON formatter, setup_logging and LoggingSink.

Tests cover:
    - JSONFormatter emits required keys and surfaces extra fields when present
    - LoggingSink maps diagnostic levels to logging levels with structured extras
    - setup_logging installs a handler with the chosen formatter and level
"""

import json
import logging

from paramschema.core.diagnostics import Diagnostic
from paramschema.core.domain_types import DiagnosticCode, DiagnosticLevel
from paramschema.infrastructure.observability import (
    JSONFormatter, LoggingSink, setup_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "paramschema", logging.WARNING, __file__, 1, "`id` is required", None, None,
    )
    record.__dict__.update(extra)
    return record


# ─── JSONFormatter ───────────────────────────────────────────────

def test_json_formatter_includes_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "WARNING"
    assert log["logger"] == "paramschema"
    assert log["message"] == "`id` is required"
    assert "timestamp" in log
    assert "param_name" not in log


def test_json_formatter_surfaces_extra_fields():
    log = json.loads(JSONFormatter().format(
        _record(param_name="id", diagnostic_code="PARAM_MISSING", param_path="id"),
    ))
    assert log["param_name"] == "id"
    assert log["diagnostic_code"] == "PARAM_MISSING"
    assert log["param_path"] == "id"


# ─── LoggingSink ─────────────────────────────────────────────────

def test_logging_sink_maps_levels_and_extras(caplog):
    sink = LoggingSink(logging.getLogger("paramschema.test"))
    with caplog.at_level(logging.INFO, logger="paramschema.test"):
        sink.emit(Diagnostic(
            DiagnosticLevel.WARNING, DiagnosticCode.TYPE_MISMATCH,
            "Param `id` didn't pass constraint `Int`", "id", {"path": "id"},
        ))
        sink.emit(Diagnostic(
            DiagnosticLevel.INFO, DiagnosticCode.OPTIONAL_EMPTY,
            "`page` optional and empty", "page",
        ))

    warning, note = caplog.records
    assert warning.levelno == logging.WARNING
    assert warning.diagnostic_code == "TYPE_MISMATCH"
    assert warning.param_name == "id"
    assert warning.param_path == "id"
    assert note.levelno == logging.INFO
    assert note.param_path is None


def test_logging_sink_defaults_to_package_logger():
    assert LoggingSink().logger.name == "paramschema"


# ─── setup_logging ───────────────────────────────────────────────

def test_setup_logging_installs_json_handler():
    before = list(logging.root.handlers)
    level = logging.root.level
    try:
        setup_logging("debug", "json")
        added = [h for h in logging.root.handlers if h not in before]
        assert len(added) == 1
        assert isinstance(added[0].formatter, JSONFormatter)
        assert logging.root.level == logging.DEBUG
    finally:
        for handler in logging.root.handlers[:]:
            if handler not in before:
                logging.root.removeHandler(handler)
        logging.root.setLevel(level)


def test_setup_logging_text_format_and_unknown_level():
    before = list(logging.root.handlers)
    level = logging.root.level
    try:
        setup_logging("nonsense", "text")
        added = [h for h in logging.root.handlers if h not in before]
        assert not isinstance(added[0].formatter, JSONFormatter)
        assert logging.root.level == logging.INFO
    finally:
        for handler in logging.root.handlers[:]:
            if handler not in before:
                logging.root.removeHandler(handler)
        logging.root.setLevel(level)
