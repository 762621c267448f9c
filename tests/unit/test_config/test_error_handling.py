"""
Unit tests for the shared error handling helpers.
"""

import logging

import pytest

from timerlat_top.validation import (
    ErrorSeverity,
    ValidationError,
    handle_cli_error,
    handle_error,
    handle_tracer_error,
)


@pytest.mark.unit
class TestHandleError:
    """Test cases for log-then-maybe-raise error handling."""

    def test_reraises_by_default(self):
        with pytest.raises(ValueError):
            handle_error(ValueError("boom"), "parsing")

    def test_logs_context(self, caplog):
        with caplog.at_level(logging.WARNING):
            handle_error(ValueError("boom"), "parsing", severity=ErrorSeverity.WARNING, reraise=False)
        assert "Error in parsing: boom" in caplog.text

    def test_string_severity(self, caplog):
        with caplog.at_level(logging.ERROR):
            handle_error(RuntimeError("bad"), "reading", severity="ERROR", reraise=False)
        assert caplog.records[-1].levelno == logging.ERROR

    def test_cli_error_exits(self, caplog):
        error = ValidationError("Invalid -c cpu list", field_name="--cpus", value="")
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(error, "option validation", exit_code=1)
        assert exc_info.value.code == 1
        assert "CLI option validation" in caplog.text

    def test_tracer_error_names_step(self, caplog):
        from timerlat_top.tracer import TracerError

        error = TracerError("apply config", "Failed to set timerlat period")
        with caplog.at_level(logging.WARNING):
            handle_tracer_error(error, error.step, severity=ErrorSeverity.WARNING, reraise=False)
        assert "Error in tracer apply config: Failed to set timerlat period" in caplog.text
