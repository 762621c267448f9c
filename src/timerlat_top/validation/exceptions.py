"""
Exception handling and error management.

This module provides the error vocabulary shared by the configuration, CLI and
monitoring layers: a severity enum, the validation exception and a small set of
log-then-maybe-raise helpers.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Logging level per severity, and whether the record carries the traceback
# regardless of the caller's include_traceback.
_SEVERITY_LEVELS = {
    ErrorSeverity.DEBUG: (logging.DEBUG, True),
    ErrorSeverity.INFO: (logging.INFO, False),
    ErrorSeverity.WARNING: (logging.WARNING, False),
    ErrorSeverity.ERROR: (logging.ERROR, False),
    ErrorSeverity.CRITICAL: (logging.CRITICAL, True),
}


class ValidationError(Exception):
    """
    Raised when a configuration or command-line value is rejected.

    Attributes:
        field_name: Dotted config key or option name, e.g. "monitor.tracer.cpus" or "--period"
        value: The rejected raw value
        severity: How loudly callers should report it
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    include_traceback: bool = False,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log an error as "Error in <context>: <error>" and optionally re-raise it.

    Args:
        error: The exception that occurred
        context: Where the error occurred, e.g. "apply config"
        severity: ErrorSeverity or its string value (case-insensitive)
        reraise: Whether to re-raise the exception after logging
        include_traceback: Attach the traceback to warning and error records
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    if isinstance(severity, str):
        severity = ErrorSeverity(severity.lower())
    level, always_traceback = _SEVERITY_LEVELS[severity]

    effective_logger.log(
        level,
        f"Error in {context}: {error}",
        exc_info=error if (always_traceback or include_traceback) else None,
    )

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_file_error(error: Exception, context: str, **kwargs) -> None:
    """Handle file-related errors."""
    handle_error(error, f"file {context}", **kwargs)


def handle_tracer_error(error: Exception, step: str, **kwargs) -> None:
    """Handle tracer errors; the context is the tracer step that failed."""
    handle_error(error, f"tracer {step}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Handle CLI-related errors by logging and exiting."""
    exit_code = kwargs.pop('exit_code', 1)
    handle_error(
        error,
        f"CLI {context}",
        severity=kwargs.pop('severity', ErrorSeverity.ERROR),
        reraise=False,
        include_traceback=kwargs.pop('include_traceback', False),
        **kwargs
    )
    sys.exit(exit_code)
