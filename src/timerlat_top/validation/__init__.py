"""
Validation and error handling for the timerlat_top package.

This module provides input validation and error handling with consistent
error reporting across the application.
"""

from .exceptions import (
    ErrorSeverity,
    ValidationError,
    handle_error,
    handle_config_error,
    handle_file_error,
    handle_tracer_error,
    handle_cli_error,
)

from .validators import (
    parse_cpu_list,
    parse_seconds_duration,
    validate_boolean,
    validate_cpu_list,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    "ErrorSeverity",
    "ValidationError",
    "handle_error",
    "handle_config_error",
    "handle_file_error",
    "handle_tracer_error",
    "handle_cli_error",
    "parse_cpu_list",
    "parse_seconds_duration",
    "validate_boolean",
    "validate_cpu_list",
    "validate_enum_choice",
    "validate_positive_float",
    "validate_positive_integer",
]
