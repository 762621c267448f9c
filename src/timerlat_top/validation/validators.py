"""
Validation functions for configuration and command-line values.

All validators return the normalized value or raise ValidationError naming
the offending field. Values may arrive as TOML scalars or as option strings,
so numeric validators accept both.
"""

import re
from typing import Any, Callable, List, Optional, Set, TypeVar

from .exceptions import ValidationError

N = TypeVar("N", int, float)

_DURATION_SUFFIXES = {"s": 1, "m": 60, "h": 3600, "d": 86400}


def _coerce_number(value: Any, convert: Callable[[Any], N], kind: str, field_name: str) -> N:
    # bool is an int subclass and is rejected explicitly.
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid {kind}, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        return convert(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid {kind}, got {value}",
            field_name=field_name,
            value=value
        )


def _check_bounds(number: N, value: Any, min_value: N, max_value: Optional[N], field_name: str) -> N:
    if number < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {number}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and number > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {number}",
            field_name=field_name,
            value=value
        )
    return number


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is an integer within [min_value, max_value].

    Examples:
        >>> validate_positive_integer("100", field_name="--thread")
        100

    Raises:
        ValidationError: If the value is not an integer or out of bounds
    """
    number = _coerce_number(value, int, "integer", field_name)
    return _check_bounds(number, value, min_value, max_value, field_name)


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a number within [min_value, max_value].

    Raises:
        ValidationError: If the value is not a number or out of bounds
    """
    number = _coerce_number(value, float, "number", field_name)
    return _check_bounds(number, value, min_value, max_value, field_name)


def validate_boolean(value: Any, field_name: str = "value") -> bool:
    """Validate that a value is a real boolean."""
    if not isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a boolean",
            field_name=field_name,
            value=value
        )
    return value


def validate_enum_choice(
    value: Any,
    valid_choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Args:
        value: Value to validate
        valid_choices: List of allowed choices
        field_name: Name of the field being validated
        case_sensitive: Whether the comparison should be case-sensitive

    Returns:
        Validated choice, in the spelling used by valid_choices

    Raises:
        ValidationError: If value is not in choices
    """
    def fold(text: str) -> str:
        return text if case_sensitive else text.lower()

    by_key = {fold(choice): choice for choice in valid_choices}
    choice = by_key.get(fold(str(value)))
    if choice is None:
        raise ValidationError(
            f"{field_name} must be one of {valid_choices}, got {value}",
            field_name=field_name,
            value=value
        )
    return choice


def validate_cpu_list(cpus: Any, field_name: str = "cpus") -> str:
    """
    Validate a CPU list string such as "0-3,5".

    Empty strings are accepted and mean "all CPUs".

    Returns:
        The stripped CPU list string

    Raises:
        ValidationError: If the string is malformed
    """
    if not isinstance(cpus, str):
        raise ValidationError(
            f"{field_name} must be a string",
            field_name=field_name,
            value=cpus
        )
    cpus = cpus.strip()
    if not cpus:
        return cpus
    parse_cpu_list(cpus, field_name=field_name)
    return cpus


def parse_cpu_list(cpus: str, field_name: str = "cpus") -> Set[int]:
    """
    Parse a CPU list string into a set of CPU ids.

    Examples:
        >>> sorted(parse_cpu_list("0-2,5"))
        [0, 1, 2, 5]

    Raises:
        ValidationError: If any element is not a CPU id or an ascending range
    """
    if not re.match(r'^[0-9,-]+$', cpus or ""):
        raise ValidationError(
            f"{field_name} must contain only numbers, commas, and hyphens: {cpus}",
            field_name=field_name,
            value=cpus
        )

    result: Set[int] = set()
    for part in cpus.split(","):
        match = re.fullmatch(r'(\d+)(?:-(\d+))?', part)
        if not match:
            raise ValidationError(
                f"{field_name} has an invalid element '{part}': {cpus}",
                field_name=field_name,
                value=cpus
            )
        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) is not None else start
        if end < start:
            raise ValidationError(
                f"{field_name} has a descending range '{part}': {cpus}",
                field_name=field_name,
                value=cpus
            )
        result.update(range(start, end + 1))
    return result


def parse_seconds_duration(value: Any, field_name: str = "duration") -> int:
    """
    Parse a duration such as "30", "30s", "5m", "2h" or "1d" into seconds.

    Integers are taken as seconds. Zero is rejected.

    Raises:
        ValidationError: If the value is not a positive duration
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return validate_positive_integer(value, min_value=1, field_name=field_name)

    match = re.fullmatch(r'\s*(\d+)\s*([smhdSMHD]?)\s*', str(value))
    if not match:
        raise ValidationError(
            f"{field_name} must look like <number>[s|m|h|d], got {value}",
            field_name=field_name,
            value=value
        )
    seconds = int(match.group(1)) * _DURATION_SUFFIXES[(match.group(2) or "s").lower()]
    if seconds <= 0:
        raise ValidationError(
            f"{field_name} must be greater than zero, got {value}",
            field_name=field_name,
            value=value
        )
    return seconds
