"""
Value validation functions used by the configuration layer.

Each validator returns the (normalized) value or raises ValidationError
naming the offending field.
"""

import os
import re
from pathlib import Path
from typing import Any, List, Optional, Union

from .exceptions import ValidationError


def validate_bool(value: Any, field_name: str = "value") -> bool:
    """
    Validate that a value is a boolean.

    Args:
        value: Value to validate
        field_name: Name of the field being validated

    Returns:
        The boolean value

    Raises:
        ValidationError: If value is not a bool
    """
    if not isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a boolean, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value


def validate_string(value: Any, field_name: str = "value", allow_empty: bool = True) -> str:
    """
    Validate that a value is a string.

    Args:
        value: Value to validate
        field_name: Name of the field being validated
        allow_empty: Whether an empty string is accepted

    Returns:
        The string value

    Raises:
        ValidationError: If value is not a string, or is empty when not allowed
    """
    if not isinstance(value, str):
        raise ValidationError(
            f"{field_name} must be a string, got {value!r}",
            field_name=field_name,
            value=value
        )
    if not allow_empty and not value.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=value
        )
    return value


def validate_string_list(value: Any, field_name: str = "value") -> List[str]:
    """
    Validate that a value is a list of strings.

    Raises:
        ValidationError: If value is not a list or contains non-string items
    """
    if not isinstance(value, list):
        raise ValidationError(
            f"{field_name} must be a list of strings, got {value!r}",
            field_name=field_name,
            value=value
        )
    for i, item in enumerate(value):
        validate_string(item, field_name=f"{field_name} item {i}")
    return list(value)


def validate_build_name(name: Any, field_name: str = "build_name") -> str:
    """
    Validate a build config name.

    Names end up in profile file names, so path separators are rejected.

    Raises:
        ValidationError: If name is invalid
    """
    if not name or not isinstance(name, str):
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=name
        )

    if not re.match(r'^[a-zA-Z0-9_.-]+$', name) or name in (".", ".."):
        raise ValidationError(
            f"{field_name} must contain only alphanumeric characters, dots, underscores, and hyphens: {name}",
            field_name=field_name,
            value=name
        )

    return name


def validate_regex_pattern(pattern: str, field_name: str = "regex_pattern") -> str:
    """
    Validate regex pattern format.

    Args:
        pattern: Regex pattern to validate
        field_name: Name of the field being validated

    Returns:
        Validated pattern

    Raises:
        ValidationError: If pattern is invalid
    """
    if not pattern or not isinstance(pattern, str):
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=pattern
        )

    try:
        re.compile(pattern)
    except re.error as e:
        raise ValidationError(
            f"{field_name} is not a valid regex pattern: {e}",
            field_name=field_name,
            value=pattern
        )

    return pattern


def validate_path_exists(path: Union[str, Path], field_name: str = "path") -> str:
    """
    Validate that a path exists.

    Raises:
        ValidationError: If path doesn't exist
    """
    path_str = str(path)
    if not os.path.exists(path_str):
        raise ValidationError(
            f"{field_name} does not exist: {path_str}",
            field_name=field_name,
            value=path_str
        )
    return path_str


def validate_optional_string(value: Any, field_name: str = "value") -> Optional[str]:
    """Validate a string that may be absent (``None``); empty strings become ``None``."""
    if value is None:
        return None
    value = validate_string(value, field_name=field_name)
    return value or None
