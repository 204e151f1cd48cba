"""
Validation and error handling for the dojobuilder package.

This module provides the exception taxonomy, consistent error reporting,
and the value validators used by the configuration layer.
"""

# Core exception classes and error handling
from .exceptions import (
    BuildCommandError,
    ConfigNotFoundError,
    DojoBuilderError,
    ErrorSeverity,
    ProfileSerializationError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
)

# Validation functions
from .validators import (
    validate_bool,
    validate_build_name,
    validate_optional_string,
    validate_path_exists,
    validate_regex_pattern,
    validate_string,
    validate_string_list,
)

__all__ = [
    # Core functionality
    "BuildCommandError",
    "ConfigNotFoundError",
    "DojoBuilderError",
    "ErrorSeverity",
    "ProfileSerializationError",
    "ValidationError",
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    # Validators
    "validate_bool",
    "validate_build_name",
    "validate_optional_string",
    "validate_path_exists",
    "validate_regex_pattern",
    "validate_string",
    "validate_string_list",
]
