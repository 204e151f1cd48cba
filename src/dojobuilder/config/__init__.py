"""
Configuration management for the dojobuilder package.

This module provides a clean interface for loading, validating, and accessing
the TOML configuration with cached singleton access.
"""

# Main configuration interface
from .manager import (
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    load_config,
    set_config_path,
)

# For advanced usage - direct access to loaders and validators
from .loader import (
    load_main_config,
    load_toml_file,
)
from .validators import (
    validate_build_config,
    validate_builder_config,
    validate_layer,
    validate_package,
)

__all__ = [
    # Main interface
    "get_config",
    "load_config",
    "set_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    # Advanced interface
    "load_toml_file",
    "load_main_config",
    "validate_build_config",
    "validate_builder_config",
    "validate_layer",
    "validate_package",
]
