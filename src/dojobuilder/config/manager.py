"""
Configuration management and singleton pattern.

This module provides the main configuration loading interface, caching the
loaded BuilderConfig so the file is read only once per process.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import BuilderConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import load_main_config
from .validators import validate_builder_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

_CONFIG: Optional[BuilderConfig] = None

# Default configuration file, relative to the repository root. Overridden by
# the CLI's --config option or by tests.
_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"


def set_config_path(config_path: Path) -> None:
    """
    Set a custom configuration file path and drop any cached configuration.

    Args:
        config_path: Path to the config.toml file
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path)
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """
    Clear the cached configuration, forcing a reload on next access.
    """
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def load_config(config_path: Path) -> BuilderConfig:
    """
    Load and validate a configuration file without touching the cache.

    Args:
        config_path: Path to the config.toml file

    Returns:
        Validated BuilderConfig instance

    Raises:
        FileNotFoundError: If the configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    config_path = Path(config_path)
    try:
        data = load_main_config(config_path)
        config = validate_builder_config(data, config_path.parent)
    except FileNotFoundError as e:
        handle_config_error(
            error=e,
            context="loading configuration file",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger
        )
        raise

    logger.info(f"Successfully loaded configuration with {len(config.build_configs)} build configs")
    return config


def get_config() -> BuilderConfig:
    """
    Get the global configuration, loading it on first access.

    Returns:
        The cached BuilderConfig instance
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    """
    Check if configuration has been loaded and cached.
    """
    return _CONFIG is not None


def get_config_info() -> dict:
    """
    Get information about the current configuration state.
    """
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(_CONFIG_FILE_PATH),
        "build_configs_count": len(_CONFIG.build_configs) if _CONFIG else 0,
    }
