"""
Reading of the TOML configuration file.

Only parsing happens here; turning the parsed tables into a
BuilderConfig is the job of `config.validators`.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..validation import handle_config_error, ErrorSeverity

logger = logging.getLogger(__name__)


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Parse a TOML file into a dictionary.

    Raises:
        FileNotFoundError: If `file_path` is not a file
        tomllib.TOMLDecodeError: If the file is not valid TOML (logged as critical first)
    """
    logger.info(f"Loading {description} from: {file_path}")

    if not file_path.is_file():
        logger.error(f"{description} not found: {file_path}")
        raise FileNotFoundError(f"{description} not found: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description} {file_path.name}",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )

    logger.debug(f"Parsed {len(data)} top-level keys from {file_path}")
    return data


def load_main_config(config_path: Path) -> Dict[str, Any]:
    """Load the dojobuilder config.toml (directories and [builds] tables)."""
    return load_toml_file(config_path, "dojobuilder configuration")
