"""
Command-line interface for dojobuilder.

This module provides the main CLI entry point: it loads the configuration,
selects the build configs to run, and reports failures with a non-zero
exit status.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..orchestration import Builder
from ..reconcile import (
    SKIPPED_DIR_PATTERNS,
    SKIPPED_FILE_PATTERNS,
    ExcludeFunc,
    make_exclude_func,
    skip_nothing,
)
from ..validation import (
    DojoBuilderError,
    ValidationError,
    handle_cli_error,
    validate_build_name,
    validate_path_exists,
    validate_regex_pattern,
)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dojobuilder",
        description="Run Dojo toolkit builds and merge their releases into a destination directory.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to the config.toml file. Defaults to conf/config.toml.",
    )
    parser.add_argument(
        "-b",
        "--build",
        action="append",
        dest="builds",
        default=[],
        metavar="NAME",
        help="Build config to run (repeatable). Defaults to every configured build.",
    )
    parser.add_argument(
        "--bin",
        help="Binary passed to build.sh via --bin, overriding the configured one.",
    )
    parser.add_argument(
        "--keep-all",
        action="store_true",
        help="Copy every file of the release, including uncompressed and console-stripped copies.",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="REGEX",
        help="Additional regex for release files to leave out (repeatable).",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List configured build configs and exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def select_exclude_func(keep_all: bool, extra_patterns: List[str]) -> Optional[ExcludeFunc]:
    """
    Pick the exclude policy for the command-line options.

    Returns None for the default policy.

    Raises:
        ValidationError: If --exclude is combined with --keep-all or a pattern is invalid
    """
    if keep_all:
        if extra_patterns:
            raise ValidationError("--exclude cannot be combined with --keep-all", field_name="--exclude")
        return skip_nothing
    if not extra_patterns:
        return None

    patterns = [validate_regex_pattern(p, field_name="--exclude argument") for p in extra_patterns]
    return make_exclude_func(
        file_patterns=SKIPPED_FILE_PATTERNS + patterns,
        dir_patterns=SKIPPED_DIR_PATTERNS,
    )


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for dojobuilder.

    Raises:
        SystemExit: On configuration errors, unknown build names or build failures.
    """
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    if args.config:
        set_config_path(args.config)

    try:
        config = get_config()
    except (FileNotFoundError, DojoBuilderError, ValueError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            include_traceback=False,
            logger=logger,
        )

    if args.list:
        for name in config.build_configs:
            print(name)
        return

    try:
        names = [validate_build_name(name, field_name="--build argument") for name in args.builds]
    except ValidationError as e:
        handle_cli_error(
            error=e,
            context="build name validation",
            exit_code=1,
            logger=logger,
        )

    unknown = [name for name in names if name not in config.build_configs]
    if unknown:
        logger.error(f"Build config(s) not found in configuration: {', '.join(unknown)}")
        logger.info(f"Available build configs: {', '.join(config.build_configs)}")
        sys.exit(1)

    if args.bin:
        config.bin = args.bin

    try:
        validate_path_exists(config.src_dir, field_name="src_dir")
        exclude_func = select_exclude_func(args.keep_all, args.exclude)
    except ValidationError as e:
        handle_cli_error(
            error=e,
            context="option validation",
            exit_code=1,
            logger=logger,
        )

    builder = Builder(config, exclude_func=exclude_func)

    try:
        builder.build(names)
    except KeyboardInterrupt:
        logger.warning("Build interrupted")
        sys.exit(130)
    except (DojoBuilderError, OSError) as e:
        handle_cli_error(
            error=e,
            context="build",
            exit_code=1,
            logger=logger,
        )

    logger.info("All requested builds completed.")


if __name__ == "__main__":
    main_cli()
