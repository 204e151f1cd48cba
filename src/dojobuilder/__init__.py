"""
dojobuilder: run Dojo toolkit builds and merge their releases.

The package generates the build tool's profile files, runs
util/buildscripts/build.sh, and copies the produced release into a
destination directory, leaving out uncompressed and console-stripped
byproducts.

The package is organized into specialized modules:
- config: TOML configuration loading and validation
- models: Build config data structures
- validation: Error types, error handling and value validators
- profile: Profile file generation
- executor: External build script execution
- reconcile: Release tree merging and exclude policies
- orchestration: Sequential execution of named builds
- cli: Command-line interface

Usage:
    From command line:
        dojobuilder -c conf/config.toml -b app

    Programmatically:
        from dojobuilder import Builder, load_config
        builder = Builder(load_config(Path("conf/config.toml")))
        builder.build(["app"])
"""

# Main interfaces
from .config import get_config, load_config, set_config_path, clear_config_cache
from .orchestration import Builder, run_builds
from .profile import generate_build_profile, render_profile
from .executor import execute_build_profile
from .reconcile import (
    ExcludeFunc,
    ReconcileResult,
    default_build_exclude,
    make_exclude_func,
    reconcile,
)
from .cli import main_cli

# Model classes for external use
from .models import BuildConfig, BuilderConfig, Feature, Layer, Package

# Errors
from .validation import (
    BuildCommandError,
    ConfigNotFoundError,
    DojoBuilderError,
    ProfileSerializationError,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "load_config",
    "set_config_path",
    "clear_config_cache",
    "Builder",
    "run_builds",
    "generate_build_profile",
    "render_profile",
    "execute_build_profile",
    "ExcludeFunc",
    "ReconcileResult",
    "default_build_exclude",
    "make_exclude_func",
    "reconcile",
    "main_cli",
    # Models
    "BuildConfig",
    "BuilderConfig",
    "Feature",
    "Layer",
    "Package",
    # Errors
    "BuildCommandError",
    "ConfigNotFoundError",
    "DojoBuilderError",
    "ProfileSerializationError",
    "ValidationError",
]
