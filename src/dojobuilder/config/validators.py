"""
Configuration validation utilities.

This module turns raw TOML data into validated BuilderConfig, BuildConfig,
Package and Layer instances.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

from ..models.config import BuildConfig, BuilderConfig, Feature, Layer, Package
from ..validation import (
    ValidationError,
    validate_bool,
    validate_build_name,
    validate_optional_string,
    validate_string,
    validate_string_list,
)

logger = logging.getLogger(__name__)

_BUILD_BOOL_FIELDS = (
    "remove_uncompressed",
    "remove_console_stripped",
    "mini",
    "use_source_maps",
)
_BUILD_STRING_FIELDS = (
    "release_name",
    "action",
    "layer_optimize",
    "optimize",
    "css_optimize",
    "strip_console",
    "selector_engine",
)
# Accepted for completeness; the profile generator always overwrites them.
_BUILD_IGNORED_FIELDS = ("base_path", "release_dir")

_BUILD_FIELDS = set(_BUILD_BOOL_FIELDS) | set(_BUILD_STRING_FIELDS) | set(_BUILD_IGNORED_FIELDS) | {
    "packages",
    "layers",
    "static_has_features",
}
_LAYER_FIELDS = {"boot", "custom_base", "include", "exclude"}
_TOP_LEVEL_FIELDS = {"src_dir", "dest_dir", "bin", "builds"}


def _check_table(data: Any, field_name: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError(
            f"{field_name} must be a table, got {data!r}",
            field_name=field_name,
            value=data
        )
    return data


def _reject_unknown_keys(data: Dict[str, Any], allowed: set, field_name: str) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ValidationError(
            f"{field_name} has unknown keys: {', '.join(unknown)}",
            field_name=field_name,
            value=unknown
        )


def _resolve_dir(value: Any, config_dir: Path, field_name: str) -> Path:
    path = Path(validate_string(value, field_name=field_name, allow_empty=False)).expanduser()
    if not path.is_absolute():
        path = config_dir / path
    return path


def validate_package(data: Any, field_name: str = "package") -> Package:
    """
    Validate a package entry (`{ name = "...", location = "..." }`).

    Raises:
        ValidationError: If validation fails
    """
    data = _check_table(data, field_name)
    _reject_unknown_keys(data, {"name", "location"}, field_name)

    if "name" not in data or "location" not in data:
        raise ValidationError(
            f"{field_name} requires both 'name' and 'location'",
            field_name=field_name,
            value=data
        )

    return Package(
        name=validate_string(data["name"], field_name=f"{field_name}.name", allow_empty=False),
        location=validate_string(data["location"], field_name=f"{field_name}.location", allow_empty=False),
    )


def validate_layer(data: Any, field_name: str = "layer") -> Layer:
    """
    Validate a layer definition.

    Raises:
        ValidationError: If validation fails
    """
    data = _check_table(data, field_name)
    _reject_unknown_keys(data, _LAYER_FIELDS, field_name)

    return Layer(
        boot=validate_bool(data.get("boot", False), field_name=f"{field_name}.boot"),
        custom_base=validate_bool(data.get("custom_base", False), field_name=f"{field_name}.custom_base"),
        include=validate_string_list(data.get("include", []), field_name=f"{field_name}.include"),
        exclude=validate_string_list(data.get("exclude", []), field_name=f"{field_name}.exclude"),
    )


def _validate_features(data: Any, field_name: str) -> Dict[str, Feature]:
    data = _check_table(data, field_name)
    features: Dict[str, Feature] = {}
    for feature_name, value in data.items():
        # TOML has no null; numeric 0/1 is accepted as written in profiles.
        if isinstance(value, int) and not isinstance(value, bool) and value in (0, 1):
            value = bool(value)
        features[feature_name] = validate_bool(value, field_name=f"{field_name}.{feature_name}")
    return features


def validate_build_config(name: str, data: Any) -> BuildConfig:
    """
    Validate and create a BuildConfig from a `[builds.<name>]` table.

    Args:
        name: Build config name
        data: Raw table from TOML

    Returns:
        Validated BuildConfig instance

    Raises:
        ValidationError: If validation fails
    """
    prefix = f"builds.{name}"
    data = _check_table(data, prefix)
    _reject_unknown_keys(data, _BUILD_FIELDS, prefix)

    for key in _BUILD_IGNORED_FIELDS:
        if key in data:
            logger.warning(f"{prefix}.{key} is set by dojobuilder and will be ignored")

    kwargs: Dict[str, Any] = {}
    for key in _BUILD_BOOL_FIELDS:
        if key in data:
            kwargs[key] = validate_bool(data[key], field_name=f"{prefix}.{key}")
    for key in _BUILD_STRING_FIELDS:
        if key in data:
            kwargs[key] = validate_string(data[key], field_name=f"{prefix}.{key}")

    packages_data = data.get("packages", [])
    if not isinstance(packages_data, list):
        raise ValidationError(
            f"{prefix}.packages must be a list of tables",
            field_name=f"{prefix}.packages",
            value=packages_data
        )
    packages: List[Package] = [
        validate_package(package, field_name=f"{prefix}.packages[{i}]")
        for i, package in enumerate(packages_data)
    ]

    layers_data = _check_table(data.get("layers", {}), f"{prefix}.layers")
    layers = {
        layer_name: validate_layer(layer, field_name=f"{prefix}.layers.{layer_name}")
        for layer_name, layer in layers_data.items()
    }

    features = _validate_features(data.get("static_has_features", {}), f"{prefix}.static_has_features")

    return BuildConfig(
        packages=packages,
        layers=layers,
        static_has_features=features,
        **kwargs,
    )


def validate_builder_config(data: Dict[str, Any], config_dir: Path) -> BuilderConfig:
    """
    Validate the whole configuration file.

    Relative `src_dir` / `dest_dir` paths are resolved against `config_dir`.

    Args:
        data: Parsed TOML data
        config_dir: Directory containing the configuration file

    Returns:
        Validated BuilderConfig instance

    Raises:
        ValidationError: If validation fails
    """
    data = _check_table(data, "config")
    _reject_unknown_keys(data, _TOP_LEVEL_FIELDS, "config")

    for key in ("src_dir", "dest_dir"):
        if key not in data:
            raise ValidationError(f"Missing required key '{key}'", field_name=key)

    src_dir = _resolve_dir(data["src_dir"], config_dir, "src_dir")
    dest_dir = _resolve_dir(data["dest_dir"], config_dir, "dest_dir")
    bin_path = validate_optional_string(data.get("bin"), field_name="bin")

    builds_data = _check_table(data.get("builds", {}), "builds")
    build_configs: Dict[str, BuildConfig] = {}
    for name, build_data in builds_data.items():
        validate_build_name(name, field_name=f"builds.{name}")
        build_configs[name] = validate_build_config(name, build_data)

    if not build_configs:
        logger.warning("No build configs defined in [builds]")

    return BuilderConfig(
        src_dir=src_dir,
        dest_dir=dest_dir,
        bin=bin_path,
        build_configs=build_configs,
    )
