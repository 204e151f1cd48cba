"""
Configuration data models.

This module contains the data structures describing Dojo build jobs
(build configs, packages, layers and static feature flags) and the
collaborator settings (source/destination directories) a build runs with.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

# A static "has" feature flag. The Dojo build tool expects numeric flags, so
# True is written as 1 and both False and None (absent) as 0.
Feature = Optional[bool]


def feature_to_json(feature: Feature) -> int:
    """Return the numeric profile value of a feature flag."""
    return 1 if feature else 0


@dataclass
class Package:
    """
    A module search root handed to the Dojo loader.
    """

    name: str
    location: str

    def to_profile_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "location": self.location}


@dataclass
class Layer:
    """
    A named bundle the build tool writes out as one artifact.
    """

    boot: bool = False
    custom_base: bool = False
    # Module identifiers pulled into the layer.
    include: List[str] = field(default_factory=list)
    # Module identifiers kept out of the layer.
    exclude: List[str] = field(default_factory=list)

    def to_profile_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"boot": self.boot, "customBase": self.custom_base}
        if self.include:
            data["include"] = list(self.include)
        if self.exclude:
            data["exclude"] = list(self.exclude)
        return data


@dataclass
class BuildConfig:
    """
    One named build job, rendered into a `<name>.profile.js` file.

    `base_path` and `release_dir` are always overwritten by the profile
    generator before the config is serialized.
    """

    # Remove *.js.uncompressed.js files after the build.
    remove_uncompressed: bool = False
    # Remove *.js.consoleStripped.js files after the build.
    remove_console_stripped: bool = False

    base_path: str = ""
    release_dir: str = ""
    release_name: str = ""
    # Build tool action; empty means "release".
    action: str = ""
    packages: List[Package] = field(default_factory=list)
    layers: Dict[str, Layer] = field(default_factory=dict)

    # Optimizer settings passed straight through to the build tool.
    layer_optimize: str = ""
    optimize: str = ""
    css_optimize: str = ""
    mini: bool = False
    strip_console: str = ""
    selector_engine: str = ""
    static_has_features: Dict[str, Feature] = field(default_factory=dict)
    use_source_maps: bool = False

    def to_profile_dict(self) -> Dict[str, Any]:
        """
        Build the JSON-ready profile object.

        Keys follow the build tool's profile names in declaration order.
        Optional fields are left out when empty; map keys are sorted.
        """
        data: Dict[str, Any] = {}
        if self.remove_uncompressed:
            data["removeUncompressed"] = True
        if self.remove_console_stripped:
            data["removeConsoleStripped"] = True

        data["basePath"] = self.base_path
        data["releaseDir"] = self.release_dir
        if self.release_name:
            data["releaseName"] = self.release_name
        data["action"] = self.action
        data["packages"] = [package.to_profile_dict() for package in self.packages]
        data["layers"] = {
            name: self.layers[name].to_profile_dict() for name in sorted(self.layers)
        }

        optional_strings = (
            ("layerOptimize", self.layer_optimize),
            ("optimize", self.optimize),
            ("cssOptimize", self.css_optimize),
        )
        for key, value in optional_strings:
            if value:
                data[key] = value
        if self.mini:
            data["mini"] = True
        if self.strip_console:
            data["stripConsole"] = self.strip_console
        if self.selector_engine:
            data["selectorEngine"] = self.selector_engine
        if self.static_has_features:
            data["staticHasFeatures"] = {
                name: feature_to_json(self.static_has_features[name])
                for name in sorted(self.static_has_features)
            }
        data["useSourceMaps"] = self.use_source_maps
        return data


@dataclass
class BuilderConfig:
    """
    The root configuration object: where the Dojo sources live, where the
    release goes, and the build jobs to run.
    """

    # Dojo source tree; holds util/buildscripts/build.sh and profiles/.
    src_dir: Path
    # Final release directory the build output is merged into.
    dest_dir: Path
    # Optional interpreter/binary handed to build.sh via --bin.
    bin: Optional[str] = None
    build_configs: Dict[str, BuildConfig] = field(default_factory=dict)
