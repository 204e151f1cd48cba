"""
Data models for dojobuilder.

Configuration models describe the build jobs (BuildConfig with its
packages, layers and static feature flags) and the directories a build
reads from and writes to (BuilderConfig).
"""

from .config import (
    BuildConfig,
    BuilderConfig,
    Feature,
    Layer,
    Package,
    feature_to_json,
)

__all__ = [
    "BuildConfig",
    "BuilderConfig",
    "Feature",
    "Layer",
    "Package",
    "feature_to_json",
]
