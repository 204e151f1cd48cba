"""
Pytest configuration and shared fixtures for the dojobuilder test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules in the dojobuilder project.
"""

import os
import shutil
import stat
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dojobuilder.models import BuildConfig, BuilderConfig, Layer, Package  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "posix: mark test as requiring a POSIX shell")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def src_dir(temp_dir):
    """An empty Dojo source tree."""
    path = temp_dir / "src"
    path.mkdir()
    return path


@pytest.fixture
def dest_dir(temp_dir):
    """An empty destination directory."""
    path = temp_dir / "release"
    path.mkdir()
    return path


@pytest.fixture
def sample_build_config():
    """A fully populated build config."""
    return BuildConfig(
        remove_uncompressed=True,
        release_name="app",
        packages=[Package("dojo", "dojo"), Package("app", "app")],
        layers={
            "dojo/dojo": Layer(boot=True, custom_base=True, include=["dojo/dojo", "app/main"]),
        },
        layer_optimize="closure",
        optimize="closure",
        mini=True,
        static_has_features={"dojo-trace-api": False, "dojo-log-api": True},
    )


@pytest.fixture
def builder_config(src_dir, dest_dir, sample_build_config):
    """A BuilderConfig with two build configs, `app` and `admin`."""
    return BuilderConfig(
        src_dir=src_dir,
        dest_dir=dest_dir,
        build_configs={
            "app": sample_build_config,
            "admin": BuildConfig(packages=[Package("admin", "admin")]),
        },
    )


@pytest.fixture
def sample_config_data() -> Dict[str, Any]:
    """Raw configuration data as it appears in config.toml."""
    return {
        "src_dir": "src",
        "dest_dir": "release",
        "bin": "node",
        "builds": {
            "app": {
                "action": "release",
                "release_name": "app",
                "mini": True,
                "optimize": "closure",
                "packages": [
                    {"name": "dojo", "location": "dojo"},
                    {"name": "app", "location": "app"},
                ],
                "layers": {
                    "dojo/dojo": {
                        "boot": True,
                        "custom_base": True,
                        "include": ["dojo/dojo", "app/main"],
                    },
                },
                "static_has_features": {"dojo-trace-api": False, "dojo-log-api": True},
            },
            "admin": {
                "packages": [{"name": "admin", "location": "admin"}],
            },
        },
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Write sample_config_data to a temporary config.toml."""
    import toml

    path = temp_dir / "config.toml"
    with open(path, "w") as f:
        toml.dump(sample_config_data, f)
    return path


# ============================================================================
# Build Script Stubs
# ============================================================================


class BuildScriptFactory:
    """Writes stand-in util/buildscripts/build.sh scripts into a source tree."""

    def __init__(self, src_dir: Path):
        self.src_dir = src_dir
        self.script_path = src_dir / "util" / "buildscripts" / "build.sh"

    def write(self, body: str) -> Path:
        self.script_path.parent.mkdir(parents=True, exist_ok=True)
        self.script_path.write_text("#!/bin/sh\n" + body)
        mode = os.stat(self.script_path).st_mode
        os.chmod(self.script_path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return self.script_path


@pytest.fixture
def build_script(src_dir):
    """Factory for build.sh stubs inside `src_dir`."""
    if sys.platform == "win32":
        pytest.skip("build.sh stubs need a POSIX shell")
    return BuildScriptFactory(src_dir)


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically clear configuration cache after each test."""
    original_config_path = Path(__file__).parent.parent / "conf" / "config.toml"

    yield

    from dojobuilder.config import clear_config_cache, set_config_path

    clear_config_cache()
    set_config_path(original_config_path)
