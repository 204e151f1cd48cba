"""
Build profile generation.

Renders a BuildConfig into the `var profile = {...};` file the Dojo build
tool reads, at `<src_dir>/profiles/<name>.profile.js`.
"""

import json
import logging
from pathlib import Path
from typing import Union

from ..models.config import BuildConfig, BuilderConfig
from ..validation import ConfigNotFoundError, ProfileSerializationError

logger = logging.getLogger(__name__)

PROFILE_TEMPLATE = "var profile = {profile};"
PROFILES_DIRNAME = "profiles"
PROFILE_SUFFIX = ".profile.js"

# Profiles live one level below the source tree.
PROFILE_BASE_PATH = ".."
# The build tool writes its release here; it is merged into dest_dir and removed.
RELEASE_TMP_DIRNAME = "dojoBuilderTMP"

PROFILES_DIR_MODE = 0o754


def release_dir_for(dest_dir: Union[str, Path]) -> Path:
    """Return the intermediate release directory for a destination directory."""
    return Path(dest_dir) / RELEASE_TMP_DIRNAME


def profile_path_for(src_dir: Union[str, Path], name: str) -> Path:
    """Return where the profile for build config `name` is written."""
    return Path(src_dir) / PROFILES_DIRNAME / f"{name}{PROFILE_SUFFIX}"


def render_profile(build_config: BuildConfig) -> str:
    """
    Render a build config as profile file text.

    Raises:
        ProfileSerializationError: If the config cannot be JSON-encoded
    """
    try:
        profile_json = json.dumps(
            build_config.to_profile_dict(),
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise ProfileSerializationError(f"Cannot encode build profile: {e}") from e

    return PROFILE_TEMPLATE.format(profile=profile_json)


def generate_build_profile(config: BuilderConfig, name: str) -> Path:
    """
    Write the profile file for the build config called `name`.

    The build config is updated in place: an empty action becomes
    "release", and basePath/releaseDir are forced to the values the
    reconciliation step relies on.

    Args:
        config: Builder configuration holding the build configs
        name: Name of the build config to render

    Returns:
        Full path of the written profile file

    Raises:
        ConfigNotFoundError: If `name` is not configured
        ProfileSerializationError: If the config cannot be JSON-encoded
        OSError: If the profile file cannot be written
    """
    build_config = config.build_configs.get(name)
    if build_config is None:
        raise ConfigNotFoundError(name)

    if not build_config.action:
        build_config.action = "release"

    build_config.base_path = PROFILE_BASE_PATH
    build_config.release_dir = str(release_dir_for(config.dest_dir))

    content = render_profile(build_config)

    profile_path = profile_path_for(config.src_dir, name)
    profile_path.parent.mkdir(mode=PROFILES_DIR_MODE, parents=True, exist_ok=True)

    with open(profile_path, "w", encoding="utf-8") as f:
        f.write(content)

    logger.debug(f"Wrote build profile for '{name}' to {profile_path}")
    return profile_path
