"""
Build profile generation for the Dojo build tool.
"""

from .generator import (
    PROFILE_BASE_PATH,
    RELEASE_TMP_DIRNAME,
    generate_build_profile,
    profile_path_for,
    release_dir_for,
    render_profile,
)

__all__ = [
    "PROFILE_BASE_PATH",
    "RELEASE_TMP_DIRNAME",
    "generate_build_profile",
    "profile_path_for",
    "release_dir_for",
    "render_profile",
]
