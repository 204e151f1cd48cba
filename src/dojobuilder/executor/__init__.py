"""
Build execution for the dojobuilder package.

This module runs the external Dojo build script against a generated
profile and streams its output.
"""

from .build_process import (
    BuildProcessRunner,
    build_script_path,
    execute_build_profile,
    terminate_process_tree,
)

__all__ = [
    "BuildProcessRunner",
    "build_script_path",
    "execute_build_profile",
    "terminate_process_tree",
]
