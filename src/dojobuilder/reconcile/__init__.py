"""
Merging of the build tool's release tree into the destination directory.
"""

from .tree import (
    ExcludeFunc,
    ReconcileResult,
    SKIPPED_DIR_PATTERNS,
    SKIPPED_FILE_PATTERNS,
    default_build_exclude,
    is_match_any,
    make_exclude_func,
    propagate_ownership,
    reconcile,
    skip_nothing,
)

__all__ = [
    "ExcludeFunc",
    "ReconcileResult",
    "SKIPPED_DIR_PATTERNS",
    "SKIPPED_FILE_PATTERNS",
    "default_build_exclude",
    "is_match_any",
    "make_exclude_func",
    "propagate_ownership",
    "reconcile",
    "skip_nothing",
]
