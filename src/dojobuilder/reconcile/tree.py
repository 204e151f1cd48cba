"""
Reconciliation of a build tool release tree into the destination directory.

The Dojo build tool writes its release into an intermediate directory.
`reconcile` walks that tree depth-first, asks an exclude policy about every
entry, and copies what is wanted into the destination directory, keeping
the relative layout and (where the platform allows) file ownership.
"""

import logging
import os
import re
import shutil
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Union

logger = logging.getLogger(__name__)

# Decides whether a tree entry is left out. Receives the entry path and its
# lstat() result; returns True to skip. Raising aborts the reconciliation.
ExcludeFunc = Callable[[str, os.stat_result], bool]

# Layer byproducts the build tool leaves next to every compressed module.
SKIPPED_FILE_PATTERNS: List[str] = [r".*\.js\.(uncompressed|consoleStripped)\.js"]
SKIPPED_DIR_PATTERNS: List[str] = []

DEST_DIR_MODE = 0o754


@dataclass
class ReconcileResult:
    """Counts of what a reconciliation did."""

    copied_files: int = 0
    created_dirs: int = 0
    skipped: int = 0


def is_match_any(patterns: Iterable[str], path: str) -> bool:
    """Return True if any regex in `patterns` matches somewhere in `path`."""
    return any(re.search(pattern, path) for pattern in patterns)


def make_exclude_func(
    file_patterns: Iterable[str] = (),
    dir_patterns: Iterable[str] = (),
) -> ExcludeFunc:
    """
    Build an exclude policy from regex lists.

    Files are matched against `file_patterns`, directories against
    `dir_patterns`; patterns are searched anywhere in the entry path.

    Raises:
        re.error: If a pattern does not compile
    """
    compiled_files = [re.compile(pattern) for pattern in file_patterns]
    compiled_dirs = [re.compile(pattern) for pattern in dir_patterns]

    def exclude(path: str, info: os.stat_result) -> bool:
        patterns = compiled_dirs if stat.S_ISDIR(info.st_mode) else compiled_files
        return any(pattern.search(path) for pattern in patterns)

    return exclude


def default_build_exclude(path: str, info: os.stat_result) -> bool:
    """
    Skip uncompressed and console-stripped copies of built modules.

    No directory is skipped.
    """
    if stat.S_ISDIR(info.st_mode):
        return is_match_any(SKIPPED_DIR_PATTERNS, path)
    return is_match_any(SKIPPED_FILE_PATTERNS, path)


def skip_nothing(path: str, info: os.stat_result) -> bool:
    """Exclude policy that keeps every entry."""
    return False


def propagate_ownership(dest: Path, info: os.stat_result) -> None:
    """Give `dest` the owner and group recorded in `info`, if possible."""
    if not hasattr(os, "chown"):
        return
    try:
        os.chown(dest, info.st_uid, info.st_gid)
    except OSError as e:
        logger.debug(f"Could not chown {dest} to {info.st_uid}:{info.st_gid}: {e}")


def _reconcile_dir(
    directory: Path,
    dest: Path,
    exclude_func: ExcludeFunc,
    result: ReconcileResult,
) -> None:
    # Depth-first pre-order; siblings in lexical order, symlinks not followed.
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda entry: entry.name)

    for entry in entries:
        path = Path(entry.path)
        entry_dest = dest / entry.name
        info = entry.stat(follow_symlinks=False)
        is_dir = stat.S_ISDIR(info.st_mode)

        if exclude_func(str(path), info):
            result.skipped += 1
            logger.debug(f"Skipping {'directory' if is_dir else 'file'} {path}")
            continue

        if is_dir:
            if not entry_dest.is_dir():
                entry_dest.mkdir(mode=DEST_DIR_MODE)
                result.created_dirs += 1
        else:
            shutil.copyfile(path, entry_dest)
            result.copied_files += 1

        propagate_ownership(entry_dest, info)

        if is_dir:
            _reconcile_dir(path, entry_dest, exclude_func, result)


def reconcile(
    release_dir: Union[str, Path],
    dest_dir: Union[str, Path],
    exclude_func: ExcludeFunc = default_build_exclude,
) -> ReconcileResult:
    """
    Merge the release tree at `release_dir` into `dest_dir`.

    Every entry below `release_dir` maps to the same relative path below
    `dest_dir`. Excluded directories are pruned with their whole subtree,
    excluded files are left out. Directories are created when missing and
    files are copied over whatever is there.

    Args:
        release_dir: Intermediate release tree produced by the build tool
        dest_dir: Destination directory
        exclude_func: Policy deciding which entries are skipped

    Returns:
        Counts of copied files, created directories and skipped entries

    Raises:
        Exception: Whatever `exclude_func` raises, or OSError from creating
            directories and copying files, unchanged
    """
    release_dir = Path(release_dir)
    dest_dir = Path(dest_dir)
    result = ReconcileResult()

    if not release_dir.exists():
        logger.warning(f"Release directory {release_dir} does not exist, nothing to copy")
        return result

    dest_dir.mkdir(mode=DEST_DIR_MODE, parents=True, exist_ok=True)
    _reconcile_dir(release_dir, dest_dir, exclude_func, result)

    logger.debug(
        f"Reconciled {release_dir} into {dest_dir}: {result.copied_files} files copied, "
        f"{result.created_dirs} directories created, {result.skipped} entries skipped"
    )
    return result
