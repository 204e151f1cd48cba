"""
Sequential execution of named Dojo builds.

The Builder runs each requested build config through profile generation,
the external build, and reconciliation of the release into the
destination directory, removing the intermediate release tree afterwards.
"""

import logging
import shutil
from typing import Callable, Dict, Iterable, Optional, Union

from ..executor import execute_build_profile
from ..models.config import BuilderConfig
from ..profile import generate_build_profile, release_dir_for
from ..reconcile import ExcludeFunc, ReconcileResult, default_build_exclude, reconcile

logger = logging.getLogger(__name__)


class Builder:
    """
    Runs Dojo builds for the build configs of a BuilderConfig.

    The exclude policy used during reconciliation defaults to
    `default_build_exclude` and can be replaced per builder.
    """

    def __init__(
        self,
        config: BuilderConfig,
        exclude_func: Optional[ExcludeFunc] = None,
        output_handler: Optional[Callable[[str], None]] = None,
    ):
        """
        Args:
            config: Directories, optional binary and build configs
            exclude_func: Reconciliation exclude policy
            output_handler: Receives each line printed by the build script
        """
        self.config = config
        self.exclude_func = exclude_func or default_build_exclude
        self.output_handler = output_handler

    def set_exclude_func(self, exclude_func: ExcludeFunc) -> None:
        """Replace the exclude policy used by subsequent builds."""
        self.exclude_func = exclude_func

    def build(self, names: Union[str, Iterable[str], None] = None) -> Dict[str, ReconcileResult]:
        """
        Build the named configs one after another.

        `names` is a single build name or an iterable of them; an empty or
        missing `names` builds every configured build config.
        The first failure stops the run; later names are not built.

        Returns:
            Reconciliation result per build name, in build order

        Raises:
            ConfigNotFoundError: If a name is not configured
            BuildCommandError: If the build script fails
            OSError: If writing the profile or reconciling fails
        """
        if isinstance(names, str):
            names = [names] if names else []
        names = list(names or [])
        if not names:
            names = list(self.config.build_configs)

        results: Dict[str, ReconcileResult] = {}
        for name in names:
            results[name] = self.build_one(name)
        return results

    def build_one(self, name: str) -> ReconcileResult:
        """Run a single named build and merge its release into dest_dir."""
        logger.info(f"Generating {name} build")

        profile_path = generate_build_profile(self.config, name)
        release_dir = release_dir_for(self.config.dest_dir)

        try:
            execute_build_profile(self.config, profile_path, output_handler=self.output_handler)
            result = reconcile(release_dir, self.config.dest_dir, self.exclude_func)
        finally:
            shutil.rmtree(release_dir, ignore_errors=True)

        logger.debug(f"Build '{name}': {result.copied_files} files copied into {self.config.dest_dir}")
        return result


def run_builds(
    config: BuilderConfig,
    names: Union[str, Iterable[str], None] = None,
    exclude_func: Optional[ExcludeFunc] = None,
) -> Dict[str, ReconcileResult]:
    """Build `names` (or every configured build) with a fresh Builder."""
    return Builder(config, exclude_func=exclude_func).build(names)
