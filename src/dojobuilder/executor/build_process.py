"""
Execution of the external Dojo build script.

This module provides a BuildProcessRunner that launches
`util/buildscripts/build.sh` against a generated profile, echoes the
script's standard output as it arrives, and reports failure as a
BuildCommandError.
"""

import logging
import subprocess
import threading
from pathlib import Path
from typing import IO, Callable, List, Optional, Union

import psutil

from ..models.config import BuilderConfig
from ..validation import BuildCommandError

logger = logging.getLogger(__name__)

BUILD_SCRIPT_RELPATH = Path("util") / "buildscripts" / "build.sh"

# Seconds to wait for the build's process tree after SIGTERM before SIGKILL.
TERMINATE_TIMEOUT = 5.0


def build_script_path(src_dir: Union[str, Path]) -> Path:
    """Return the location of the build script inside a Dojo source tree."""
    return Path(src_dir) / BUILD_SCRIPT_RELPATH


def _echo_line(line: str) -> None:
    print(line, flush=True)


class BuildProcessRunner:
    """
    Runs the Dojo build script for one profile.

    Standard output is drained by a daemon reader thread that hands every
    line to `output_handler` (stdout by default). The reader is not joined:
    lines still buffered when the process exits may be echoed after
    `run()` returns. If the handler raises, the rest of the output is
    read and discarded.
    """

    def __init__(
        self,
        src_dir: Union[str, Path],
        bin_path: Optional[str] = None,
        output_handler: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize the build runner.

        Args:
            src_dir: Dojo source tree containing util/buildscripts/build.sh
            bin_path: Optional binary passed to build.sh via --bin
            output_handler: Called with each stdout line (without newline)
        """
        self.src_dir = Path(src_dir)
        self.bin_path = bin_path
        self.output_handler = output_handler or _echo_line

        self.process: Optional[subprocess.Popen] = None
        self.reader_thread: Optional[threading.Thread] = None
        self.return_code: Optional[int] = None

    def build_command(self, profile_path: Union[str, Path]) -> List[str]:
        """Return the argv used to build `profile_path`."""
        command = [str(build_script_path(self.src_dir)), "--profile", str(profile_path)]
        if self.bin_path:
            command.extend(["--bin", self.bin_path])
        return command

    def run(self, profile_path: Union[str, Path]) -> None:
        """
        Run the build and wait for it to finish.

        Raises:
            BuildCommandError: If the script cannot be started or exits non-zero
        """
        command = self.build_command(profile_path)
        logger.debug(f"Executing build command: {command}")

        try:
            self.process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,  # Line buffered
            )
        except OSError as e:
            logger.debug(f"Build command could not be started: {type(e).__name__}: {e}")
            raise BuildCommandError() from None

        logger.debug(f"Build process started with PID {self.process.pid}")

        self.reader_thread = threading.Thread(
            target=self._drain_output,
            args=(self.process.stdout,),
            name=f"build-output-{self.process.pid}",
            daemon=True,
        )
        self.reader_thread.start()

        try:
            self.return_code = self.process.wait()
        except KeyboardInterrupt:
            logger.warning("Interrupted, terminating build process...")
            terminate_process_tree(self.process.pid)
            raise

        if self.return_code != 0:
            logger.debug(f"Build process exited with code {self.return_code}")
            raise BuildCommandError(self.return_code)

        logger.debug("Build process finished successfully")

    def _drain_output(self, stream: IO[str]) -> None:
        # The pipe must be read to EOF or the build blocks on a full buffer.
        handler_failed = False
        try:
            for line in stream:
                if handler_failed:
                    continue
                try:
                    self.output_handler(line.rstrip("\r\n"))
                except Exception as e:
                    handler_failed = True
                    logger.debug(
                        f"Build output handler failed, discarding further output: {type(e).__name__}: {e}"
                    )
        finally:
            stream.close()


def terminate_process_tree(pid: int, timeout: float = TERMINATE_TIMEOUT) -> None:
    """
    Terminate a process and all of its children.

    Sends SIGTERM to the whole tree, then SIGKILL to anything still alive
    after `timeout` seconds.
    """
    try:
        parent = psutil.Process(pid)
        processes = [parent] + parent.children(recursive=True)
    except psutil.NoSuchProcess:
        logger.debug(f"Process {pid} already terminated")
        return

    for process in processes:
        try:
            process.terminate()
        except psutil.NoSuchProcess:
            continue
        except psutil.AccessDenied:
            logger.warning(f"Access denied terminating process {process.pid}")

    _, alive = psutil.wait_procs(processes, timeout=timeout)
    for process in alive:
        logger.warning(f"Process {process.pid} ignored SIGTERM, killing it")
        try:
            process.kill()
        except psutil.NoSuchProcess:
            continue
        except psutil.AccessDenied:
            logger.warning(f"Access denied killing process {process.pid}")


def execute_build_profile(
    config: BuilderConfig,
    profile_path: Union[str, Path],
    output_handler: Optional[Callable[[str], None]] = None,
) -> None:
    """
    Run the Dojo build for a generated profile.

    Args:
        config: Builder configuration (source directory and optional binary)
        profile_path: Path of the profile file to build
        output_handler: Called with each line the build prints

    Raises:
        BuildCommandError: If the build cannot be started or fails
    """
    runner = BuildProcessRunner(config.src_dir, config.bin, output_handler=output_handler)
    runner.run(profile_path)
