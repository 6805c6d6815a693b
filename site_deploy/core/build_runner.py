# site_deploy/core/build_runner.py
"""Project build step run before uploading"""

import logging
import shlex
from pathlib import Path
from typing import Callable, Optional, Union

from ..api.exceptions import BuildError
from ..constants import DEFAULT_BUILD_COMMAND, DeployLogLevel
from ..utils.process_utils import stream_command

logger = logging.getLogger(__name__)

# Bundler output markers and the build progress they indicate
BUILD_MARKERS = (
    ("computing gzip", 90),
    ("built in", 90),
    ("rendering", 60),
    ("bundling", 60),
    ("transforming", 30),
)

# Build phase covers 15-40% of the overall deployment
BUILD_PROGRESS_START = 15
BUILD_PROGRESS_SPAN = 25

LogHandler = Callable[[DeployLogLevel, str], None]
ProgressHandler = Callable[[float, int, str], None]


def build_progress(line: str) -> Optional[int]:
    """Build progress (0-100) suggested by a line of bundler output"""
    lowered = line.lower()
    for marker, progress in BUILD_MARKERS:
        if marker in lowered:
            return progress
    return None


class BuildRunner:
    """Runs the project build command and streams its output"""

    def __init__(self, command: str = DEFAULT_BUILD_COMMAND,
                 cwd: Optional[Union[str, Path]] = None):
        """
        Args:
            command: Shell-style build command
            cwd: Directory to build in (defaults to the current directory)
        """
        self.command = command
        self.cwd = Path(cwd) if cwd else Path.cwd()

    async def run(self,
                  on_log: Optional[LogHandler] = None,
                  on_progress: Optional[ProgressHandler] = None,
                  should_stop: Optional[Callable[[], bool]] = None) -> None:
        """
        Run the build to completion

        Args:
            on_log: Receives (level, line) for every output line
            on_progress: Receives (overall progress, build progress, message)
            should_stop: Polled after each line; terminates the build when True

        Raises:
            BuildError: If the command cannot be started or exits non-zero
        """
        parts = shlex.split(self.command)
        if not parts:
            raise BuildError("Build command is empty")

        def on_stdout(line: str) -> None:
            if on_log:
                on_log(DeployLogLevel.INFO, line)
            progress = build_progress(line)
            if progress is not None and on_progress:
                on_progress(BUILD_PROGRESS_START + progress * BUILD_PROGRESS_SPAN / 100,
                            progress, line[:100])

        def on_stderr(line: str) -> None:
            level = DeployLogLevel.ERROR if "error" in line.lower() else DeployLogLevel.WARN
            if on_log:
                on_log(level, line)

        logger.info("Building with: %s (in %s)", self.command, self.cwd)
        try:
            code, _, stderr = await stream_command(
                parts[0], parts[1:],
                cwd=self.cwd,
                env={"FORCE_COLOR": "1"},
                on_stdout=on_stdout,
                on_stderr=on_stderr,
                should_stop=should_stop,
            )
        except OSError as e:
            raise BuildError(f"Failed to start build command '{parts[0]}': {e}") from e

        if code != 0:
            tail = stderr.strip().splitlines()[-1:] if stderr.strip() else []
            detail = f": {tail[0]}" if tail else ""
            raise BuildError(f"Build failed with exit code {code}{detail}", exit_code=code)

        logger.info("Build finished")
