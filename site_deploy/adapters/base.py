# site_deploy/adapters/base.py
"""Deploy adapter abstract base class"""

import dataclasses
import logging
import os
import shutil
import time
import traceback
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..api.exceptions import DeployCancelledError, DistDirError, SiteDeployError
from ..constants import (
    NPM_WARNING_MARKER,
    DeployLogLevel,
    DeployPhase,
    DeployStatus,
)
from ..core.platforms import get_platform_info
from ..core.validation_engine import ConfigFieldValidator, ValidationResult
from ..models.deploy_config import DeployConfig
from ..models.platform import ConfigField, PlatformInfo
from ..models.result import DeployLogEntry, DeployProgress, DeployResult
from ..utils.file_utils import is_empty_dir, scan_directory, to_posix
from ..utils.formatting import format_size
from ..utils.process_utils import stream_command


@dataclass
class DeployCallbacks:
    """Observer for a running deployment

    Every hook is optional; callers register only what they render.
    """
    on_progress: Optional[Callable[[DeployProgress], None]] = None
    on_log: Optional[Callable[[DeployLogEntry], None]] = None
    on_status_change: Optional[Callable[[DeployStatus], None]] = None

    def progress(self, progress: DeployProgress) -> None:
        if self.on_progress:
            self.on_progress(progress)

    def log(self, entry: DeployLogEntry) -> None:
        if self.on_log:
            self.on_log(entry)

    def status(self, status: DeployStatus) -> None:
        if self.on_status_change:
            self.on_status_change(status)


@dataclass(frozen=True)
class UploadFile:
    """A file selected for upload"""
    relative_path: str
    absolute_path: Path
    size: int


@dataclass(frozen=True)
class CommandResult:
    """Exit code and captured output of an external command"""
    code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.code == 0


class DeployAdapter(ABC):
    """Abstract base class for all platform adapters

    Subclasses implement ``_do_deploy``; ``deploy`` wraps it so every call
    resolves to a ``DeployResult``, whatever happens inside.
    """

    platform: str = ""
    display_name: str = ""
    icon: str = ""
    description: str = ""
    requires_build: bool = True

    # Local executables the adapter shells out to
    required_tools: Sequence[str] = ()

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        """
        Initialize adapter

        Args:
            environ: Environment used for credential fallbacks (defaults to os.environ)
        """
        self._environ = environ
        self._cancelled = False
        self._callbacks = DeployCallbacks()
        self.logger = logging.getLogger(f"site_deploy.adapters.{self.platform or 'base'}")

    @property
    def environ(self) -> Dict[str, str]:
        return self._environ if self._environ is not None else os.environ

    @property
    def platform_info(self) -> Optional[PlatformInfo]:
        return get_platform_info(self.platform)

    @property
    def config_fields(self) -> List[ConfigField]:
        info = self.platform_info
        return list(info.config_fields) if info else []

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    async def validate_config(self, config: DeployConfig) -> ValidationResult:
        """
        Check required fields and environment fallbacks

        Never mutates ``config`` and never talks to the remote target.

        Args:
            config: Deploy configuration

        Returns:
            ValidationResult
        """
        validator = ConfigFieldValidator(self.environ)
        result = validator.validate(self.config_fields, config.to_dict())
        self._validate_extra(config, result)
        return result

    def _validate_extra(self, config: DeployConfig, result: ValidationResult) -> None:
        """Platform checks beyond the field schema"""

    async def deploy(self, config: DeployConfig,
                     callbacks: Optional[DeployCallbacks] = None) -> DeployResult:
        """
        Ship the artifact directory

        Args:
            config: Deploy configuration (``dist_dir`` already resolved)
            callbacks: Progress, log and status observers

        Returns:
            DeployResult; failures and cancellation are results, not exceptions
        """
        self._cancelled = False
        self._callbacks = callbacks or DeployCallbacks()
        start = time.monotonic()

        try:
            result = await self._do_deploy(config)
        except DeployCancelledError:
            self.log(DeployLogLevel.WARN, "Deployment cancelled")
            result = self.create_cancelled_result()
        except SiteDeployError as e:
            self.log(DeployLogLevel.ERROR, str(e))
            result = self.create_failed_result(str(e), traceback.format_exc())
        except Exception as e:
            self.logger.debug("Adapter %s raised", self.platform, exc_info=True)
            self.log(DeployLogLevel.ERROR, f"{type(e).__name__}: {e}")
            result = self.create_failed_result(str(e) or type(e).__name__, traceback.format_exc())
        finally:
            self._callbacks = DeployCallbacks()

        if result.duration is None:
            result = dataclasses.replace(result, duration=time.monotonic() - start)
        return result

    @abstractmethod
    async def _do_deploy(self, config: DeployConfig) -> DeployResult:
        """Platform specific transfer, implemented by subclasses"""
        pass

    async def cancel(self) -> None:
        """Request cancellation; the running deploy polls the flag"""
        self._cancelled = True

    def check_dependencies(self) -> List[str]:
        """
        Report missing local tooling

        Returns:
            Warning messages, empty if everything is available
        """
        warnings = []
        for tool in self.required_tools:
            if shutil.which(tool) is None:
                warnings.append(f"'{tool}' was not found on PATH; {self.display_name} deploys need it")
        return warnings

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def update_progress(self, phase: DeployPhase, progress: float,
                        phase_progress: float = 0, message: str = "", **extra: Any) -> None:
        """Emit a progress event"""
        self._callbacks.progress(DeployProgress(
            phase=phase,
            progress=progress,
            phase_progress=phase_progress,
            message=message,
            **extra,
        ))

    def log(self, level: DeployLogLevel, message: str,
            phase: Optional[DeployPhase] = None, data: Any = None) -> None:
        """Emit a log entry"""
        self._callbacks.log(DeployLogEntry(level=level, message=message, phase=phase, data=data))

    def set_status(self, status: DeployStatus) -> None:
        self._callbacks.status(status)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise DeployCancelledError()

    # ------------------------------------------------------------------
    # Artifact directory
    # ------------------------------------------------------------------

    @staticmethod
    def resolve_dist_dir(config: DeployConfig, cwd: Optional[Path] = None) -> Path:
        """Absolute artifact directory"""
        dist_dir = Path(config.dist_dir or "dist").expanduser()
        if not dist_dir.is_absolute():
            dist_dir = (cwd or Path.cwd()) / dist_dir
        return dist_dir

    @staticmethod
    def validate_dist_dir(dist_dir: Path) -> None:
        """
        Ensure the artifact directory exists and has content

        Raises:
            DistDirError: If it is missing, not a directory or empty
        """
        if not dist_dir.exists():
            raise DistDirError(f"Build directory does not exist: {dist_dir}", str(dist_dir))
        if not dist_dir.is_dir():
            raise DistDirError(f"Build path is not a directory: {dist_dir}", str(dist_dir))
        if is_empty_dir(dist_dir):
            raise DistDirError(f"Build directory is empty: {dist_dir}", str(dist_dir))

    @staticmethod
    def get_files_to_upload(dist_dir: Path,
                            include: Optional[Sequence[str]] = None,
                            exclude: Optional[Sequence[str]] = None) -> List[UploadFile]:
        """Files to ship, in a stable order"""
        return [
            UploadFile(
                relative_path=to_posix(path.relative_to(dist_dir)),
                absolute_path=path,
                size=path.stat().st_size,
            )
            for path in scan_directory(dist_dir, include=include, exclude=exclude)
        ]

    @staticmethod
    def calculate_total_size(files: Sequence[UploadFile]) -> int:
        return sum(f.size for f in files)

    @staticmethod
    def format_size(size: int) -> str:
        return format_size(size)

    def prepare_files(self, config: DeployConfig,
                      include: Optional[Sequence[str]] = None,
                      exclude: Optional[Sequence[str]] = None) -> List[UploadFile]:
        """Validate the artifact directory and enumerate its files"""
        dist_dir = self.resolve_dist_dir(config)
        self.validate_dist_dir(dist_dir)

        self.log(DeployLogLevel.INFO, f"Preparing deployment to {self.display_name}...",
                 DeployPhase.PREPARE)
        self.update_progress(DeployPhase.PREPARE, 45, 0, "Collecting files...")

        files = self.get_files_to_upload(dist_dir, include=include, exclude=exclude)
        total_size = self.calculate_total_size(files)
        self.log(DeployLogLevel.INFO,
                 f"{len(files)} files, {self.format_size(total_size)} in total",
                 DeployPhase.PREPARE,
                 {"total_files": len(files), "total_bytes": total_size})
        return files

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def create_success_result(self, url: Optional[str] = None, **extra: Any) -> DeployResult:
        return DeployResult(success=True, url=url or None, **extra)

    def create_failed_result(self, error: str, details: Optional[str] = None,
                             **extra: Any) -> DeployResult:
        return DeployResult(success=False, error=error, error_details=details, **extra)

    def create_cancelled_result(self, **extra: Any) -> DeployResult:
        return DeployResult(success=False, error="Deployment cancelled", cancelled=True, **extra)

    # ------------------------------------------------------------------
    # External commands
    # ------------------------------------------------------------------

    async def exec_command(self, command: str, args: Sequence[str] = (),
                           cwd: Optional[Path] = None,
                           env: Optional[Dict[str, str]] = None,
                           on_stdout: Optional[Callable[[str], None]] = None,
                           on_stderr: Optional[Callable[[str], None]] = None,
                           cancellable: bool = True) -> CommandResult:
        """
        Run a command, streaming its output line by line

        Args:
            command: Executable name or path
            args: Arguments
            cwd: Working directory
            env: Variables added to the current environment
            on_stdout: Called with each stdout line, color codes stripped
            on_stderr: Called with each stderr line, color codes stripped
            cancellable: Terminate the process when cancellation is requested

        Returns:
            CommandResult with the full captured output

        Raises:
            DeployCancelledError: If cancelled while the command ran
            FileNotFoundError: If the executable does not exist
        """
        code, stdout, stderr = await stream_command(
            command, args, cwd=cwd, env=env,
            on_stdout=on_stdout, on_stderr=on_stderr,
            should_stop=(lambda: self._cancelled) if cancellable else None,
        )

        if cancellable and self._cancelled:
            raise DeployCancelledError()

        return CommandResult(code=code, stdout=stdout, stderr=stderr)

    async def run_platform_cli(self, args: Sequence[str],
                               env: Optional[Dict[str, str]] = None,
                               cwd: Optional[Path] = None,
                               on_line: Optional[Callable[[str], None]] = None,
                               phase: DeployPhase = DeployPhase.UPLOAD) -> CommandResult:
        """
        Run a platform CLI through ``npx``

        Stdout lines are logged at info level and passed to ``on_line``;
        stderr lines are logged as warnings, npm's own warnings dropped.
        """
        def handle_stdout(line: str) -> None:
            self.log(DeployLogLevel.INFO, line, phase)
            if on_line:
                on_line(line)

        def handle_stderr(line: str) -> None:
            if NPM_WARNING_MARKER not in line.lower():
                self.log(DeployLogLevel.WARN, line, phase)

        return await self.exec_command(
            "npx", args, cwd=cwd, env=env,
            on_stdout=handle_stdout, on_stderr=handle_stderr,
        )

    def cli_failed_result(self, result: CommandResult) -> DeployResult:
        """Failed result for a non-zero CLI exit"""
        return self.create_failed_result(
            f"{self.display_name} CLI exited with code {result.code}",
            result.stderr or result.stdout,
        )

    def env_value(self, config_value: Optional[str], *names: str) -> Optional[str]:
        """Explicit config value, else the first set environment variable"""
        if config_value:
            return config_value
        for name in names:
            value = self.environ.get(name)
            if value:
                return value
        return None
