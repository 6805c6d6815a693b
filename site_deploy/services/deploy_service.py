"""Deploy service: runs one deployment at a time through a platform adapter"""

import asyncio
import dataclasses
import logging
import random
import string
import time
import traceback
import webbrowser
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ..adapters.base import DeployAdapter, DeployCallbacks
from ..api.exceptions import (
    BuildError,
    ConfigError,
    DeployCancelledError,
    DeploymentInProgressError,
    SiteDeployError,
    UnsupportedPlatformError,
    ValidationError,
)
from ..constants import (
    MSG_DEPLOY_CANCELLED,
    MSG_DEPLOY_FAILED,
    MSG_DEPLOY_START,
    MSG_DEPLOY_SUCCESS,
    MSG_RETRY,
    DeployLogLevel,
    DeployPhase,
    DeployStatus,
)
from ..core.adapter_registry import AdapterRegistry
from ..core.build_runner import BuildRunner
from ..core.credential_codec import CredentialCodec
from ..core.validation_engine import ValidationResult
from ..models.config import ServiceConfig
from ..models.deploy_config import CustomDeployConfig, DeployConfig
from ..models.platform import PlatformInfo
from ..models.result import (
    DeployHistoryEntry,
    DeployLogEntry,
    DeployProgress,
    DeployResult,
    DeploymentSnapshot,
    utcnow,
)
from ..storage.history import HistoryStore
from ..utils.async_utils import maybe_await

logger = logging.getLogger(__name__)

# Deployment log entries are mirrored here
deploy_logger = logging.getLogger("site_deploy.deploy")

LOG_LEVEL_ORDER = [
    DeployLogLevel.DEBUG,
    DeployLogLevel.INFO,
    DeployLogLevel.SUCCESS,
    DeployLogLevel.WARN,
    DeployLogLevel.ERROR,
]

PYTHON_LOG_LEVELS = {
    DeployLogLevel.DEBUG: logging.DEBUG,
    DeployLogLevel.INFO: logging.INFO,
    DeployLogLevel.SUCCESS: logging.INFO,
    DeployLogLevel.WARN: logging.WARNING,
    DeployLogLevel.ERROR: logging.ERROR,
}

# Progress reaches 100 only on the complete phase
MAX_RUNNING_PROGRESS = 99

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_deploy_id() -> str:
    """``deploy-<epoch ms>-<6 base36 chars>``"""
    suffix = "".join(random.choices(_ID_ALPHABET, k=6))
    return f"deploy-{int(time.time() * 1000)}-{suffix}"


@dataclass
class ActiveDeployment:
    """Transient state of the deployment in flight"""
    id: str
    platform: str
    status: DeployStatus = DeployStatus.IDLE
    progress: DeployProgress = field(default_factory=lambda: DeployProgress(phase=DeployPhase.INIT))
    logs: List[DeployLogEntry] = field(default_factory=list)
    start_time: datetime = field(default_factory=utcnow)
    started: float = field(default_factory=time.monotonic)

    def snapshot(self) -> DeploymentSnapshot:
        return DeploymentSnapshot(
            id=self.id,
            platform=self.platform,
            status=self.status,
            progress=self.progress,
            logs_count=len(self.logs),
            start_time=self.start_time,
            duration=time.monotonic() - self.started,
        )


class DeployService:
    """Orchestrates validate, build and upload for a single deployment

    One deployment may run per instance. Progress, log and status events
    go to ``callbacks``; every ``deploy`` call resolves to a
    ``DeployResult`` and leaves exactly one history entry behind.
    """

    def __init__(self,
                 settings: Optional[ServiceConfig] = None,
                 registry: Optional[AdapterRegistry] = None,
                 build_runner: Optional[BuildRunner] = None,
                 callbacks: Optional[DeployCallbacks] = None,
                 url_opener: Optional[Callable[[str], Any]] = None):
        """
        Initialize deploy service

        Args:
            settings: Service settings (defaults for the current directory)
            registry: Adapter registry, built-in platforms if omitted
            build_runner: Runs the project build
            callbacks: Observers for progress, logs and status
            url_opener: Opens the deployed URL, ``webbrowser.open`` by default
        """
        self.settings = settings or ServiceConfig()
        self.registry = registry or AdapterRegistry()
        self.build_runner = build_runner or BuildRunner(
            self.settings.build_command, self.settings.project_root
        )
        self.callbacks = callbacks or DeployCallbacks()
        self.url_opener = url_opener or webbrowser.open
        self.history = HistoryStore(self.settings.get_history_path(),
                                    self.settings.max_history_entries)
        self.codec = CredentialCodec()

        self._current: Optional[ActiveDeployment] = None
        self._adapter: Optional[DeployAdapter] = None
        self._cancelled = False

    # ------------------------------------------------------------------
    # Platforms
    # ------------------------------------------------------------------

    def get_supported_platforms(self) -> List[PlatformInfo]:
        return self.registry.get_all_platform_info()

    def get_platform_info(self, platform: str) -> Optional[PlatformInfo]:
        return self.registry.get_platform_info(platform)

    async def validate_config(self, config: Union[DeployConfig, Dict[str, Any]]) -> ValidationResult:
        """
        Validate a deploy config against its platform

        Unparseable configs and unknown platforms are reported as validation errors.
        """
        try:
            config = self._coerce_config(config)
            adapter = self.registry.get(config.platform_key)
        except (ConfigError, UnsupportedPlatformError) as e:
            result = ValidationResult()
            result.add_error(str(e))
            return result
        return await adapter.validate_config(config)

    # ------------------------------------------------------------------
    # Deployment
    # ------------------------------------------------------------------

    async def deploy(self, config: Union[DeployConfig, Dict[str, Any]]) -> DeployResult:
        """
        Run one deployment

        Args:
            config: Deploy configuration or its dictionary form

        Returns:
            DeployResult; errors and cancellation are reported in the result

        Raises:
            DeploymentInProgressError: If a deployment is already running
        """
        if self._current is not None:
            raise DeploymentInProgressError(self._current.id)

        state = ActiveDeployment(id=generate_deploy_id(), platform=self._platform_of(config))
        self._current = state
        self._cancelled = False

        result: Optional[DeployResult] = None
        try:
            config = self._coerce_config(config)
            result = await self._run(state, config)
        except DeployCancelledError:
            self._log(state, DeployLogLevel.WARN, MSG_DEPLOY_CANCELLED)
            result = self._cancelled_result()
        except SiteDeployError as e:
            self._log(state, DeployLogLevel.ERROR, MSG_DEPLOY_FAILED.format(error=e))
            result = DeployResult(success=False, error=str(e), error_details=traceback.format_exc())
        except Exception as e:
            logger.debug("Deployment %s raised", state.id, exc_info=True)
            self._log(state, DeployLogLevel.ERROR, MSG_DEPLOY_FAILED.format(error=e))
            result = DeployResult(success=False, error=str(e) or type(e).__name__,
                                  error_details=traceback.format_exc())
        finally:
            if result is None:
                # The surrounding task was cancelled
                result = self._cancelled_result()
            result = self._finish(state, config, result)

        return result

    async def cancel(self) -> bool:
        """
        Request cancellation of the running deployment

        Returns:
            True if a deployment was running
        """
        state = self._current
        if state is None:
            return False

        self._cancelled = True
        self._log(state, DeployLogLevel.WARN, "Cancellation requested")
        if self._adapter is not None:
            await self._adapter.cancel()
        return True

    def get_current_deployment(self) -> Optional[DeploymentSnapshot]:
        return self._current.snapshot() if self._current else None

    def get_current_logs(self) -> List[DeployLogEntry]:
        return list(self._current.logs) if self._current else []

    def get_history(self, limit: Optional[int] = None) -> List[DeployHistoryEntry]:
        return self.history.list(limit)

    def clear_history(self) -> None:
        self.history.clear()
        logger.info("Deploy history cleared")

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _run(self, state: ActiveDeployment, config: DeployConfig) -> DeployResult:
        self._set_status(state, DeployStatus.PREPARING)
        self._update_progress(state, DeployPhase.INIT, 0, 0, "Initializing deployment...")
        self._log(state, DeployLogLevel.INFO,
                  MSG_DEPLOY_START.format(platform=config.platform_key), DeployPhase.INIT)

        adapter = self.registry.get(config.platform_key)
        self._adapter = adapter

        # Missing tools are reported, never fatal
        for warning in adapter.check_dependencies():
            self._log(state, DeployLogLevel.WARN, warning, DeployPhase.VALIDATE)

        self._update_progress(state, DeployPhase.VALIDATE, 5, 0, "Validating configuration...")
        validation = await adapter.validate_config(config)
        for warning in validation.warnings:
            self._log(state, DeployLogLevel.WARN, warning, DeployPhase.VALIDATE)
        if not validation.is_valid:
            raise ValidationError(validation.errors)
        self._log(state, DeployLogLevel.SUCCESS, "Configuration is valid", DeployPhase.VALIDATE)
        self._update_progress(state, DeployPhase.VALIDATE, 10, 100, "Configuration is valid")

        self._raise_if_cancelled()

        if adapter.requires_build and config.build_before_deploy:
            await self._build(state)
            self._raise_if_cancelled()

        config = dataclasses.replace(
            config, dist_dir=str(self._resolve_path(config.dist_dir or self.settings.default_dist_dir)))
        if isinstance(config, CustomDeployConfig):
            # The deploy command runs where the build did
            config = dataclasses.replace(config, cwd=str(self._resolve_path(config.cwd or ".")))

        attempts = max(int(config.retries or 0), 0) + 1
        result = None
        for attempt in range(1, attempts + 1):
            self._set_status(state, DeployStatus.UPLOADING)
            result = await self._deploy_once(state, adapter, config)

            if result.success or result.cancelled or self._cancelled or attempt == attempts:
                break

            self._log(state, DeployLogLevel.WARN,
                      MSG_RETRY.format(attempt=attempt, delay=self.settings.retry_delay))
            await asyncio.sleep(self.settings.retry_delay)
            self._raise_if_cancelled()

        if self._cancelled or result.cancelled:
            raise DeployCancelledError()

        if result.success:
            await self._after_success(state, config, result)

        return result

    async def _build(self, state: ActiveDeployment) -> None:
        self._set_status(state, DeployStatus.BUILDING)
        self._update_progress(state, DeployPhase.BUILD, 15, 0, "Building project...")
        self._log(state, DeployLogLevel.INFO,
                  f"Running build: {self.build_runner.command}", DeployPhase.BUILD)

        try:
            await self.build_runner.run(
                on_log=lambda level, line: self._log(state, level, line, DeployPhase.BUILD),
                on_progress=lambda overall, phase_progress, message: self._update_progress(
                    state, DeployPhase.BUILD, overall, phase_progress, message),
                should_stop=lambda: self._cancelled,
            )
        except BuildError:
            if self._cancelled:
                raise DeployCancelledError() from None
            raise

        self._log(state, DeployLogLevel.SUCCESS, "Build finished", DeployPhase.BUILD)
        self._update_progress(state, DeployPhase.BUILD, 40, 100, "Build finished")

    async def _deploy_once(self, state: ActiveDeployment, adapter: DeployAdapter,
                           config: DeployConfig) -> DeployResult:
        callbacks = DeployCallbacks(
            on_progress=lambda progress: self._on_progress(state, progress),
            on_log=lambda entry: self._append_log(state, entry),
            on_status_change=lambda status: self._set_status(state, status),
        )

        if not config.timeout:
            return await adapter.deploy(config, callbacks)

        try:
            return await asyncio.wait_for(adapter.deploy(config, callbacks), timeout=config.timeout)
        except asyncio.TimeoutError:
            message = f"Deployment timed out after {config.timeout:g}s"
            self._log(state, DeployLogLevel.ERROR, message, DeployPhase.UPLOAD)
            return DeployResult(success=False, error=message)

    async def _after_success(self, state: ActiveDeployment, config: DeployConfig,
                             result: DeployResult) -> None:
        self._set_status(state, DeployStatus.PROCESSING)
        self._log(state, DeployLogLevel.SUCCESS,
                  MSG_DEPLOY_SUCCESS.format(url=result.url or "n/a"), DeployPhase.COMPLETE)

        if config.open_after_deploy and result.url:
            try:
                self.url_opener(result.url)
            except Exception as e:
                self._log(state, DeployLogLevel.WARN, f"Could not open {result.url}: {e}")

        if config.after_deploy is not None:
            await maybe_await(config.after_deploy(result))

        self._update_progress(state, DeployPhase.COMPLETE, 100, 100, "Deployment complete")

    def _finish(self, state: ActiveDeployment, config: Union[DeployConfig, Dict[str, Any]],
                result: DeployResult) -> DeployResult:
        """Stamp the result, record history and clear transient state"""
        result = dataclasses.replace(
            result,
            deploy_id=result.deploy_id or state.id,
            duration=time.monotonic() - state.started,
            timestamp=utcnow(),
        )

        if result.success:
            status = DeployStatus.SUCCESS
        elif result.cancelled:
            status = DeployStatus.CANCELLED
        else:
            status = DeployStatus.FAILED
        self._set_status(state, status)

        entry = DeployHistoryEntry(
            id=state.id,
            platform=state.platform,
            status=status,
            result=result,
            config=self.codec.mask_config(self._config_data(config)),
            start_time=state.start_time,
            end_time=utcnow(),
            logs=list(state.logs),
        )
        self.history.add(entry)

        self._current = None
        self._adapter = None
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _coerce_config(config: Union[DeployConfig, Dict[str, Any]]) -> DeployConfig:
        if isinstance(config, DeployConfig):
            return config
        try:
            return DeployConfig.from_dict(config)
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"Invalid deploy config: {e}") from e

    @staticmethod
    def _platform_of(config: Union[DeployConfig, Dict[str, Any]]) -> str:
        if isinstance(config, DeployConfig):
            return config.platform_key
        platform = config.get("platform") if isinstance(config, dict) else None
        return getattr(platform, "value", platform) or "unknown"

    @staticmethod
    def _config_data(config: Union[DeployConfig, Dict[str, Any]]) -> Dict[str, Any]:
        """History form of a config, including one that never parsed"""
        if isinstance(config, DeployConfig):
            return config.to_dict()
        if not isinstance(config, dict):
            return {}
        return {k: getattr(v, "value", v) for k, v in config.items() if not callable(v)}

    def _resolve_path(self, value: str) -> Path:
        """Resolve a config path against the project root"""
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.settings.project_root / path
        return path

    def _raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise DeployCancelledError()

    @staticmethod
    def _cancelled_result() -> DeployResult:
        return DeployResult(success=False, error=MSG_DEPLOY_CANCELLED, cancelled=True)

    def _set_status(self, state: ActiveDeployment, status: DeployStatus) -> None:
        if state.status == status:
            return
        state.status = status
        self.callbacks.status(status)

    def _update_progress(self, state: ActiveDeployment, phase: DeployPhase, progress: float,
                         phase_progress: float = 0, message: str = "") -> None:
        self._on_progress(state, DeployProgress(
            phase=phase, progress=progress, phase_progress=phase_progress, message=message,
        ))

    def _on_progress(self, state: ActiveDeployment, progress: DeployProgress) -> None:
        value = max(state.progress.progress, progress.progress)
        if progress.phase != DeployPhase.COMPLETE:
            value = min(value, MAX_RUNNING_PROGRESS)
        progress = dataclasses.replace(progress, progress=value)

        state.progress = progress
        self.callbacks.progress(progress)

    def _log(self, state: ActiveDeployment, level: DeployLogLevel, message: str,
             phase: Optional[DeployPhase] = None, data: Any = None) -> None:
        self._append_log(state, DeployLogEntry(
            level=level, message=message, phase=phase or state.progress.phase, data=data,
        ))

    def _append_log(self, state: ActiveDeployment, entry: DeployLogEntry) -> None:
        if entry.phase is None:
            entry.phase = state.progress.phase
        state.logs.append(entry)

        if self.settings.enable_logs and \
                LOG_LEVEL_ORDER.index(entry.level) >= LOG_LEVEL_ORDER.index(self.settings.log_level):
            deploy_logger.log(PYTHON_LOG_LEVELS[entry.level], "[%s] %s", state.id, entry.message)

        self.callbacks.log(entry)
