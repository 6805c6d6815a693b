"""Deployer API: synchronous entry points for scripts"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ..adapters.base import DeployCallbacks
from ..core.validation_engine import ValidationResult
from ..models.deploy_config import DeployConfig
from ..models.platform import PlatformInfo
from ..models.result import DeployHistoryEntry, DeployResult
from ..services.config_service import ConfigService
from ..services.config_store import DeployConfigStore
from ..services.deploy_service import DeployService
from ..utils.async_utils import run_async
from .exceptions import ConfigError


class Deployer:
    """Deployer class wrapping ``DeployService`` for blocking callers"""

    def __init__(self,
                 project_root: Optional[Union[str, Path]] = None,
                 callbacks: Optional[DeployCallbacks] = None,
                 url_opener: Optional[Callable[[str], Any]] = None):
        """
        Initialize deployer

        Args:
            project_root: Project root (defaults to the current directory)
            callbacks: Progress, log and status observers
            url_opener: Opens the deployed URL when requested
        """
        self.config_service = ConfigService(Path(project_root) if project_root else None)
        self.settings = self.config_service.settings
        self.service = DeployService(self.settings, callbacks=callbacks, url_opener=url_opener)
        self.config_store = DeployConfigStore(
            self.settings.project_root, self.settings.get_configs_path()
        )

    def platforms(self) -> List[PlatformInfo]:
        return self.service.get_supported_platforms()

    def validate(self, config: Union[DeployConfig, Dict[str, Any]]) -> ValidationResult:
        return run_async(self.service.validate_config(config))

    def resolve_config(self,
                       platform: Optional[str] = None,
                       saved: Optional[str] = None,
                       **overrides) -> DeployConfig:
        """
        Build a deploy config from the settings file, a saved config and overrides

        Later sources win: project ``deploy:`` section, then the saved config,
        then explicit overrides.

        Raises:
            ConfigError: If the saved config does not exist or no platform is known
        """
        data: Dict[str, Any] = dict(self.settings.deploy)

        if saved:
            entry = self.config_store.get_config(saved)
            if entry is None:
                raise ConfigError(f"Saved deploy config not found: {saved}")
            data.update(entry.config)
            data["platform"] = entry.platform

        if platform:
            if data.get("platform") and data["platform"] != platform:
                # Options of another platform do not apply
                data = {}
            data["platform"] = platform

        data.update({k: v for k, v in overrides.items() if v is not None})
        data.setdefault("dist_dir", self.settings.default_dist_dir)

        if not data.get("platform"):
            raise ConfigError("No deploy platform given and none set in the project settings")
        return DeployConfig.from_dict(data)

    def deploy(self, config: Union[DeployConfig, Dict[str, Any]],
               saved_name: Optional[str] = None) -> DeployResult:
        """
        Run a deployment to completion

        Args:
            config: Deploy configuration
            saved_name: Saved config this deployment came from; its last
                deploy time is updated on success

        Returns:
            DeployResult
        """
        result = run_async(self.service.deploy(config))
        if result.success and saved_name:
            self.config_store.update_last_deploy_time(saved_name)
        return result

    def history(self, limit: Optional[int] = None) -> List[DeployHistoryEntry]:
        return self.service.get_history(limit)

    def clear_history(self) -> None:
        self.service.clear_history()


def deploy(platform: Optional[str] = None,
           project_root: Optional[Union[str, Path]] = None,
           saved: Optional[str] = None,
           **options) -> DeployResult:
    """
    Deploy the project's build output

    This is a convenience function that creates a Deployer instance
    and performs the deployment.

    Args:
        platform: Platform key (defaults to the project settings)
        project_root: Project root directory
        saved: Name of a saved deploy config to start from
        **options: Deploy config overrides

    Returns:
        DeployResult: Deployment result

    Raises:
        ConfigError: If no usable configuration can be assembled
    """
    deployer = Deployer(project_root)
    config = deployer.resolve_config(platform, saved=saved, **options)
    return deployer.deploy(config, saved_name=saved)
