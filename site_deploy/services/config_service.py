"""Project settings file management"""

import logging
import os
import shutil
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..api.exceptions import ConfigError
from ..constants import (
    DEFAULT_BUILD_COMMAND,
    DEFAULT_DIST_DIR,
    DEFAULT_MAX_HISTORY_ENTRIES,
    DEFAULT_STATE_DIR,
    ENV_BUILD_COMMAND,
    ENV_LOG_LEVEL,
    ENV_MAX_HISTORY,
    ENV_STATE_DIR,
    PROJECT_CONFIG_FILE,
    DeployLogLevel,
)
from ..models.config import ServiceConfig

logger = logging.getLogger(__name__)

SETTINGS_SCHEMA = {
    "type": "object",
    "properties": {
        "settings": {
            "type": ["object", "null"],
            "properties": {
                "dist_dir": {"type": "string"},
                "state_dir": {"type": "string"},
                "history_path": {"type": "string"},
                "configs_path": {"type": "string"},
                "max_history_entries": {"type": "integer", "minimum": 1},
                "enable_logs": {"type": "boolean"},
                "log_level": {"enum": [level.value for level in DeployLogLevel]},
                "build_command": {"type": "string"},
                "retry_delay": {"type": "number", "minimum": 0},
            },
        },
        "deploy": {
            "type": ["object", "null"],
            "properties": {
                "platform": {"type": "string"},
            },
        },
    },
}

DEFAULT_PROJECT_CONFIG = {
    "settings": {
        "dist_dir": DEFAULT_DIST_DIR,
        "state_dir": DEFAULT_STATE_DIR,
        "max_history_entries": DEFAULT_MAX_HISTORY_ENTRIES,
        "build_command": DEFAULT_BUILD_COMMAND,
        "log_level": DeployLogLevel.INFO.value,
    },
    "deploy": {
        "platform": "netlify",
        "dist_dir": DEFAULT_DIST_DIR,
    },
}


class ConfigService:
    """Loads ``.site-deploy.yaml`` and applies environment overrides"""

    def __init__(self, project_root: Optional[Path] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """Initialize config service

        Args:
            project_root: Project root directory
            environ: Environment for overrides (defaults to os.environ)
        """
        self.project_root = Path(project_root or Path.cwd()).resolve()
        self.config_path = self.project_root / PROJECT_CONFIG_FILE
        self._environ = environ
        self._settings: Optional[ServiceConfig] = None

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    @property
    def settings(self) -> ServiceConfig:
        """Current settings (lazy load)"""
        if self._settings is None:
            self._settings = self.load_settings()
        return self._settings

    def load_raw(self) -> Dict[str, Any]:
        """Parsed settings file, or an empty mapping when there is none

        Raises:
            ConfigError: If the file is unreadable, malformed or fails schema validation
        """
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise ConfigError(f"Cannot read {self.config_path}: {e}") from e

        # Expand environment variables in the file
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{self.config_path} must contain a mapping at the top level")

        self._validate_schema(data)
        return data

    def _validate_schema(self, data: Dict[str, Any]) -> None:
        import jsonschema

        try:
            jsonschema.validate(data, SETTINGS_SCHEMA)
        except jsonschema.ValidationError as e:
            location = ".".join(str(p) for p in e.absolute_path) or "<root>"
            raise ConfigError(f"Invalid settings in {self.config_path} at {location}: {e.message}") from e

    def load_settings(self) -> ServiceConfig:
        """Load settings from file and environment

        Returns:
            ServiceConfig
        """
        data = self.load_raw()
        try:
            settings = ServiceConfig.from_dict(data, project_root=self.project_root)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid settings in {self.config_path}: {e}") from e

        self._apply_env_overrides(settings)
        logger.debug("Loaded settings for %s", self.project_root)
        return settings

    def _apply_env_overrides(self, settings: ServiceConfig) -> None:
        env = self.environ

        if env.get(ENV_LOG_LEVEL):
            try:
                settings.log_level = DeployLogLevel(env[ENV_LOG_LEVEL].lower())
            except ValueError:
                raise ConfigError(f"{ENV_LOG_LEVEL} must be one of: "
                                  f"{', '.join(level.value for level in DeployLogLevel)}")

        if env.get(ENV_BUILD_COMMAND):
            settings.build_command = env[ENV_BUILD_COMMAND]

        if env.get(ENV_MAX_HISTORY):
            try:
                value = int(env[ENV_MAX_HISTORY])
            except ValueError:
                raise ConfigError(f"{ENV_MAX_HISTORY} must be an integer")
            if value < 1:
                raise ConfigError(f"{ENV_MAX_HISTORY} must be at least 1")
            settings.max_history_entries = value

        if env.get(ENV_STATE_DIR):
            settings.state_dir = env[ENV_STATE_DIR]

    def get_deploy_section(self) -> Dict[str, Any]:
        """``deploy:`` mapping of the settings file"""
        return dict(self.load_raw().get("deploy") or {})

    def create_default(self, force: bool = False) -> Path:
        """Write a starter settings file

        Args:
            force: Overwrite an existing file (a ``.bak`` copy is kept)

        Returns:
            Path of the written file
        """
        if self.config_path.exists():
            if not force:
                raise ConfigError(f"{self.config_path} already exists")
            backup_path = self.config_path.with_suffix('.yaml.bak')
            shutil.copy2(self.config_path, backup_path)

        with open(self.config_path, 'w', encoding='utf-8') as f:
            yaml.dump(DEFAULT_PROJECT_CONFIG, f, default_flow_style=False, sort_keys=False)

        self._settings = None
        logger.info("Settings written to %s", self.config_path)
        return self.config_path
