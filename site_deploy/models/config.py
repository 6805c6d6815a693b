"""Service configuration data models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ..constants import (
    DEFAULT_BUILD_COMMAND,
    DEFAULT_DIST_DIR,
    DEFAULT_MAX_HISTORY_ENTRIES,
    DEFAULT_RETRY_DELAY,
    DEFAULT_STATE_DIR,
    HISTORY_FILE_NAME,
    SAVED_CONFIGS_FILE_NAME,
    DeployLogLevel,
)


@dataclass
class ServiceConfig:
    """Settings for the deploy service and its state files"""

    project_root: Path = field(default_factory=Path.cwd)
    default_dist_dir: str = DEFAULT_DIST_DIR
    state_dir: str = DEFAULT_STATE_DIR
    history_path: Optional[Path] = None
    configs_path: Optional[Path] = None
    max_history_entries: int = DEFAULT_MAX_HISTORY_ENTRIES
    enable_logs: bool = True
    log_level: DeployLogLevel = DeployLogLevel.INFO
    build_command: str = DEFAULT_BUILD_COMMAND
    retry_delay: float = DEFAULT_RETRY_DELAY

    # Raw `deploy:` section of the project file
    deploy: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.project_root = Path(self.project_root)
        if isinstance(self.log_level, str):
            self.log_level = DeployLogLevel(self.log_level)
        if self.max_history_entries < 1:
            raise ValueError("max_history_entries must be at least 1")

    @property
    def state_path(self) -> Path:
        """Absolute state directory"""
        path = Path(self.state_dir)
        if not path.is_absolute():
            path = self.project_root / path
        return path

    def get_history_path(self) -> Path:
        return Path(self.history_path) if self.history_path else self.state_path / HISTORY_FILE_NAME

    def get_configs_path(self) -> Path:
        return Path(self.configs_path) if self.configs_path else self.state_path / SAVED_CONFIGS_FILE_NAME

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "default_dist_dir": self.default_dist_dir,
            "state_dir": self.state_dir,
            "max_history_entries": self.max_history_entries,
            "enable_logs": self.enable_logs,
            "log_level": self.log_level.value,
            "build_command": self.build_command,
            "retry_delay": self.retry_delay,
        }
        if self.history_path:
            data["history_path"] = str(self.history_path)
        if self.configs_path:
            data["configs_path"] = str(self.configs_path)
        if self.deploy:
            data["deploy"] = self.deploy
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], project_root: Optional[Path] = None) -> "ServiceConfig":
        """Create from dictionary"""
        settings = data.get("settings", {}) or {}
        return cls(
            project_root=project_root or Path.cwd(),
            default_dist_dir=settings.get("dist_dir", DEFAULT_DIST_DIR),
            state_dir=settings.get("state_dir", DEFAULT_STATE_DIR),
            history_path=settings.get("history_path"),
            configs_path=settings.get("configs_path"),
            max_history_entries=int(settings.get("max_history_entries", DEFAULT_MAX_HISTORY_ENTRIES)),
            enable_logs=bool(settings.get("enable_logs", True)),
            log_level=settings.get("log_level", DeployLogLevel.INFO.value),
            build_command=settings.get("build_command", DEFAULT_BUILD_COMMAND),
            retry_delay=float(settings.get("retry_delay", DEFAULT_RETRY_DELAY)),
            deploy=data.get("deploy", {}) or {},
        )
