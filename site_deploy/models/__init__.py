# site_deploy/models/__init__.py
"""Data models for site-deploy"""

from .config import ServiceConfig
from .deploy_config import (
    CONFIG_VARIANTS,
    CloudflareDeployConfig,
    CustomDeployConfig,
    DeployConfig,
    FTPDeployConfig,
    GitHubPagesDeployConfig,
    NetlifyDeployConfig,
    SFTPDeployConfig,
    SSHDeployConfig,
    SurgeDeployConfig,
    VercelDeployConfig,
)
from .platform import ConfigField, PlatformInfo
from .result import (
    DeployHistoryEntry,
    DeployLogEntry,
    DeploymentSnapshot,
    DeployProgress,
    DeployResult,
    SavedDeployConfig,
)

__all__ = [
    # Settings
    "ServiceConfig",

    # Deploy config variants
    "DeployConfig",
    "NetlifyDeployConfig",
    "VercelDeployConfig",
    "CloudflareDeployConfig",
    "GitHubPagesDeployConfig",
    "SurgeDeployConfig",
    "FTPDeployConfig",
    "SFTPDeployConfig",
    "SSHDeployConfig",
    "CustomDeployConfig",
    "CONFIG_VARIANTS",

    # Platform metadata
    "ConfigField",
    "PlatformInfo",

    # Results
    "DeployResult",
    "DeployProgress",
    "DeployLogEntry",
    "DeployHistoryEntry",
    "SavedDeployConfig",
    "DeploymentSnapshot",
]
