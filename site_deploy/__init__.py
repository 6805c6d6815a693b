"""Site Deploy - ship static site builds to hosting platforms and servers.

This tool validates a deploy configuration, optionally builds the project,
and uploads the build output through a platform adapter (Netlify, Vercel,
Cloudflare Pages, GitHub Pages, Surge, FTP, SFTP, SSH or a custom command),
keeping a per-project deploy history.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Core API
from .api.deployer import Deployer, deploy
from .adapters.base import DeployAdapter, DeployCallbacks
from .core.adapter_registry import AdapterRegistry
from .services.config_store import DeployConfigStore
from .services.deploy_service import DeployService

# Data models
from .models.config import ServiceConfig
from .models.deploy_config import DeployConfig
from .models.result import DeployResult, DeployProgress, DeployLogEntry, DeployHistoryEntry

# Exceptions
from .api.exceptions import (
    SiteDeployError,
    ConfigError,
    ValidationError,
    UnsupportedPlatformError,
    BuildError,
    TransferError,
    DistDirError,
    DeployCancelledError,
    DeploymentInProgressError,
    StorageError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "Deployer",
    "DeployService",
    "DeployConfigStore",
    "AdapterRegistry",
    "DeployAdapter",
    "DeployCallbacks",

    # Core API functions
    "deploy",

    # Data models
    "ServiceConfig",
    "DeployConfig",
    "DeployResult",
    "DeployProgress",
    "DeployLogEntry",
    "DeployHistoryEntry",

    # Exceptions
    "SiteDeployError",
    "ConfigError",
    "ValidationError",
    "UnsupportedPlatformError",
    "BuildError",
    "TransferError",
    "DistDirError",
    "DeployCancelledError",
    "DeploymentInProgressError",
    "StorageError",
]
