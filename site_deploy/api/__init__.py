# site_deploy/api/__init__.py
"""API layer for site-deploy"""

from .deployer import Deployer, deploy
from .exceptions import (
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
    # Main classes
    "Deployer",

    # Convenience functions
    "deploy",

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
