# site_deploy/services/__init__.py
"""Business logic services for site-deploy"""

from .config_service import ConfigService
from .config_store import DeployConfigStore
from .deploy_service import DeployService

__all__ = [
    "ConfigService",
    "DeployConfigStore",
    "DeployService",
]
