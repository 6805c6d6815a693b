# site_deploy/adapters/__init__.py
"""Platform adapters for site-deploy

Concrete adapters are imported lazily by the adapter registry so that
heavy transport libraries load only when their platform is used.
"""

from .base import CommandResult, DeployAdapter, DeployCallbacks, UploadFile

__all__ = [
    'CommandResult',
    'DeployAdapter',
    'DeployCallbacks',
    'UploadFile',
]
