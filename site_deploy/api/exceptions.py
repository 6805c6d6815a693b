"""Exception definitions for site-deploy API"""

from typing import List, Optional

from ..constants import ErrorCode


class SiteDeployError(Exception):
    """Base exception for site-deploy"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigError(SiteDeployError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_ERROR)


class ValidationError(SiteDeployError):
    """Deploy configuration failed validation"""

    def __init__(self, errors: List[str]):
        message = "Configuration validation failed: " + ", ".join(errors)
        super().__init__(message, ErrorCode.VALIDATION_FAILED)
        self.errors = list(errors)


class UnsupportedPlatformError(SiteDeployError):
    """No usable adapter for a platform"""

    def __init__(self, platform: str, reason: str, cause: Optional[BaseException] = None):
        message = f"Unsupported deploy platform: {platform} ({reason})"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, ErrorCode.UNSUPPORTED_PLATFORM)
        self.platform = platform
        self.reason = reason
        self.cause = cause


class BuildError(SiteDeployError):
    """Build step exited with a non-zero code"""

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message, ErrorCode.BUILD_FAILED)
        self.exit_code = exit_code


class TransferError(SiteDeployError):
    """File transfer or remote command error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.TRANSFER_FAILED)


class DistDirError(SiteDeployError):
    """Artifact directory is missing or empty"""

    def __init__(self, message: str, dist_dir: str):
        super().__init__(message, ErrorCode.DIST_DIR_INVALID)
        self.dist_dir = dist_dir


class DeployCancelledError(SiteDeployError):
    """Deployment was cancelled by the caller"""

    def __init__(self, message: str = "Deployment cancelled"):
        super().__init__(message, ErrorCode.DEPLOY_CANCELLED)


class DeploymentInProgressError(SiteDeployError):
    """A deployment is already running on this service"""

    def __init__(self, deploy_id: str):
        super().__init__(
            f"Deployment {deploy_id} is still in progress; wait for it or cancel it first",
            ErrorCode.DEPLOYMENT_IN_PROGRESS
        )
        self.deploy_id = deploy_id


class StorageError(SiteDeployError):
    """State file read/write error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.STORAGE_ERROR)
