"""Core functionality for site-deploy"""

from .adapter_registry import AdapterRegistry
from .build_runner import BuildRunner
from .credential_codec import CredentialCodec
from .platforms import SUPPORTED_PLATFORMS, get_platform_info
from .validation_engine import ConfigFieldValidator, ValidationResult

__all__ = [
    "AdapterRegistry",
    "BuildRunner",
    "CredentialCodec",
    "SUPPORTED_PLATFORMS",
    "get_platform_info",
    "ConfigFieldValidator",
    "ValidationResult",
]
